from __future__ import annotations

import logging
from time import perf_counter

from trackgen.application.interfaces import (
    IClock,
    ITrackingNumberGenerator,
    IUniquenessStore,
    InsertResult,
)
from trackgen.application.generation.metrics import MetricsRecorder, MetricsSnapshot
from trackgen.application.generation.outcomes import (
    Attempt,
    AttemptResult,
    Exhausted,
    GenerationOutcome,
    StoreFailure,
    Success,
)
from trackgen.core.exceptions import (
    GenerationExhaustedError,
    GenerationStoreError,
    StoreUnavailableError,
)
from trackgen.core.pyd_schemas import ShipmentAttributes

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 10

# Raised by adapters when the backing store is unreachable. Anything else is a
# bug in the adapter and propagates.
STORE_ERRORS = (StoreUnavailableError, OSError)


class GenerateTrackingNumberUseCase:
    """Issue a tracking number that the store accepted as unique.

    Each attempt asks the generator for a candidate, pre-checks it with
    ``store.exists`` and then claims it with ``store.insert``. The pre-check
    only saves a doomed insert; uniqueness is decided by the store's
    constraint, so a CONFLICT at insert time counts as a collision exactly
    like a positive pre-check. Store errors end the call at once.
    """

    def __init__(
        self,
        store: IUniquenessStore,
        generator: ITrackingNumberGenerator,
        clock: IClock,
        metrics: MetricsRecorder,
        *,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._store = store
        self._generator = generator
        self._clock = clock
        self._metrics = metrics
        self.max_attempts = max_attempts

    def execute(self, attributes: ShipmentAttributes) -> GenerationOutcome:
        logger.info(
            "Generating tracking number for customer: %s from %s to %s",
            attributes.customer_id,
            attributes.origin_country_id,
            attributes.destination_country_id,
        )
        start = perf_counter()

        for attempt_no in range(1, self.max_attempts + 1):
            attempt = self._attempt(attributes)

            if attempt.result is AttemptResult.ACCEPTED:
                elapsed_ms = _elapsed_ms(start)
                self._metrics.record_success(elapsed_ms)
                logger.info(
                    "Successfully generated tracking number: %s on attempt %d in %.3fms",
                    attempt.tracking_number,
                    attempt_no,
                    elapsed_ms,
                )
                return Success(
                    tracking_number=attempt.tracking_number,
                    created_at=attempt.created_at,
                    attempts=attempt_no,
                    elapsed_ms=elapsed_ms,
                )

            if attempt.result is AttemptResult.STORE_ERROR:
                elapsed_ms = _elapsed_ms(start)
                self._metrics.record_failure()
                logger.error(
                    "Uniqueness store failed on attempt %d after %.3fms: %s",
                    attempt_no,
                    elapsed_ms,
                    attempt.cause,
                )
                return StoreFailure(
                    cause=attempt.cause,
                    attempts=attempt_no,
                    elapsed_ms=elapsed_ms,
                )

            self._metrics.record_collision()
            logger.warning(
                "Tracking number collision detected: %s on attempt: %d",
                attempt.tracking_number,
                attempt_no,
            )

        elapsed_ms = _elapsed_ms(start)
        self._metrics.record_failure()
        logger.error(
            "Failed to generate unique tracking number after %d attempts (%.3fms)",
            self.max_attempts,
            elapsed_ms,
        )
        return Exhausted(attempts=self.max_attempts, elapsed_ms=elapsed_ms)

    def generate_or_raise(self, attributes: ShipmentAttributes) -> Success:
        """Like ``execute`` but raises for anything other than Success."""
        outcome = self.execute(attributes)
        if isinstance(outcome, Success):
            return outcome
        if isinstance(outcome, Exhausted):
            raise GenerationExhaustedError(
                f"Failed to generate unique tracking number after {outcome.attempts} attempts",
                attempts=outcome.attempts,
                elapsed_ms=outcome.elapsed_ms,
            )
        raise GenerationStoreError(
            "Failed to generate tracking number",
            attempts=outcome.attempts,
            elapsed_ms=outcome.elapsed_ms,
        ) from outcome.cause

    def current_stats(self) -> MetricsSnapshot:
        return self._metrics.snapshot()

    def _attempt(self, attributes: ShipmentAttributes) -> Attempt:
        now = self._clock.now()
        candidate = self._generator.generate(now)

        try:
            taken = self._store.exists(candidate)
        except STORE_ERRORS as e:
            return Attempt(AttemptResult.STORE_ERROR, candidate, now, e)
        if taken:
            return Attempt(AttemptResult.COLLISION, candidate, now)

        logger.debug("Pre-check passed for tracking number: %s", candidate)
        try:
            inserted = self._store.insert(candidate, attributes, now)
        except STORE_ERRORS as e:
            return Attempt(AttemptResult.STORE_ERROR, candidate, now, e)
        if inserted == InsertResult.CONFLICT:
            return Attempt(AttemptResult.COLLISION, candidate, now)
        if inserted == InsertResult.OK:
            return Attempt(AttemptResult.ACCEPTED, candidate, now)
        return Attempt(
            AttemptResult.STORE_ERROR,
            candidate,
            now,
            ValueError(f"Unexpected insert result: {inserted!r}"),
        )


def _elapsed_ms(start: float) -> float:
    return (perf_counter() - start) * 1000.0
