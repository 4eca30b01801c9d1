import datetime as _dt

import pytest

from trackgen.application.generation.candidate import (
    ALPHABET,
    TIME_MASK,
    TRACKING_NUMBER_LENGTH,
    TrackingNumberGenerator,
    encode_time_field,
    epoch_millis,
    is_valid_tracking_number,
)
from trackgen.infrastructure.adapters import SecretsRandomSource

from conftest import FIXED_NOW


class CyclingRandom:
    """Deterministic stand-in for the secure random source."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def next_symbol(self, alphabet_size: int) -> int:
        self.calls.append(alphabet_size)
        return self.values[(len(self.calls) - 1) % len(self.values)]


def _decode(field: str) -> int:
    return sum(ALPHABET.index(ch) * 36**i for i, ch in enumerate(field))


class TestEncodeTimeField:
    def test_zero_is_all_first_symbol(self):
        assert encode_time_field(0) == "AAAAAAAA"

    def test_least_significant_digit_first(self):
        assert encode_time_field(35) == "9AAAAAAA"
        assert encode_time_field(36) == "ABAAAAAA"

    def test_only_lower_40_bits_are_used(self):
        assert encode_time_field(1 << 40) == "AAAAAAAA"
        assert encode_time_field((1 << 40) + 37) == encode_time_field(37)

    def test_round_trips_masked_timestamp(self):
        millis = epoch_millis(FIXED_NOW)
        field = encode_time_field(millis)
        assert len(field) == 8
        assert _decode(field) == millis & TIME_MASK


def test_epoch_millis_treats_naive_as_utc():
    naive = FIXED_NOW.replace(tzinfo=None)
    assert epoch_millis(naive) == epoch_millis(FIXED_NOW)
    assert epoch_millis(_dt.datetime(1970, 1, 1, 0, 0, 1, tzinfo=_dt.timezone.utc)) == 1000


def test_generate_concatenates_time_then_random_field():
    rnd = CyclingRandom([1])
    gen = TrackingNumberGenerator(rnd)

    value = gen.generate(FIXED_NOW)

    assert value[:8] == encode_time_field(epoch_millis(FIXED_NOW))
    assert value[8:] == "BBBBBBBB"
    assert rnd.calls == [36] * 8


def test_same_instant_same_time_field_random_field_independent():
    gen_a = TrackingNumberGenerator(CyclingRandom([0, 5, 10]))
    gen_b = TrackingNumberGenerator(CyclingRandom([35, 2]))

    a = gen_a.generate(FIXED_NOW)
    b = gen_b.generate(FIXED_NOW)

    assert a[:8] == b[:8]
    assert a[8:] == "AFKAFKAF"
    assert b[8:] == "9C9C9C9C"


@pytest.mark.parametrize("offset_ms", [0, 1, 999, 86_400_000, 10**12])
def test_format_invariant_with_real_random_source(offset_ms):
    gen = TrackingNumberGenerator(SecretsRandomSource())
    now = FIXED_NOW + _dt.timedelta(milliseconds=offset_ms)
    for _ in range(200):
        value = gen.generate(now)
        assert len(value) == TRACKING_NUMBER_LENGTH
        assert set(value) <= set(ALPHABET)
        assert is_valid_tracking_number(value)


def test_is_valid_tracking_number_rejects_bad_values():
    assert not is_valid_tracking_number("abcdEFGH12345678")
    assert not is_valid_tracking_number("AAAAAAAABBBBBBB")
    assert not is_valid_tracking_number("AAAAAAAABBBBBBBB-")
    assert not is_valid_tracking_number(None)  # type: ignore[arg-type]
    assert is_valid_tracking_number("AAAAAAAABBBBBBBB")
