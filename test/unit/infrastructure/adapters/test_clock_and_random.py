import datetime as _dt
from collections import Counter

import pytest

from trackgen.infrastructure.adapters import SecretsRandomSource, SystemClock


@pytest.mark.adapters
def test_system_clock_is_utc_aware():
    before = _dt.datetime.now(_dt.timezone.utc)
    now = SystemClock().now()
    after = _dt.datetime.now(_dt.timezone.utc)

    assert now.tzinfo is not None
    assert now.utcoffset() == _dt.timedelta(0)
    assert before <= now <= after


@pytest.mark.adapters
def test_secrets_random_source_stays_in_range_and_covers_alphabet():
    source = SecretsRandomSource()
    draws = [source.next_symbol(36) for _ in range(20_000)]

    assert min(draws) >= 0
    assert max(draws) < 36
    counts = Counter(draws)
    assert len(counts) == 36
    # ~555 expected per symbol; very loose bound
    assert min(counts.values()) > 300


@pytest.mark.adapters
def test_secrets_random_source_rejects_empty_alphabet():
    with pytest.raises(ValueError):
        SecretsRandomSource().next_symbol(0)
