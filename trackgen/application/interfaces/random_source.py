from __future__ import annotations
from typing import Protocol


class ISecureRandomSource(Protocol):
    """Cryptographically unpredictable source of uniform symbol indexes."""

    def next_symbol(self, alphabet_size: int) -> int:
        """Return an int in [0, alphabet_size)."""
        ...
