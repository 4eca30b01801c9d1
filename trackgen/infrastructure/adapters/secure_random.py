from __future__ import annotations

import secrets

from trackgen.application.interfaces import ISecureRandomSource


class SecretsRandomSource(ISecureRandomSource):
    """ISecureRandomSource backed by the OS CSPRNG via ``secrets``."""

    def next_symbol(self, alphabet_size: int) -> int:
        if alphabet_size <= 0:
            raise ValueError("alphabet_size must be positive")
        return secrets.randbelow(alphabet_size)
