"""Unique identifier generation for plugin processor/controller IDs.

VST3 plugins identify their processor and controller with 128-bit IDs that
are embedded in the generated C++ sources as four 32-bit literals, and in
snapshot metadata as a single uppercase hex string.
"""

from __future__ import annotations

import re
import secrets
from collections.abc import Callable

_HEX_RE = re.compile(r"^[0-9a-f]{32}$")


def random_hex() -> str:
    """Return 128 bits from the OS CSPRNG as 32 lowercase hex digits."""
    return secrets.token_hex(16)


class UniqueID:
    """A 128-bit identifier with its two source renderings."""

    def __init__(self, hex_value: str) -> None:
        value = hex_value.replace("-", "").lower()
        if not _HEX_RE.match(value):
            raise ValueError(f"Expected 32 hex digits, got: {hex_value!r}")
        self.hex = value

    def as_snapshot_id(self) -> str:
        """Uppercase unbroken hex, e.g. ``"0123ABCD..."``."""
        return self.hex.upper()

    def as_c_string(self) -> str:
        """Four 32-bit C literals, e.g. ``"0x01234567, 0x89abcdef, ..."``."""
        groups = [self.hex[i:i + 8] for i in range(0, 32, 8)]
        return ", ".join(f"0x{group}" for group in groups)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, UniqueID) and other.hex == self.hex

    def __hash__(self) -> int:
        return hash(self.hex)

    def __repr__(self) -> str:
        return f"UniqueID({self.hex!r})"


class IdentifierGenerator:
    """Produces independent random ``UniqueID`` values.

    The randomness source is injectable so tests can substitute a
    deterministic sequence; it must return 32 hex digits (UUID-style dashes
    are accepted and stripped).
    """

    def __init__(self, source: Callable[[], str] = random_hex) -> None:
        self._source = source

    def generate(self) -> UniqueID:
        return UniqueID(self._source())
