"""Auxiliary (subsidiary ledger) account codes for clients and providers.

A counterparty gets its account code from a hash of its name, so the same
client always lands in the same 430 account without a lookup table. The
hash is the classic ``h = c + ((h << 5) - h)`` string hash as evaluated by
a JavaScript engine: the shift operates on the 32-bit signed view of ``h``
while the addition and subtraction do not wrap. Codes issued in earlier
years depend on reproducing that exactly.

Distinct names can collide on the same code; collisions are not detected.
"""

from typing import Optional

CLIENT_PREFIX = "430"
PROVIDER_PREFIX = "410"

SUFFIX_LENGTH = 5


def _to_int32(value: int) -> int:
    """Wrap an integer to the signed 32-bit range."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_units(text: str) -> list[int]:
    """Return the UTF-16 code units of text (surrogate pairs split)."""
    raw = text.encode("utf-16-le")
    return [int.from_bytes(raw[i : i + 2], "little") for i in range(0, len(raw), 2)]


def name_hash(name: str) -> int:
    """Compute the rolling hash of an already normalized name."""
    h = 0
    for unit in _utf16_units(name):
        h = unit + (_to_int32(_to_int32(h) << 5) - h)
    return h


def derive_aux_account(name: Optional[str], prefix: str) -> str:
    """Derive the auxiliary account code for a counterparty.

    Args:
        name: Client or provider name (case and surrounding spaces ignored)
        prefix: Parent account prefix, e.g. "430" for clients

    Returns:
        prefix followed by a five digit suffix, e.g. "43012345"
    """
    clean_name = str(name or "").strip().upper()
    if not clean_name:
        return f"{prefix}{'0' * SUFFIX_LENGTH}"

    suffix = str(abs(name_hash(clean_name)))[:SUFFIX_LENGTH].ljust(SUFFIX_LENGTH, "0")
    return f"{prefix}{suffix}"


def client_account(name: Optional[str]) -> str:
    """Auxiliary 430 account for a client."""
    return derive_aux_account(name, CLIENT_PREFIX)


def provider_account(name: Optional[str]) -> str:
    """Auxiliary 410 account for a provider."""
    return derive_aux_account(name, PROVIDER_PREFIX)
