"""
Random number generation for deck shuffling.

Uses PCG64DXSM (Permuted Congruential Generator with DXSM output function):
1. Generate a cryptographic seed (96 bytes / 768 bits) via secrets module
2. Derive the deal RNG state via SHA512 with domain separation (versioned prefix)
3. Use PCG64DXSM to generate high-quality random uint64 values
4. Apply Fisher-Yates shuffle with rejection sampling for a provably unbiased permutation

A seed fully determines a deal, so a game can be restarted or replayed from
its seed alone. 768 bits of seed comfortably exceed 52! (about 2^226).

Reference: O'Neill, M. (2014). "PCG: A Family of Simple Fast Space-Efficient
Statistically Good Algorithms for Random Number Generation."
"""

import hashlib
import secrets
from typing import TypeVar

SEED_BYTES = 96
RNG_VERSION = "pcg64dxsm-v1"
_DECK_DOMAIN_PREFIX = b"solitaire-deck-v1:"

# PCG64DXSM constants
_PCG_MULTIPLIER = 0x2360ED051FC65DA44385DF649FCCF645
_PCG_DXSM_MUL = 0xDA942042E4DD58B5
_UINT128_MASK = (1 << 128) - 1
_UINT64_MASK = (1 << 64) - 1

T = TypeVar("T")


def validate_seed_hex(seed_hex: str) -> None:
    """Validate that a seed string is the correct hex format.

    Enforces exact length (192 hex chars = 96 bytes) and valid hex characters.
    Raises TypeError for non-string input, ValueError for invalid format.
    """
    if not isinstance(seed_hex, str):
        raise TypeError(f"Seed must be a string, got {type(seed_hex).__name__}")
    expected_length = SEED_BYTES * 2
    if len(seed_hex) != expected_length:
        raise ValueError(f"Seed must be exactly {expected_length} hex characters, got {len(seed_hex)}")
    try:
        bytes.fromhex(seed_hex)
    except ValueError:
        raise ValueError("Seed contains invalid hex characters") from None


class PCG64DXSM:
    """
    Pure Python PCG64DXSM (Permuted Congruential Generator).

    Uses a 128-bit LCG state with the full 128-bit multiplier and the DXSM
    (double-xorshift-multiply) output permutation for 64-bit output.
    """

    def __init__(self, state: int, increment: int) -> None:
        self._inc = ((increment << 1) | 1) & _UINT128_MASK  # increment must be odd
        self._state = (state + self._inc) & _UINT128_MASK
        self._state = (self._state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK
        self._state = (self._state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK

    def next_uint64(self) -> int:
        """Generate the next 64-bit unsigned integer and advance state."""
        state = self._state
        hi = (state >> 64) & _UINT64_MASK
        lo = state & _UINT64_MASK
        lo = lo | 1

        hi ^= hi >> 32
        hi = (hi * _PCG_DXSM_MUL) & _UINT64_MASK
        hi ^= hi >> 48
        hi = (hi * lo) & _UINT64_MASK

        self._state = (state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK

        return hi


def generate_seed() -> str:
    """Generate a cryptographic seed as a hex string (192 chars)."""
    return secrets.token_bytes(SEED_BYTES).hex()


def derive_deck_rng(seed_hex: str) -> PCG64DXSM:
    """
    Derive the deal PCG64DXSM from a game seed.

    SHA512(_DECK_DOMAIN_PREFIX + seed_bytes) produces 64 bytes; the first 16
    bytes become the PCG state and the next 16 bytes become the increment.
    """
    validate_seed_hex(seed_hex)
    derived = hashlib.sha512(_DECK_DOMAIN_PREFIX + bytes.fromhex(seed_hex)).digest()
    state = int.from_bytes(derived[:16], byteorder="little")
    increment = int.from_bytes(derived[16:32], byteorder="little")
    return PCG64DXSM(state, increment)


def bounded_random(pcg: PCG64DXSM, bound: int) -> int:
    """
    Generate an unbiased random integer in [0, bound) via rejection sampling.

    Rejects values from the partial final bucket to eliminate modulo bias.
    """
    if bound <= 0 or bound > (1 << 64):
        raise ValueError("bound must be in (0, 2^64]")
    limit = (1 << 64) - ((1 << 64) % bound)
    while True:
        r = pcg.next_uint64()
        if r < limit:
            return r % bound


def fisher_yates_shuffle(items: list[T], pcg: PCG64DXSM) -> list[T]:
    """
    Perform a Fisher-Yates (Knuth) shuffle and return a new list.

    For i in n-1..1: swap items[i] with items[j], j uniform in [0, i].
    """
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = bounded_random(pcg, i + 1)
        result[i], result[j] = result[j], result[i]
    return result
