"""Deterministic hashing and random streams.

Everything random in a render flows from one 32-bit seed so the same
calendar always produces the same animation.
"""

from typing import Callable

MASK32 = 0xFFFFFFFF

FNV_OFFSET = 2166136261
FNV_PRIME = 16777619

# Per-run reseed step. Any large odd constant works; this one is prime.
RUN_SEED_PRIME = 2654435761


def hash_string(text: str) -> int:
    """FNV-1a over the UTF-16 code units of ``text``, truncated to 32 bits.

    Characters outside the BMP hash as their two surrogates.
    """
    data = text.encode("utf-16-le", "surrogatepass")
    h = FNV_OFFSET
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = (h * FNV_PRIME) & MASK32
    return h


def make_rng(seed: int) -> Callable[[], float]:
    """Return a mulberry32 generator yielding floats in [0, 1)."""
    state = seed & MASK32

    def rng() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & MASK32
        r = ((state ^ (state >> 15)) * (1 | state)) & MASK32
        r ^= (r + (((r ^ (r >> 7)) * (61 | r)) & MASK32)) & MASK32
        return ((r ^ (r >> 14)) & MASK32) / 4294967296

    return rng


def derive_seed(identity: str, total: int, first_date=None) -> int:
    # Changes slowly: new contributions or a new first visible day.
    return hash_string(f"{identity}:{total}:{first_date or ''}")


def run_seed(base_seed: int, run_index: int, prime: int = RUN_SEED_PRIME) -> int:
    return (base_seed + run_index * prime) & MASK32
