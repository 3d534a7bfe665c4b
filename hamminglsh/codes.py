"""
Fixed-width binary codes and the operations the index needs on them.

A code is a plain Python int holding a 128-bit unsigned fingerprint. This
module provides validation, the Hamming distance primitive, and the random
perturbation used to synthesize near-duplicate queries.
"""

import numbers
from typing import Union

import numpy as np

CODE_BITS = 128
CODE_MASK = (1 << CODE_BITS) - 1

RandomState = Union[np.random.Generator, int, None]


def as_rng(rng: RandomState) -> np.random.Generator:
    """Normalize a seed, a Generator or None into a numpy Generator."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def check_int(value, name: str) -> int:
    """Return value as a plain int, raising TypeError for non-integers."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    return int(value)


def check_code(code) -> int:
    """
    Validate a code and return it as a plain int.

    Args:
        code: An int (or numpy integer) in [0, 2**128).

    Returns:
        The code as a Python int.

    Raises:
        TypeError: If code is not an integer.
        ValueError: If code does not fit in 128 unsigned bits.
    """
    code = check_int(code, "Code")
    if code < 0 or code > CODE_MASK:
        raise ValueError(f"Code must fit in {CODE_BITS} unsigned bits, got {code:#x}")
    return code


def popcount_xor(a: int, b: int) -> int:
    """Hamming distance of two already validated codes."""
    return (a ^ b).bit_count()


def hamming_distance(a: int, b: int) -> int:
    """Number of bit positions on which two codes differ, in [0, 128]."""
    return popcount_xor(check_code(a), check_code(b))


distance = hamming_distance


def perturb(code: int, bits: int, rng: RandomState = None) -> int:
    """
    Flip exactly `bits` distinct, uniformly chosen bit positions of a code.

    The result is always at Hamming distance `bits` from the input, since no
    position is flipped twice.

    Args:
        code: The code to perturb.
        bits: Number of positions to flip, in [0, 128].
        rng: Generator, seed or None.

    Returns:
        The perturbed code.
    """
    code = check_code(code)
    bits = check_int(bits, "bits")
    if not 0 <= bits <= CODE_BITS:
        raise ValueError(f"bits must be in [0, {CODE_BITS}], got {bits}")

    positions = as_rng(rng).permutation(CODE_BITS)[:bits]
    for position in positions:
        code ^= 1 << int(position)
    return code


def random_codes(n: int, rng: RandomState = None) -> list[int]:
    """Draw n uniformly random 128-bit codes."""
    n = check_int(n, "n")
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")

    halves = as_rng(rng).integers(0, 2**64, size=(n, 2), dtype=np.uint64)
    return [(int(high) << 64) | int(low) for high, low in halves]
