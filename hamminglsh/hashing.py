"""
Bit-sampling hash family for the Hamming metric.

Each hash function samples k distinct bit positions ("hyperplanes") of the
128-bit code space. Two codes at Hamming distance d collide under one sampled
position with probability (128 - d) / 128, so the family is locality
sensitive: closer codes are more likely to share a bucket.
"""

from collections.abc import Sequence

from hamminglsh.codes import CODE_BITS, RandomState, as_rng, check_int


def check_hash_size(k: int) -> int:
    """Validate the number of sampled bits per hash."""
    k = check_int(k, "hash_size")
    if not 0 <= k <= CODE_BITS:
        raise ValueError(f"hash_size must be in [0, {CODE_BITS}], got {k}")
    return k


def hash_code(planes: Sequence[int], code: int) -> int:
    """
    Hash a code under a sequence of sampled bit positions.

    Bit i of the result is set when the code has bit planes[i] set.

    Args:
        planes: Distinct bit positions in [0, 128).
        code: The code to hash.

    Returns:
        A len(planes)-bit bucket index.
    """
    h = 0
    for i, plane in enumerate(planes):
        if code & (1 << plane):
            h |= 1 << i
    return h


class BitSamplingHash:
    """
    One member of the bit-sampling LSH family.

    The sampled positions are fixed at construction and never change.

    Example:
        >>> hasher = BitSamplingHash(4, rng=42)
        >>> hasher.hash(0) == 0
        True
    """

    def __init__(self, k: int, rng: RandomState = None):
        """
        Sample k distinct bit positions from a random permutation.

        Args:
            k: Number of positions, in [0, 128]. k = 0 maps every code to bucket 0.
            rng: numpy Generator, int seed, or None for fresh entropy.
        """
        k = check_hash_size(k)
        permutation = as_rng(rng).permutation(CODE_BITS)
        self._planes = tuple(int(p) for p in permutation[:k])

    @classmethod
    def from_planes(cls, planes: Sequence[int]) -> "BitSamplingHash":
        """Build a hash from explicit bit positions."""
        planes = tuple(int(p) for p in planes)
        if len(planes) > CODE_BITS:
            raise ValueError(f"At most {CODE_BITS} planes allowed, got {len(planes)}")
        if len(set(planes)) != len(planes):
            raise ValueError(f"Planes must be distinct, got {planes}")
        for p in planes:
            if not 0 <= p < CODE_BITS:
                raise ValueError(f"Plane positions must be in [0, {CODE_BITS}), got {p}")

        hasher = cls.__new__(cls)
        hasher._planes = planes
        return hasher

    @property
    def planes(self) -> tuple[int, ...]:
        return self._planes

    @property
    def k(self) -> int:
        return len(self._planes)

    @property
    def n_buckets(self) -> int:
        return 1 << len(self._planes)

    def hash(self, code: int) -> int:
        return hash_code(self._planes, code)

    def __repr__(self) -> str:
        return f"BitSamplingHash(planes={list(self._planes)})"


def collision_probability(distance: int, k: int) -> float:
    """Probability that two codes at the given distance share a bucket in one table."""
    if not 0 <= distance <= CODE_BITS:
        raise ValueError(f"distance must be in [0, {CODE_BITS}], got {distance}")
    check_hash_size(k)
    return ((CODE_BITS - distance) / CODE_BITS) ** k


def ensemble_collision_probability(distance: int, k: int, l: int) -> float:
    """Probability that two codes share a bucket in at least one of l tables."""
    if l < 0:
        raise ValueError(f"l must be non-negative, got {l}")
    p = collision_probability(distance, k)
    return 1.0 - (1.0 - p) ** l
