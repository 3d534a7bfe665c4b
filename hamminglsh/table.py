"""
HammingTable - a single LSH table over 128-bit codes.
"""

import logging
from typing import Generic, Optional, TypeVar

from hamminglsh.codes import RandomState, check_code, popcount_xor
from hamminglsh.hashing import BitSamplingHash, check_hash_size

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_HASH_BITS = 24


def nearest(entries, code: int) -> Optional[tuple[int, T]]:
    """
    Return the entry whose code is closest to `code`.

    The first entry reaching the minimum distance wins. Entries may be None
    (meaning "no candidate") and are skipped.
    """
    best = None
    best_distance = None
    for entry in entries:
        if entry is None:
            continue
        d = popcount_xor(entry[0], code)
        if best_distance is None or d < best_distance:
            best_distance = d
            best = entry
    return best


class HammingTable(Generic[T]):
    """
    One hash table: a sampled set of bit positions plus 2**k buckets.

    Each bucket is an insertion-ordered list of (code, payload) pairs. A lookup
    only scans the bucket the query hashes to.

    Example:
        >>> table = HammingTable(4, rng=42)
        >>> table.insert(0b1011, "x")
        >>> table.get(0b1011)
        (11, 'x')
    """

    def __init__(
        self,
        hash_size: int = 16,
        rng: RandomState = None,
        max_hash_bits: int = DEFAULT_MAX_HASH_BITS,
        hasher: Optional[BitSamplingHash] = None,
    ):
        """
        Initialize the table and allocate its buckets.

        Args:
            hash_size: Number of sampled bits k. Ignored when hasher is given.
            rng: Generator, seed or None used to sample the bit positions.
            max_hash_bits: Largest k for which 2**k buckets may be allocated.
            hasher: A prebuilt hash to use instead of sampling one.

        Raises:
            ValueError: If k is outside [0, 128] or exceeds max_hash_bits.
        """
        if hasher is None:
            hash_size = check_hash_size(hash_size)
            if hash_size > max_hash_bits:
                raise ValueError(
                    f"hash_size {hash_size} needs 2**{hash_size} buckets, "
                    f"above max_hash_bits={max_hash_bits}"
                )
            hasher = BitSamplingHash(hash_size, rng=rng)
        elif hasher.k > max_hash_bits:
            raise ValueError(
                f"hasher with {hasher.k} planes needs 2**{hasher.k} buckets, "
                f"above max_hash_bits={max_hash_bits}"
            )

        self.hasher = hasher
        self._buckets: list[list[tuple[int, T]]] = [[] for _ in range(hasher.n_buckets)]
        self._size = 0
        logger.debug("Created table with planes %s", hasher.planes)

    @property
    def hash_size(self) -> int:
        return self.hasher.k

    @property
    def n_buckets(self) -> int:
        return len(self._buckets)

    def hash(self, code: int) -> int:
        return self.hasher.hash(code)

    def insert(self, code: int, payload: T) -> None:
        """Append (code, payload) to the bucket the code hashes to."""
        code = check_code(code)
        self._buckets[self.hash(code)].append((code, payload))
        self._size += 1

    def get(self, code: int) -> Optional[tuple[int, T]]:
        """
        Find the closest stored entry in the query's bucket.

        Args:
            code: Query code.

        Returns:
            (stored_code, payload) with the smallest Hamming distance to the
            query, earliest insertion first on ties; None if the bucket is empty.
        """
        code = check_code(code)
        return nearest(self._buckets[self.hash(code)], code)

    def bucket(self, code: int) -> tuple[tuple[int, T], ...]:
        """Entries of the bucket a code hashes to, in insertion order."""
        return tuple(self._buckets[self.hash(check_code(code))])

    def __len__(self) -> int:
        return self._size
