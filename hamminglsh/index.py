"""
HammingLSH - approximate nearest neighbor search over 128-bit codes.

This module combines L independently sampled HammingTables into one index.
Payloads are kept once in a shared value store; tables only hold slot indices
into it.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any, Generic, Optional, TypeVar

from hamminglsh.codes import RandomState, as_rng, check_code, check_int
from hamminglsh.hashing import BitSamplingHash, check_hash_size
from hamminglsh.table import DEFAULT_MAX_HASH_BITS, HammingTable, nearest

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HammingLSH(Generic[T]):
    """
    An in-memory LSH index for 128-bit binary fingerprints.

    Every insert goes to all L tables. A lookup asks each table for the closest
    code in the query's bucket and keeps the overall closest one. A true
    neighbor is missed only if it shares no bucket with the query in any table,
    so more tables mean better recall at the cost of memory and insert time.

    API:
    - __init__(hash_size=16, n_tables=8, rng=None, max_hash_bits=24, hashers=None)
    - insert(code, payload) - Add a single code with its payload
    - fit(codes, payloads) - Add many codes at once
    - get(code) - Closest stored (code, payload), or None

    Example:
        >>> index = HammingLSH(hash_size=4, n_tables=2, rng=42)
        >>> index.insert(0x00, "a")
        >>> index.insert(0xFF << 120, "b")
        >>> index.get(0x00)
        (0, 'a')
    """

    def __init__(
        self,
        hash_size: int = 16,
        n_tables: int = 8,
        rng: RandomState = None,
        max_hash_bits: int = DEFAULT_MAX_HASH_BITS,
        hashers: Optional[Sequence[BitSamplingHash]] = None,
    ):
        """
        Initialize the HammingLSH index.

        Args:
            hash_size: Bits sampled per table (more = smaller buckets, lower recall).
            n_tables: Number of tables (more = better recall, slower inserts).
                Zero gives an index that never matches.
            rng: numpy Generator, int seed, or None. All tables draw their
                bit positions from it, in order.
            max_hash_bits: Largest hash_size allowed, since each table
                allocates 2**hash_size buckets.
            hashers: Prebuilt hashes, one table each, in order. When given,
                hash_size, n_tables and rng are ignored.

        Raises:
            TypeError: If hash_size or n_tables is not an integer.
            ValueError: If hash_size or n_tables is out of range.
        """
        if hashers is not None:
            hashers = list(hashers)
            n_tables = len(hashers)
            hash_size = max((hasher.k for hasher in hashers), default=0)

        hash_size = check_hash_size(hash_size)
        if hash_size > max_hash_bits:
            raise ValueError(
                f"hash_size {hash_size} needs 2**{hash_size} buckets, "
                f"above max_hash_bits={max_hash_bits}"
            )
        n_tables = check_int(n_tables, "n_tables")
        if n_tables < 0:
            raise ValueError(f"n_tables must be non-negative, got {n_tables}")

        self.hash_size = hash_size
        self.n_tables = n_tables

        if hashers is None:
            rng = as_rng(rng)
            self.tables: list[HammingTable[int]] = [
                HammingTable(hash_size, rng=rng, max_hash_bits=max_hash_bits)
                for _ in range(n_tables)
            ]
        else:
            self.tables = [
                HammingTable(hasher=hasher, max_hash_bits=max_hash_bits)
                for hasher in hashers
            ]
        self._data: list[T] = []

        logger.debug(
            "Created HammingLSH with %d tables of %d bits", n_tables, hash_size
        )

    def insert(self, code: int, payload: T) -> None:
        """
        Add a code and its payload to every table.

        Args:
            code: 128-bit code as an int.
            payload: Value returned by get() when this code is the match.
        """
        code = check_code(code)
        slot = len(self._data)
        self._data.append(payload)
        for table in self.tables:
            table.insert(code, slot)

    def fit(self, codes: Sequence[int], payloads: Sequence[T]) -> "HammingLSH[T]":
        """
        Insert many codes with their payloads.

        Args:
            codes: Codes to index.
            payloads: One payload per code.

        Returns:
            self for method chaining.

        Raises:
            ValueError: If the lengths differ.
        """
        if len(codes) != len(payloads):
            raise ValueError(
                f"Number of codes ({len(codes)}) must match "
                f"number of payloads ({len(payloads)})"
            )

        for code, payload in zip(codes, payloads):
            self.insert(code, payload)

        logger.debug("Indexed %d codes, %d total", len(codes), len(self._data))
        return self

    def candidates(self, code: int) -> list[Optional[tuple[int, int]]]:
        """Each table's closest (code, slot) for the query, in table order."""
        code = check_code(code)
        return [table.get(code) for table in self.tables]

    def get(self, code: int) -> Optional[tuple[int, T]]:
        """
        Look up the closest stored code among the query's buckets.

        Args:
            code: Query code.

        Returns:
            (matched_code, payload), or None when every table's bucket is
            empty. Ties go to the earliest table.
        """
        code = check_code(code)
        best = nearest(self.candidates(code), code)
        if best is None:
            return None
        matched, slot = best
        return matched, self._data[slot]

    @property
    def payloads(self) -> tuple[T, ...]:
        return tuple(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return (
            f"HammingLSH(hash_size={self.hash_size}, n_tables={self.n_tables}, "
            f"size={len(self._data)})"
        )


def new_index(k: int, l: int, rng: RandomState = None, **kwargs: Any) -> HammingLSH:
    """Build an empty index with k bits per table and l tables."""
    return HammingLSH(hash_size=k, n_tables=l, rng=rng, **kwargs)


def build_index(
    codes: Iterable[int], k: int = 16, l: int = 8, rng: RandomState = None
) -> HammingLSH[int]:
    """Index codes with their position as payload."""
    codes = list(codes)
    return new_index(k, l, rng=rng).fit(codes, list(range(len(codes))))
