"""
Recall and latency measurements for HammingLSH.

Indexes a set of codes with their position as payload, perturbs every code by
a fixed number of bits, looks each perturbed code up, and reports how many
lookups came back with the original payload.
"""

import logging
import math
import time
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from hamminglsh.codes import RandomState, as_rng, hamming_distance, perturb
from hamminglsh.index import build_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BenchmarkResult:
    """Outcome of one benchmark run."""

    hash_size: int
    n_tables: int
    n_codes: int
    flips: int
    matched: int
    average_distance: float
    insertion_ms: float
    lookup_ms: float

    @property
    def match_rate(self) -> float:
        """Percent of queries answered with the original payload."""
        if self.n_codes == 0:
            return 0.0
        return self.matched * 100.0 / self.n_codes

    def format(self) -> str:
        return (
            f"k {self.hash_size}, l {self.n_tables}, matched {self.match_rate:.2f}, "
            f"avg dist {self.average_distance:.3f}, "
            f"insertion {self.insertion_ms:.0f}ms, lookup {self.lookup_ms:.0f}ms"
        )


def run_benchmark(
    k: int,
    l: int,
    codes: Sequence[int],
    flips: int,
    rng: RandomState = None,
) -> BenchmarkResult:
    """
    Measure match rate and timings for one (k, l) configuration.

    Args:
        k: Bits sampled per table.
        l: Number of tables.
        codes: Codes to index; payload of each is its position.
        flips: Bits flipped in each query.
        rng: Generator, seed or None, used for both hashing and perturbation.

    Returns:
        A BenchmarkResult. average_distance is nan when nothing matched.
    """
    rng = as_rng(rng)

    start = time.perf_counter()
    index = build_index(codes, k=k, l=l, rng=rng)
    insertion_ms = (time.perf_counter() - start) * 1000

    queries = [perturb(code, flips, rng=rng) for code in codes]

    start = time.perf_counter()
    matched = 0
    total_distance = 0
    for position, query in enumerate(queries):
        found = index.get(query)
        if found is not None and found[1] == position:
            matched += 1
            total_distance += hamming_distance(found[0], query)
    lookup_ms = (time.perf_counter() - start) * 1000

    result = BenchmarkResult(
        hash_size=k,
        n_tables=l,
        n_codes=len(codes),
        flips=flips,
        matched=matched,
        average_distance=total_distance / matched if matched else math.nan,
        insertion_ms=insertion_ms,
        lookup_ms=lookup_ms,
    )
    logger.info(result.format())
    return result


def sweep(
    codes: Sequence[int],
    flips: int,
    hash_sizes: Iterable[int],
    table_counts: Iterable[int],
    rng: RandomState = None,
) -> Iterator[BenchmarkResult]:
    """Run the benchmark for every (k, l) pair."""
    rng = as_rng(rng)
    table_counts = list(table_counts)
    for k in hash_sizes:
        for l in table_counts:
            yield run_benchmark(k, l, codes, flips, rng=rng)
