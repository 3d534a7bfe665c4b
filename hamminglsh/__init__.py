"""
hamminglsh - approximate nearest neighbor search for 128-bit binary codes.

hamminglsh provides an in-memory LSH index that samples bit positions
(bit-sampling LSH over the Hamming metric) across several tables and returns
the closest stored code found in the query's buckets.
"""

from hamminglsh.__version__ import __version__
from hamminglsh.benchmark import BenchmarkResult, run_benchmark
from hamminglsh.codes import CODE_BITS, distance, hamming_distance, perturb, random_codes
from hamminglsh.hashing import BitSamplingHash
from hamminglsh.index import HammingLSH, new_index
from hamminglsh.table import HammingTable

__all__ = [
    "BenchmarkResult",
    "BitSamplingHash",
    "CODE_BITS",
    "HammingLSH",
    "HammingTable",
    "distance",
    "hamming_distance",
    "new_index",
    "perturb",
    "random_codes",
    "run_benchmark",
    "__version__",
]
