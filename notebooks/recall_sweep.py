"""
Recall sweep using hamminglsh

This script indexes random 128-bit codes into indexes of different sizes,
perturbs every code by a few bits and reports how often the lookup finds the
original code.
"""

import logging

from hamminglsh import random_codes
from hamminglsh.benchmark import sweep

N = 10000
FLIPS = 4


def main():
    logging.basicConfig(level=logging.WARNING, format="%(message)s")

    codes = random_codes(N)
    print(
        f"Inserting {N} values into different sized indexes, "
        f"perturbing {FLIPS} bits and then performing lookup"
    )

    for result in sweep(codes, FLIPS, hash_sizes=range(1, 16), table_counts=range(1, 8)):
        print(result.format())


if __name__ == "__main__":
    main()
