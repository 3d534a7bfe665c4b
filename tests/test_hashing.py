"""
Tests for the bit-sampling hash family.
"""

import numpy as np
import pytest

from hamminglsh import BitSamplingHash
from hamminglsh.hashing import (
    collision_probability,
    ensemble_collision_probability,
    hash_code,
)


class TestHashCode:
    """Test hashing a code under explicit bit positions."""

    def test_known_values(self):
        """Test hash values from hand-computed examples."""
        assert hash_code([0], 0b1) == 1
        assert hash_code([1], 0b1) == 0
        assert hash_code([0, 1], 0b10) == 0b10
        assert hash_code([127], 1 << 127) == 1

    def test_plane_order_sets_output_bit(self):
        """Test that position i of the planes becomes bit i of the hash."""
        assert hash_code([5, 3], 1 << 5) == 0b01
        assert hash_code([5, 3], 1 << 3) == 0b10

    def test_uses_and_semantics(self):
        """Test that unset sampled bits hash to zero."""
        assert hash_code([0, 1, 2, 3], 0) == 0
        assert hash_code([0, 1, 2, 3], (1 << 128) - 1) == 0b1111
        assert hash_code([10, 20], 1 << 30) == 0

    def test_empty_planes(self):
        """Test that no planes always hash to bucket zero."""
        assert hash_code([], (1 << 128) - 1) == 0


class TestBitSamplingHash:
    """Test sampling of hash functions."""

    def test_planes_distinct_and_in_range(self):
        """Test that sampled positions are distinct bits of the code."""
        for k in [1, 8, 64, 128]:
            hasher = BitSamplingHash(k, rng=np.random.default_rng(k))
            assert hasher.k == k
            assert len(set(hasher.planes)) == k
            assert all(0 <= p < 128 for p in hasher.planes)

    def test_full_sample_is_permutation(self):
        """Test that k=128 samples every position once."""
        hasher = BitSamplingHash(128, rng=1)
        assert sorted(hasher.planes) == list(range(128))

    def test_seeded_is_reproducible(self):
        """Test that the same seed gives the same planes."""
        assert BitSamplingHash(16, rng=9).planes == BitSamplingHash(16, rng=9).planes

    def test_hash_is_idempotent(self):
        """Test that hashing the same code twice gives the same bucket."""
        hasher = BitSamplingHash(12, rng=5)
        code = 0x0123456789ABCDEF0123456789ABCDEF
        assert hasher.hash(code) == hasher.hash(code)
        assert 0 <= hasher.hash(code) < hasher.n_buckets

    def test_zero_bits(self):
        """Test that k=0 yields a single bucket."""
        hasher = BitSamplingHash(0, rng=1)
        assert hasher.n_buckets == 1
        assert hasher.hash((1 << 128) - 1) == 0

    @pytest.mark.parametrize("k", [-1, 129])
    def test_invalid_k(self, k):
        """Test error on k outside [0, 128]."""
        with pytest.raises(ValueError, match="hash_size must be in"):
            BitSamplingHash(k)

    def test_non_integer_k(self):
        """Test TypeError for a non-integer k and acceptance of numpy integers."""
        with pytest.raises(TypeError, match="hash_size must be an integer"):
            BitSamplingHash(4.0)
        assert BitSamplingHash(np.int64(4), rng=1).k == 4

    def test_from_planes(self):
        """Test building a hash from explicit positions."""
        hasher = BitSamplingHash.from_planes([3, 1])
        assert hasher.planes == (3, 1)
        assert hasher.hash(0b1000) == 0b01

    def test_from_planes_validation(self):
        """Test errors for duplicate and out-of-range positions."""
        with pytest.raises(ValueError, match="distinct"):
            BitSamplingHash.from_planes([1, 1])
        with pytest.raises(ValueError, match="Plane positions"):
            BitSamplingHash.from_planes([128])


class TestCollisionProbability:
    """Test the theoretical collision probabilities."""

    def test_identical_codes_always_collide(self):
        """Test that distance zero collides with probability one."""
        assert collision_probability(0, 16) == 1.0

    def test_decreasing_in_distance(self):
        """Test that farther codes collide less often."""
        probs = [collision_probability(d, 8) for d in range(0, 129, 8)]
        assert probs == sorted(probs, reverse=True)
        assert probs[-1] == 0.0

    def test_more_tables_raise_probability(self):
        """Test that the ensemble probability grows with table count."""
        single = ensemble_collision_probability(16, 12, 1)
        many = ensemble_collision_probability(16, 12, 8)
        assert single == pytest.approx(collision_probability(16, 12))
        assert many > single
        assert ensemble_collision_probability(16, 12, 0) == 0.0
