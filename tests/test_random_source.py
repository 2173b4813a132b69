"""Tests for engine/random_source.py — the numpy-backed RandomSource.

Covers:
  - Bernoulli saturation at p <= 0 and p >= 1
  - Seeded reproducibility
  - Inclusive integer bounds and empty-range rejection
  - Empirical Bernoulli frequency
"""

from __future__ import annotations

import pytest

from evtol_simulator.engine.random_source import NumpyRandomSource, RandomSource


class TestNumpyRandomSource:

    def test_is_random_source(self):
        assert isinstance(NumpyRandomSource(1), RandomSource)

    def test_seed_is_kept(self):
        assert NumpyRandomSource(17).seed == 17
        assert NumpyRandomSource().seed is None

    @pytest.mark.parametrize("p", [0.0, -0.5])
    def test_never_below_zero(self, p: float):
        rng = NumpyRandomSource(0)
        assert not any(rng.bernoulli(p) for _ in range(1000))

    @pytest.mark.parametrize("p", [1.0, 1.8])
    def test_always_at_or_above_one(self, p: float):
        rng = NumpyRandomSource(0)
        assert all(rng.bernoulli(p) for _ in range(1000))

    def test_bernoulli_frequency(self):
        rng = NumpyRandomSource(2024)
        hits = sum(rng.bernoulli(0.3) for _ in range(20_000))
        assert hits / 20_000 == pytest.approx(0.3, abs=0.02)

    def test_same_seed_same_sequence(self):
        a, b = NumpyRandomSource(99), NumpyRandomSource(99)
        assert [a.bernoulli(0.5) for _ in range(200)] == [b.bernoulli(0.5) for _ in range(200)]
        assert [a.uniform_int(0, 4) for _ in range(200)] == [b.uniform_int(0, 4) for _ in range(200)]

    def test_uniform_int_is_inclusive(self):
        rng = NumpyRandomSource(3)
        draws = {rng.uniform_int(0, 4) for _ in range(2000)}
        assert draws == {0, 1, 2, 3, 4}

    def test_uniform_int_single_value(self):
        assert NumpyRandomSource(3).uniform_int(2, 2) == 2

    def test_uniform_int_returns_python_int(self):
        assert type(NumpyRandomSource(3).uniform_int(0, 10)) is int

    def test_uniform_int_empty_range(self):
        with pytest.raises(ValueError, match="high"):
            NumpyRandomSource(3).uniform_int(5, 4)
