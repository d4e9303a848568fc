"""Tests for biostatref.stats.schemes.sampling."""

import logging
import math

import numpy as np
import pytest

from biostatref.core.errors import InvalidInputError
from biostatref.core.names import PopulationShape
from biostatref.stats.schemes.sampling import (
    HISTOGRAM_BINS,
    CLTSimulationRequest,
    build_histogram,
    iter_mean_chunks,
    population_moments,
    simulate,
)


# =============================================================================
# Request validation
# =============================================================================

class TestCLTSimulationRequest:

    def test_shape_string_is_coerced(self):
        request = CLTSimulationRequest("bimodal", sample_size=5, repetitions=10)
        assert request.shape is PopulationShape.BIMODAL
        assert request.seed is None
        assert request.chunk_size == 500

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"shape": "cauchy", "sample_size": 5, "repetitions": 10},
            {"shape": "uniform", "sample_size": 0, "repetitions": 10},
            {"shape": "uniform", "sample_size": 5, "repetitions": 0},
            {"shape": "uniform", "sample_size": 2.5, "repetitions": 10},
            {"shape": "uniform", "sample_size": 5, "repetitions": 10, "chunk_size": 0},
            {"shape": "uniform", "sample_size": 5, "repetitions": 10, "seed": -1},
            {"shape": "uniform", "sample_size": True, "repetitions": 10},
        ],
    )
    def test_invalid_raises(self, kwargs):
        with pytest.raises(InvalidInputError):
            CLTSimulationRequest(**kwargs)


# =============================================================================
# Histogram
# =============================================================================

class TestBuildHistogram:

    def test_counts_sum_to_length(self):
        values = np.random.default_rng(3).normal(size=777)
        bins = build_histogram(values)
        assert len(bins) == HISTOGRAM_BINS
        assert sum(b.count for b in bins) == 777

    def test_maximum_lands_in_last_bin(self):
        bins = build_histogram([float(v) for v in range(21)])
        # width is 1: values 0..18 fill bins 0..18, 19 and 20 share the last
        assert [b.count for b in bins] == [1] * 19 + [2]

    def test_edges_span_range(self):
        bins = build_histogram([2.0, 4.0, 12.0])
        assert bins[0].lower == 2.0
        assert bins[-1].upper == pytest.approx(12.0)
        for left, right in zip(bins, bins[1:]):
            assert left.upper == pytest.approx(right.lower)

    def test_labels(self):
        bins = build_histogram([0.0, 20.0])
        assert bins[0].label == "[0.00, 1.00)"
        assert bins[-1].label == "[19.00, 20.00]"

    def test_constant_values_go_to_first_bin(self):
        bins = build_histogram([3.5] * 8)
        assert bins[0].count == 8
        assert sum(b.count for b in bins[1:]) == 0

    def test_custom_bin_count(self):
        assert len(build_histogram([1.0, 2.0, 3.0], bins=4)) == 4

    def test_empty_raises(self):
        with pytest.raises(InvalidInputError):
            build_histogram([])


# =============================================================================
# Simulation
# =============================================================================

class TestSimulate:

    @pytest.mark.parametrize("shape", list(PopulationShape))
    def test_lengths_and_histogram(self, shape):
        result = simulate(CLTSimulationRequest(shape, sample_size=10, repetitions=321, seed=0))
        assert len(result.means) == 321
        assert len(result.histogram) == HISTOGRAM_BINS
        assert sum(b.count for b in result.histogram) == 321
        np.testing.assert_allclose(result.grand_mean, np.mean(result.means), rtol=1e-12)

    def test_seed_is_reproducible(self):
        request = CLTSimulationRequest("exponential", sample_size=30, repetitions=200, seed=42)
        assert simulate(request).means == simulate(request).means

    def test_different_seeds_differ(self):
        a = simulate(CLTSimulationRequest("uniform", 5, 50, seed=1))
        b = simulate(CLTSimulationRequest("uniform", 5, 50, seed=2))
        assert a.means != b.means

    def test_single_repetition_has_zero_spread(self):
        result = simulate(CLTSimulationRequest("normal", sample_size=4, repetitions=1, seed=3))
        assert result.standard_error_estimate == 0.0
        assert result.grand_mean == result.means[0]
        assert sum(b.count for b in result.histogram) == 1

    def test_spread_is_bessel_corrected(self):
        result = simulate(CLTSimulationRequest("uniform", 3, 40, seed=9))
        np.testing.assert_allclose(
            result.standard_error_estimate, np.std(result.means, ddof=1), rtol=1e-12
        )

    @pytest.mark.parametrize(
        "shape, low, high",
        [
            ("uniform", 0.0, 10.0),
            ("exponential", 0.0, math.inf),
            ("bimodal", 1.5, 8.5),
        ],
    )
    def test_sample_size_one_stays_in_population_range(self, shape, low, high):
        result = simulate(CLTSimulationRequest(shape, sample_size=1, repetitions=2000, seed=5))
        assert min(result.means) >= low
        assert max(result.means) < high

    def test_bimodal_clusters(self):
        result = simulate(CLTSimulationRequest("bimodal", sample_size=1, repetitions=2000, seed=5))
        means = np.asarray(result.means)
        assert np.all((means < 2.5) | (means >= 7.5))
        low_share = np.mean(means < 2.5)
        assert 0.45 < low_share < 0.55

    @pytest.mark.slow
    @pytest.mark.parametrize("shape", list(PopulationShape))
    def test_standard_error_follows_clt(self, shape):
        result = simulate(CLTSimulationRequest(shape, sample_size=50, repetitions=4000, seed=11))
        expected = population_moments(shape)[1] / math.sqrt(50)
        assert result.expected_standard_error == pytest.approx(expected)
        assert abs(result.standard_error_estimate - expected) / expected < 0.1
        assert abs(result.grand_mean - result.population_mean) < 4 * expected / math.sqrt(4000)


class TestIterMeanChunks:

    def test_chunk_sizes(self):
        request = CLTSimulationRequest("uniform", 2, 1234, seed=0, chunk_size=500)
        sizes = [len(chunk) for chunk in iter_mean_chunks(request)]
        assert sizes == [500, 500, 234]

    def test_chunking_does_not_change_count(self):
        request = CLTSimulationRequest("normal", 3, 10, seed=0, chunk_size=3)
        assert sum(len(c) for c in iter_mean_chunks(request)) == 10

    def test_lazy(self):
        request = CLTSimulationRequest("uniform", 2, 10_000, seed=0, chunk_size=100)
        chunks = iter_mean_chunks(request)
        first = next(chunks)
        assert first.shape == (100,)

    def test_progress_is_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="biostatref.stats.schemes.sampling")
        list(iter_mean_chunks(CLTSimulationRequest("uniform", 2, 20, seed=0, chunk_size=10)))
        assert "20/20 repetitions done" in caplog.text


class TestPopulationMoments:

    def test_values(self):
        assert population_moments("exponential") == (2.0, 2.0)
        assert population_moments(PopulationShape.NORMAL) == (5.0, 1.0)
        np.testing.assert_allclose(population_moments("uniform")[1], 2.886751, rtol=1e-6)

    @pytest.mark.parametrize("shape", list(PopulationShape))
    def test_match_large_sample(self, shape):
        request = CLTSimulationRequest(shape, sample_size=1, repetitions=200_000, seed=21)
        draws = np.concatenate(list(iter_mean_chunks(request)))
        mean, sd = population_moments(shape)
        np.testing.assert_allclose(draws.mean(), mean, atol=0.05)
        np.testing.assert_allclose(draws.std(), sd, rtol=0.02)
