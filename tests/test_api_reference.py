"""Tests for the biostatref.api.reference calculator facade."""

import math

import pytest

from biostatref.api.reference import (
    ReferenceConfig,
    adjust_p_values,
    describe_distribution,
    distribution_curve,
    distribution_spec,
    parse_p_values,
    proportion_confidence_intervals,
    sampling_distribution_demo,
)
from biostatref.core.errors import BiostatError, InvalidInputError
from biostatref.core.names import (
    AdjustmentMethod,
    CIMethod,
    DistributionFamily,
    PopulationShape,
)
from biostatref.stats.schemes.distributions import SeriesBudget


# =============================================================================
# Config
# =============================================================================

class TestReferenceConfig:

    def test_defaults_validate(self):
        config = ReferenceConfig()
        config.validate()
        assert config.series_budget == SeriesBudget()

    @pytest.mark.parametrize(
        "kwargs", [{"alpha": 0.0}, {"alpha": 1.0}, {"level": 1.2}, {"chunk_size": 0}]
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidInputError):
            ReferenceConfig(**kwargs).validate()

    def test_invalid_config_rejected_by_calculators(self):
        with pytest.raises(InvalidInputError):
            adjust_p_values([0.01], config=ReferenceConfig(alpha=2.0))


# =============================================================================
# Distributions
# =============================================================================

class TestDistributionSpec:

    @pytest.mark.parametrize(
        "alias, family",
        [
            ("Normal", DistributionFamily.NORMAL),
            ("gaussian", DistributionFamily.NORMAL),
            ("t", DistributionFamily.STUDENT_T),
            ("Student-t", DistributionFamily.STUDENT_T),
            ("chisq", DistributionFamily.CHI_SQUARED),
            ("chi2", DistributionFamily.CHI_SQUARED),
            ("chi squared", DistributionFamily.CHI_SQUARED),
            ("F", DistributionFamily.F),
            ("poisson", DistributionFamily.POISSON),
            ("binomial", DistributionFamily.BINOMIAL),
            (DistributionFamily.POISSON, DistributionFamily.POISSON),
        ],
    )
    def test_aliases(self, alias, family):
        second = 0.5 if family is DistributionFamily.BINOMIAL else 2.0
        assert distribution_spec(alias, 4, second).family is family

    def test_one_parameter_family_ignores_second(self):
        assert distribution_spec("t", 5, 99).params == (5.0, 0.0)

    def test_missing_second_parameter(self):
        with pytest.raises(InvalidInputError, match="two parameters"):
            distribution_spec("binomial", 10)

    def test_unknown_family(self):
        with pytest.raises(InvalidInputError, match="Unknown distribution family"):
            distribution_spec("gamma", 1, 1)

    def test_curve_uses_config_budget(self):
        config = ReferenceConfig(series_budget=SeriesBudget(discrete_points=100))
        curve = distribution_curve("binomial", 60, 0.5, config=config)
        assert len(curve) == 61
        assert not curve.truncated

    def test_curve_default_cap(self):
        curve = distribution_curve("binomial", 60, 0.5)
        assert len(curve) == 30
        assert curve.omitted_points == 31

    def test_describe(self):
        summary = describe_distribution("poisson", 3)
        assert summary == {
            "family": "poisson",
            "params": (3.0, 0.0),
            "mean": 3.0,
            "variance": 3.0,
        }

    def test_describe_undefined_mean(self):
        assert math.isnan(describe_distribution("t", 1)["mean"])


# =============================================================================
# Proportions
# =============================================================================

class TestProportionConfidenceIntervals:

    def test_level_defaults_to_config(self):
        result = proportion_confidence_intervals(23, 100, config=ReferenceConfig(level=0.9))
        assert result.request.level == 0.9

    def test_explicit_level_wins(self):
        result = proportion_confidence_intervals(23, 100, level=0.99)
        assert result.request.level == 0.99
        assert set(result.intervals) == set(CIMethod)

    def test_invalid_counts(self):
        with pytest.raises(BiostatError):
            proportion_confidence_intervals(12, 10)


# =============================================================================
# P-values
# =============================================================================

class TestParsePValues:

    def test_skips_junk(self):
        assert parse_p_values(" 0.5 ,abc,\n0.001, -0.2, 2, 1") == [0.5, 0.001, 1.0]

    def test_newlines(self):
        assert parse_p_values("0.1\n0.2\n") == [0.1, 0.2]

    def test_nothing_valid(self):
        assert parse_p_values("a, b, 7") == []


class TestAdjustPValues:

    def test_text_input(self):
        result = adjust_p_values("0.01, 0.04, 0.03, 0.08, 0.005")
        assert result.request.m == 5
        assert result.significant_count(AdjustmentMethod.HOLM) == 2

    def test_sequence_input(self):
        result = adjust_p_values([0.01, 0.02], alpha=0.1)
        assert result.alpha == 0.1

    def test_alpha_defaults_to_config(self):
        result = adjust_p_values([0.01], config=ReferenceConfig(alpha=0.01))
        assert result.alpha == 0.01
        assert result.unadjusted_significant_count == 0

    def test_empty_text_raises(self):
        with pytest.raises(InvalidInputError, match="No valid p-values"):
            adjust_p_values("abc, ,")

    def test_out_of_range_sequence_raises(self):
        with pytest.raises(InvalidInputError):
            adjust_p_values([0.2, 1.5])


# =============================================================================
# Sampling
# =============================================================================

class TestSamplingDistributionDemo:

    def test_defaults(self):
        demo = sampling_distribution_demo(seed=4)
        assert demo.request.shape is PopulationShape.EXPONENTIAL
        assert demo.request.sample_size == 30
        assert len(demo.means) == 1000

    def test_skewed_alias(self):
        demo = sampling_distribution_demo("Skewed", sample_size=5, repetitions=20, seed=4)
        assert demo.request.shape is PopulationShape.EXPONENTIAL

    def test_chunk_size_from_config(self):
        demo = sampling_distribution_demo(
            "uniform", 5, 20, seed=4, config=ReferenceConfig(chunk_size=7)
        )
        assert demo.request.chunk_size == 7

    def test_unknown_shape(self):
        with pytest.raises(InvalidInputError, match="Unknown population shape"):
            sampling_distribution_demo("lognormal", seed=1)
