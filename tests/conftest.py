"""Pytest configuration for biostatref tests."""

import pytest

from biostatref.stats.schemes.multiple_testing import PValueAdjustmentRequest, adjust


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: Monte Carlo tests with large repetition counts")


# Five tests, deliberately unsorted: ranks are 2, 4, 3, 5, 1
EXAMPLE_P_VALUES = (0.01, 0.04, 0.03, 0.08, 0.005)


@pytest.fixture
def example_p_values():
    return EXAMPLE_P_VALUES


@pytest.fixture
def example_adjustment():
    return adjust(PValueAdjustmentRequest(EXAMPLE_P_VALUES, alpha=0.05))
