import math

import pytest

from statkit.core.stats.special import (
    erf,
    erfc,
    log_gamma,
    regularized_incomplete_beta,
    standard_normal_inv_cdf,
)


def test_erfc_at_zero_is_exactly_one():
    assert erfc(0.0) == 1.0
    assert erf(0.0) == 0.0


@pytest.mark.parametrize("z", [-3.0, -1.2, -0.3, 0.1, 0.5, 1.0, 2.5])
def test_erf_matches_math_erf(z):
    assert erf(z) == pytest.approx(math.erf(z), abs=1e-6)
    assert erfc(z) == pytest.approx(math.erfc(z), abs=1e-6)


def test_erf_is_odd():
    for z in (0.2, 0.9, 1.7):
        assert erf(-z) == pytest.approx(-erf(z), abs=1e-15)


@pytest.mark.parametrize(
    "p, expected",
    [
        (0.5, 0.0),
        (0.975, 1.959963984540054),
        (0.025, -1.959963984540054),
        (0.01, -2.3263478740408408),
        (0.999, 3.090232306167813),
        (0.8413447460685429, 1.0),
    ],
)
def test_standard_normal_inv_cdf(p, expected):
    assert standard_normal_inv_cdf(p) == pytest.approx(expected, abs=1e-6)


@pytest.mark.parametrize("x", [0.1, 0.5, 1.0, 2.0, 5.0, 10.5, 171.0])
def test_log_gamma_matches_math_lgamma(x):
    assert log_gamma(x) == pytest.approx(math.lgamma(x), rel=1e-10, abs=1e-10)


def test_incomplete_beta_boundaries():
    assert regularized_incomplete_beta(2.0, 3.0, 0.0) == 0.0
    assert regularized_incomplete_beta(2.0, 3.0, -0.5) == 0.0
    assert regularized_incomplete_beta(2.0, 3.0, 1.0) == 1.0
    assert regularized_incomplete_beta(2.0, 3.0, 1.5) == 1.0


def test_incomplete_beta_known_values():
    # I_x(1, 1) 即均匀分布的 CDF
    assert regularized_incomplete_beta(1.0, 1.0, 0.3) == pytest.approx(0.3, abs=1e-12)
    # 整数参数的闭式解：1 - 0.6^4 - 4 * 0.4 * 0.6^3
    assert regularized_incomplete_beta(2.0, 3.0, 0.4) == pytest.approx(0.5248, abs=1e-10)
    assert regularized_incomplete_beta(0.5, 0.5, 0.5) == pytest.approx(0.5, abs=1e-10)


def test_incomplete_beta_symmetry():
    a, b, x = 2.5, 4.0, 0.35
    left = regularized_incomplete_beta(a, b, x)
    right = 1.0 - regularized_incomplete_beta(b, a, 1.0 - x)
    assert left == pytest.approx(right, abs=1e-12)
