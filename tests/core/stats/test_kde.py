import math

import pytest

from statkit.core.exceptions import InvalidDataInputError
from statkit.core.stats import KdeKernel, estimate_bandwidth, kde, kde_random
from statkit.core.stats.kde import _KERNELS

SAMPLE = [-2.1, -1.3, -0.4, 1.9, 5.1, 6.2]

CANONICAL_KERNELS = [
    KdeKernel.NORMAL,
    KdeKernel.LOGISTIC,
    KdeKernel.SIGMOID,
    KdeKernel.RECTANGULAR,
    KdeKernel.TRIANGULAR,
    KdeKernel.PARABOLIC,
    KdeKernel.QUARTIC,
    KdeKernel.TRIWEIGHT,
    KdeKernel.COSINE,
]

BOUNDED_KERNELS = [
    KdeKernel.RECTANGULAR,
    KdeKernel.TRIANGULAR,
    KdeKernel.PARABOLIC,
    KdeKernel.QUARTIC,
    KdeKernel.TRIWEIGHT,
    KdeKernel.COSINE,
]


def test_kernel_aliases_resolve():
    assert KdeKernel.GAUSS.resolve() is KdeKernel.NORMAL
    assert KdeKernel.UNIFORM.resolve() is KdeKernel.RECTANGULAR
    assert KdeKernel.EPANECHNIKOV.resolve() is KdeKernel.PARABOLIC
    assert KdeKernel.BIWEIGHT.resolve() is KdeKernel.QUARTIC
    for kernel in CANONICAL_KERNELS:
        assert kernel.resolve() is kernel


def test_kernel_parse():
    assert KdeKernel.parse("epanechnikov") is KdeKernel.EPANECHNIKOV
    assert KdeKernel.parse(" Normal ") is KdeKernel.NORMAL
    assert KdeKernel.parse(KdeKernel.COSINE) is KdeKernel.COSINE
    with pytest.raises(InvalidDataInputError):
        KdeKernel.parse("box")


def test_normal_density_matches_direct_sum():
    h = 1.5
    f_hat = kde(SAMPLE, h)
    x = 2.5
    expected = sum(
        math.exp(-(((x - s) / h) ** 2) / 2) / math.sqrt(2 * math.pi) for s in SAMPLE
    ) / (len(SAMPLE) * h)
    assert f_hat(x) == pytest.approx(expected)


def test_kernel_accepts_string_and_alias():
    by_name = kde(SAMPLE, 1.5, "gauss")
    by_member = kde(SAMPLE, 1.5, KdeKernel.NORMAL)
    assert by_name(0.3) == by_member(0.3)
    assert "normal" in by_name.__doc__


@pytest.mark.parametrize("kernel", CANONICAL_KERNELS)
def test_density_integrates_to_one(kernel):
    f_hat = kde(SAMPLE, 1.5, kernel)
    step = 0.005
    low, high = -40.0, 40.0
    count = int((high - low) / step)
    area = sum(f_hat(low + (i + 0.5) * step) for i in range(count)) * step
    assert area == pytest.approx(1.0, abs=5e-3)


@pytest.mark.parametrize("kernel", CANONICAL_KERNELS)
def test_cumulative_is_monotone_and_bounded(kernel):
    cdf_hat = kde(SAMPLE, 1.5, kernel, cumulative=True)
    points = [-20 + 0.25 * i for i in range(161)]
    values = [cdf_hat(x) for x in points]
    assert all(b >= a - 1e-12 for a, b in zip(values, values[1:]))
    assert values[0] == pytest.approx(0.0, abs=1e-3)
    assert values[-1] == pytest.approx(1.0, abs=1e-3)


@pytest.mark.parametrize("kernel", CANONICAL_KERNELS)
def test_cumulative_derivative_matches_density(kernel):
    f_hat = kde(SAMPLE, 1.5, kernel)
    cdf_hat = kde(SAMPLE, 1.5, kernel, cumulative=True)
    eps = 1e-5
    for x in (-1.7, 0.9, 3.0):
        slope = (cdf_hat(x + eps) - cdf_hat(x - eps)) / (2 * eps)
        assert slope == pytest.approx(f_hat(x), abs=1e-5)


@pytest.mark.parametrize("kernel", BOUNDED_KERNELS)
def test_bounded_kernels_have_compact_support(kernel):
    f_hat = kde(SAMPLE, 1.0, kernel)
    cdf_hat = kde(SAMPLE, 1.0, kernel, cumulative=True)
    assert f_hat(min(SAMPLE) - 1.01) == 0.0
    assert f_hat(max(SAMPLE) + 1.01) == 0.0
    assert cdf_hat(min(SAMPLE) - 1.01) == 0.0
    assert cdf_hat(max(SAMPLE) + 1.01) == 1.0


def test_kde_validation():
    with pytest.raises(InvalidDataInputError):
        kde([], 1.0)
    with pytest.raises(InvalidDataInputError):
        kde(SAMPLE, 0)
    with pytest.raises(InvalidDataInputError):
        kde(SAMPLE, -1.0)
    with pytest.raises(InvalidDataInputError):
        kde(SAMPLE, 1.0, "unknown")


@pytest.mark.parametrize("kernel", [k for k in CANONICAL_KERNELS if k is not KdeKernel.NORMAL])
def test_kernel_inverse_cdf(kernel):
    funcs = _KERNELS[kernel]
    for p in (0.01, 0.1, 0.3, 0.5, 0.7, 0.9, 0.99):
        assert funcs.cdf(funcs.inv_cdf(p)) == pytest.approx(p, abs=1e-9)


@pytest.mark.parametrize("kernel", [KdeKernel.NORMAL, KdeKernel.EPANECHNIKOV, KdeKernel.TRIWEIGHT, "logistic"])
def test_kde_random_is_reproducible(kernel):
    first = kde_random(SAMPLE, 1.5, kernel, seed=8675309)
    second = kde_random(SAMPLE, 1.5, kernel, seed=8675309)
    assert [first() for _ in range(20)] == [second() for _ in range(20)]


@pytest.mark.parametrize("kernel", BOUNDED_KERNELS)
def test_kde_random_stays_within_support(kernel):
    h = 0.5
    rand = kde_random(SAMPLE, h, kernel, seed=11)
    for _ in range(500):
        value = rand()
        assert any(abs(value - s) <= h + 1e-9 for s in SAMPLE)


def test_kde_random_follows_sample_mean():
    rand = kde_random(SAMPLE, 1.5, seed=3)
    draws = [rand() for _ in range(20000)]
    sample_mean = sum(SAMPLE) / len(SAMPLE)
    assert sum(draws) / len(draws) == pytest.approx(sample_mean, abs=0.15)


def test_kde_random_validation():
    with pytest.raises(InvalidDataInputError):
        kde_random([], 1.0)
    with pytest.raises(InvalidDataInputError):
        kde_random(SAMPLE, 0.0)


def test_estimate_bandwidth_scott():
    data = [1.0, 2.0, 4.0, 7.0, 11.0, 16.0]
    n = len(data)
    mean = sum(data) / n
    sd = math.sqrt(sum((x - mean) ** 2 for x in data) / (n - 1))
    assert estimate_bandwidth(data, "scott") == pytest.approx(1.059 * sd * n ** (-0.2))


def test_estimate_bandwidth_silverman():
    data = [1.0, 2.0, 4.0, 7.0, 11.0, 16.0, 22.0, 29.0]
    n = len(data)
    mean = sum(data) / n
    sd = math.sqrt(sum((x - mean) ** 2 for x in data) / (n - 1))
    h = estimate_bandwidth(data)
    assert 0 < h <= 0.9 * sd * n ** (-0.2) + 1e-12


def test_estimate_bandwidth_validation():
    with pytest.raises(InvalidDataInputError):
        estimate_bandwidth([1.0])
    with pytest.raises(InvalidDataInputError):
        estimate_bandwidth([2.0, 2.0, 2.0])
    with pytest.raises(InvalidDataInputError):
        estimate_bandwidth([1.0, 2.0], "rule-of-thumb")


@pytest.mark.parametrize(
    "alias, canonical",
    [
        (KdeKernel.GAUSS, KdeKernel.NORMAL),
        (KdeKernel.UNIFORM, KdeKernel.RECTANGULAR),
        (KdeKernel.EPANECHNIKOV, KdeKernel.PARABOLIC),
        (KdeKernel.BIWEIGHT, KdeKernel.QUARTIC),
    ],
)
@pytest.mark.parametrize("cumulative", [False, True])
def test_alias_kernels_give_identical_estimates(alias, canonical, cumulative):
    f_alias = kde(SAMPLE, 1.5, alias, cumulative=cumulative)
    f_canonical = kde(SAMPLE, 1.5, canonical, cumulative=cumulative)
    for x in (-4.0, -2.1, -0.75, 0.0, 1.9, 3.3, 6.2, 9.0):
        assert f_alias(x) == f_canonical(x)


@pytest.mark.parametrize("h", [0.0, -1.0, float("nan")])
def test_kde_rejects_invalid_bandwidth(h):
    with pytest.raises(InvalidDataInputError):
        kde(SAMPLE, h)
    with pytest.raises(InvalidDataInputError):
        kde_random(SAMPLE, h)
