"""
core.stats: 统计学底层（正态分布、t 分布、在线统计量、核密度估计、描述性统计等）

本模块仅提供通用统计学算法，不包含任何业务逻辑。
"""

from .collection import Statistics
from .descriptive import (
    coefficient_of_variation,
    first_quartile,
    fmean,
    geometric_mean,
    harmonic_mean,
    kurtosis,
    mean,
    median,
    median_grouped,
    median_high,
    median_low,
    mode,
    multimode,
    percentile,
    pskewness,
    pstdev,
    pvariance,
    quantiles,
    sem,
    skewness,
    stdev,
    third_quartile,
    trimmed_mean,
    variance,
)
from .diagnostics import diagnose_distribution
from .frequencies import (
    cumulative_frequencies,
    cumulative_relative_frequencies,
    frequencies,
    frequency_dataframe,
    frequency_table,
    frequency_table_by_size,
    relative_frequencies,
)
from .kde import KdeKernel, estimate_bandwidth, kde, kde_random
from .normal_dist import NormalDist, fit_normal
from .random_source import RandomSource
from .streaming_stat import StreamingStat
from .student_t import StudentT

__all__ = [
    "KdeKernel",
    "NormalDist",
    "RandomSource",
    "Statistics",
    "StreamingStat",
    "StudentT",
    "coefficient_of_variation",
    "cumulative_frequencies",
    "cumulative_relative_frequencies",
    "diagnose_distribution",
    "estimate_bandwidth",
    "first_quartile",
    "fit_normal",
    "fmean",
    "frequencies",
    "frequency_dataframe",
    "frequency_table",
    "frequency_table_by_size",
    "geometric_mean",
    "harmonic_mean",
    "kde",
    "kde_random",
    "kurtosis",
    "mean",
    "median",
    "median_grouped",
    "median_high",
    "median_low",
    "mode",
    "multimode",
    "percentile",
    "pskewness",
    "pstdev",
    "pvariance",
    "quantiles",
    "relative_frequencies",
    "sem",
    "skewness",
    "stdev",
    "third_quartile",
    "trimmed_mean",
    "variance",
]
