"""
批量描述性统计函数。

说明：
- 以标准库 statistics 为基础，统一做输入校验，并把 StatisticsError 转换为 InvalidDataInputError；
- mean / median / variance / stdev 等基础聚合函数在输入为空时返回 None，便于直接写入结果表；
- 大多数函数支持 precision 参数：为 None 时返回原始值，否则四舍五入到指定位数。
"""

import math
import statistics
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..exceptions import InvalidDataInputError
from .math_utils import round_value, to_float_list

QUANTILE_METHODS = ("exclusive", "inclusive")


def _optional_data(data: Iterable[float], name: str = "data") -> List[float]:
    return to_float_list(data, name, allow_empty=True)


def _wrap(func, *args, **kwargs):
    try:
        return func(*args, **kwargs)
    except statistics.StatisticsError as exc:
        raise InvalidDataInputError(str(exc)) from exc


# ----------------------------------------------------------------------
# 集中趋势
# ----------------------------------------------------------------------
def mean(data: Iterable[float], precision: Optional[int] = None) -> Optional[float]:
    """算术平均数；输入为空时返回 None。"""
    values = _optional_data(data)
    if not values:
        return None
    return round_value(statistics.fmean(values), precision)


def fmean(
    data: Iterable[float],
    weights: Optional[Iterable[float]] = None,
    precision: Optional[int] = None,
) -> float:
    """
    浮点算术平均数，可带权重。

    参数：
    - data: 数值序列，不能为空；
    - weights: 与 data 等长的权重序列，权重和不能为 0。
    """
    values = to_float_list(data, "data")
    if weights is None:
        return round_value(statistics.fmean(values), precision)

    weight_values = to_float_list(weights, "weights")
    if len(weight_values) != len(values):
        raise InvalidDataInputError(
            f"data 与 weights 长度必须一致，当前分别为 {len(values)} 和 {len(weight_values)}。"
        )
    total_weight = sum(weight_values)
    if total_weight == 0:
        raise InvalidDataInputError("weights 之和不能为 0。")
    result = sum(v * w for v, w in zip(values, weight_values)) / total_weight
    return round_value(result, precision)


def geometric_mean(data: Iterable[float], precision: Optional[int] = None) -> float:
    """几何平均数，要求所有值为正数。"""
    values = to_float_list(data, "data")
    return round_value(_wrap(statistics.geometric_mean, values), precision)


def harmonic_mean(
    data: Iterable[float],
    weights: Optional[Iterable[float]] = None,
    precision: Optional[int] = None,
) -> float:
    """
    调和平均数，可带权重。

    说明：
    - 常用于"平均速率"类指标，如往返两段路程的平均车速；
    - 数据中出现 0 时结果为 0，出现负数时抛出异常。
    """
    values = to_float_list(data, "data")
    weight_values = None if weights is None else to_float_list(weights, "weights")
    return round_value(_wrap(statistics.harmonic_mean, values, weight_values), precision)


def median(data: Iterable[float], precision: Optional[int] = None) -> Optional[float]:
    """中位数（偶数个值时取中间两个值的平均）；输入为空时返回 None。"""
    values = _optional_data(data)
    if not values:
        return None
    return round_value(statistics.median(values), precision)


def median_low(data: Iterable[float]) -> Optional[float]:
    """低中位数：偶数个值时取中间两个值中较小者，结果一定是数据中的某个值。"""
    values = _optional_data(data)
    if not values:
        return None
    return statistics.median_low(values)


def median_high(data: Iterable[float]) -> Optional[float]:
    values = _optional_data(data)
    if not values:
        return None
    return statistics.median_high(values)


def median_grouped(data: Iterable[float], interval: float = 1, precision: Optional[int] = None) -> float:
    """
    分组数据的中位数（第 50 百分位数），按组距 interval 做线性插值。
    """
    values = to_float_list(data, "data")
    if interval <= 0:
        raise InvalidDataInputError(f"interval 必须大于 0，当前为: {interval}")
    return round_value(_wrap(statistics.median_grouped, values, interval), precision)


def _sorted_counts(data: Iterable[Any]) -> Dict[Any, int]:
    return dict(sorted(Counter(data).items()))


def mode(data: Iterable[Any]) -> Optional[Any]:
    """
    众数：出现次数最多的值，可用于离散数值或类别数据。

    说明：
    - 有多个众数时返回取值最小的那个；
    - 输入为空，或所有值都只出现一次时，返回 None。
    """
    counts = _sorted_counts(data)
    if not counts:
        return None
    highest = max(counts.values())
    if highest == 1:
        return None
    return next(value for value, count in counts.items() if count == highest)


def multimode(data: Iterable[Any]) -> List[Any]:
    """所有众数组成的列表（按取值升序），输入为空时抛出异常。"""
    counts = _sorted_counts(data)
    if not counts:
        raise InvalidDataInputError("data 不能为空。")
    highest = max(counts.values())
    return [value for value, count in counts.items() if count == highest]


# ----------------------------------------------------------------------
# 离散程度
# ----------------------------------------------------------------------
def _require_size(values: Sequence[float], minimum: int, statistic: str) -> None:
    if len(values) < minimum:
        raise InvalidDataInputError(f"计算{statistic}至少需要 {minimum} 个值，当前为 {len(values)} 个。")


def variance(data: Iterable[float], precision: Optional[int] = None) -> Optional[float]:
    """样本方差（n-1）；输入为空时返回 None，只有 1 个值时抛出异常。"""
    values = _optional_data(data)
    if not values:
        return None
    _require_size(values, 2, "样本方差")
    return round_value(statistics.variance(values), precision)


def pvariance(data: Iterable[float], precision: Optional[int] = None) -> Optional[float]:
    """总体方差（n）；输入为空时返回 None。"""
    values = _optional_data(data)
    if not values:
        return None
    return round_value(statistics.pvariance(values), precision)


def stdev(data: Iterable[float], precision: Optional[int] = None) -> Optional[float]:
    """样本标准差（n-1）；输入为空时返回 None，只有 1 个值时抛出异常。"""
    values = _optional_data(data)
    if not values:
        return None
    _require_size(values, 2, "样本标准差")
    return round_value(statistics.stdev(values), precision)


def pstdev(data: Iterable[float], precision: Optional[int] = None) -> Optional[float]:
    values = _optional_data(data)
    if not values:
        return None
    return round_value(statistics.pstdev(values), precision)


def _require_spread(values: Sequence[float], statistic: str) -> None:
    # 均值存在舍入误差，m2 可能不为 0，因此直接比较最值
    if min(values) == max(values):
        raise InvalidDataInputError(f"所有值都相同（标准差为 0）时，{statistic}无定义。")


def _central_moments(values: Sequence[float]):
    n = len(values)
    mu = statistics.fmean(values)
    m2 = sum((x - mu) ** 2 for x in values)
    m3 = sum((x - mu) ** 3 for x in values)
    m4 = sum((x - mu) ** 4 for x in values)
    return n, m2, m3, m4


def _population_skewness(data: Iterable[float]):
    values = to_float_list(data, "data")
    _require_size(values, 3, "偏度")
    _require_spread(values, "偏度")
    n, m2, m3, _ = _central_moments(values)
    return n, math.sqrt(n) * m3 / m2**1.5


def skewness(data: Iterable[float], precision: Optional[int] = None) -> float:
    """调整后的 Fisher–Pearson 样本偏度，口径与 StreamingStat.skewness 一致。"""
    n, g1 = _population_skewness(data)
    return round_value(math.sqrt(n * (n - 1)) / (n - 2) * g1, precision)


def pskewness(data: Iterable[float], precision: Optional[int] = None) -> float:
    _, g1 = _population_skewness(data)
    return round_value(g1, precision)


def kurtosis(data: Iterable[float], precision: Optional[int] = None) -> float:
    """
    样本超额峰度（无偏修正），正态分布约为 0，
    大于 0 表示尾部比正态更厚，小于 0 表示分布更平坦。
    """
    values = to_float_list(data, "data")
    _require_size(values, 4, "峰度")
    _require_spread(values, "峰度")
    n, m2, _, m4 = _central_moments(values)
    g2 = n * m4 / (m2 * m2) - 3.0
    result = (n - 1) / ((n - 2) * (n - 3)) * ((n + 1) * g2 + 6.0)
    return round_value(result, precision)


def coefficient_of_variation(
    data: Iterable[float],
    population: bool = False,
    precision: Optional[int] = None,
) -> float:
    """
    变异系数 CV = 标准差 / 均值。

    参数：
    - population: True 使用总体标准差，False（默认）使用样本标准差。
    """
    values = to_float_list(data, "data")
    if not population:
        _require_size(values, 2, "变异系数")
    data_mean = statistics.fmean(values)
    if data_mean == 0:
        raise InvalidDataInputError("均值为 0 时变异系数无定义。")
    sd = statistics.pstdev(values) if population else statistics.stdev(values)
    return round_value(sd / data_mean, precision)


def sem(data: Iterable[float], precision: Optional[int] = None) -> float:
    """均值的标准误 stdev / sqrt(n)。"""
    values = to_float_list(data, "data")
    _require_size(values, 2, "标准误")
    return round_value(statistics.stdev(values) / math.sqrt(len(values)), precision)


# ----------------------------------------------------------------------
# 位置统计量
# ----------------------------------------------------------------------
def quantiles(
    data: Iterable[float],
    n: int = 4,
    method: str = "exclusive",
    precision: Optional[int] = None,
) -> List[float]:
    """
    把数据切分为 n 个等概率区间，返回 n-1 个切分点。

    参数：
    - n: 区间数，>= 1（4 为四分位数，10 为十分位数，100 为百分位数）；
    - method:
        * "exclusive"（默认）：适用于从更大总体中抽取的样本，可能外推到样本范围之外；
        * "inclusive"：把数据视为总体本身，最小值 / 最大值即 0% / 100% 分位点。

    说明：
    - 至少需要 2 个值。
    """
    values = to_float_list(data, "data")
    _require_size(values, 2, "分位数")
    if n < 1:
        raise InvalidDataInputError(f"n 必须 >= 1，当前为: {n}")
    if method not in QUANTILE_METHODS:
        raise InvalidDataInputError(f"method 仅支持 {QUANTILE_METHODS}，收到: {method}")
    result = _wrap(statistics.quantiles, values, n=n, method=method)
    return [round_value(q, precision) for q in result]


def first_quartile(data: Iterable[float], precision: Optional[int] = None) -> float:
    """第一四分位数 Q1（exclusive 口径）。"""
    return quantiles(data, 4, precision=precision)[0]


def third_quartile(data: Iterable[float], precision: Optional[int] = None) -> float:
    """第三四分位数 Q3（exclusive 口径）。"""
    return quantiles(data, 4, precision=precision)[2]


def percentile(data: Iterable[float], p: float, precision: Optional[int] = None) -> float:
    """
    第 p 百分位数（0 <= p <= 100）。

    说明：
    - 与 quantiles 的 exclusive 口径一致：位置 pos = p/100 * (n+1)，在相邻两个有序值之间线性插值；
    - pos < 1 时返回最小值，pos >= n 时返回最大值；
    - 至少需要 2 个值。
    """
    values = to_float_list(data, "data")
    _require_size(values, 2, "百分位数")
    if not 0 <= p <= 100:
        raise InvalidDataInputError(f"p 必须位于 [0, 100]，当前为: {p}")

    ordered = sorted(values)
    count = len(ordered)
    pos = p / 100.0 * (count + 1)
    if pos < 1:
        return round_value(ordered[0], precision)
    if pos >= count:
        return round_value(ordered[-1], precision)

    lower = int(math.floor(pos))
    fraction = pos - lower
    result = ordered[lower - 1] + fraction * (ordered[lower] - ordered[lower - 1])
    return round_value(result, precision)


def trimmed_mean(
    data: Iterable[float],
    proportion_to_cut: float = 0.1,
    precision: Optional[int] = None,
) -> float:
    """
    截尾均值：排序后两端各去掉 floor(n * proportion_to_cut) 个值再求平均。

    参数：
    - proportion_to_cut: 单侧截掉的比例，0 <= proportion_to_cut < 0.5。
    """
    values = to_float_list(data, "data")
    if not 0 <= proportion_to_cut < 0.5:
        raise InvalidDataInputError(
            f"proportion_to_cut 必须位于 [0, 0.5)，当前为: {proportion_to_cut}"
        )
    ordered = sorted(values)
    cut = int(len(ordered) * proportion_to_cut)
    kept = ordered[cut : len(ordered) - cut]
    return round_value(statistics.fmean(kept), precision)
