from typing import Dict, Iterable

from .descriptive import median
from .math_utils import to_float_list
from .streaming_stat import StreamingStat

# 经验规则阈值（可根据经验调整）
SKEWNESS_THRESHOLD = 1.0
KURTOSIS_EXCESS_THRESHOLD = 3.0
ZERO_RATIO_THRESHOLD = 0.3


def diagnose_distribution(values: Iterable[float]) -> Dict[str, object]:
    """
    对连续型数据做简单的分布形态诊断，帮助判断能否按正态分布处理。

    适用于：
    - 比赛用时、金额、时长等连续型指标；
    - 样本量中等及以上（如 n >= 30），结果更稳定。

    诊断内容（近似，非严格统计检验）：
    - 样本规模：n；
    - 基本统计量：均值、样本标准差、最小值、最大值、中位数；
    - 偏度 / 超额峰度（样本口径，以 0 为参考，绝对值越大越偏离正态）；
      数据太少或所有值相同时无定义，此时记为 0.0；
    - 零占比：zero_ratio，用于识别零膨胀分布；
    - 经验标签：
      * is_approximately_normal: |skew| < 1 且 |kurtosis_excess| < 3 且 zero_ratio < 0.3；
      * is_heavy_tailed: |skew| >= 1 或 |kurtosis_excess| >= 3；
      * is_zero_inflated: zero_ratio >= 0.3。

    说明：
    - 均值、方差、偏度、峰度由一次 StreamingStat 遍历得到。

    返回：
    - 字典，包含数值指标和布尔标签。
    """
    data = to_float_list(values, "values")
    acc = StreamingStat().extend(data)
    n = len(acc)

    std = acc.stdev() if n > 1 else 0.0
    if n > 2 and std > 0:
        skewness = acc.skewness()
    else:
        skewness = 0.0
    if n > 3 and std > 0:
        kurtosis_excess = acc.kurtosis()
    else:
        kurtosis_excess = 0.0

    zero_count = sum(1 for x in data if x == 0.0)
    zero_ratio = zero_count / n

    is_approximately_normal = (
        abs(skewness) < SKEWNESS_THRESHOLD
        and abs(kurtosis_excess) < KURTOSIS_EXCESS_THRESHOLD
        and zero_ratio < ZERO_RATIO_THRESHOLD
    )
    is_heavy_tailed = abs(skewness) >= SKEWNESS_THRESHOLD or abs(kurtosis_excess) >= KURTOSIS_EXCESS_THRESHOLD
    is_zero_inflated = zero_ratio >= ZERO_RATIO_THRESHOLD

    return {
        "n": n,
        "mean": acc.mean(),
        "std": std,
        "min": acc.min(),
        "max": acc.max(),
        "median": median(data),
        "skewness": skewness,
        "kurtosis_excess": kurtosis_excess,
        "zero_ratio": zero_ratio,
        "is_approximately_normal": is_approximately_normal,
        "is_heavy_tailed": is_heavy_tailed,
        "is_zero_inflated": is_zero_inflated,
    }
