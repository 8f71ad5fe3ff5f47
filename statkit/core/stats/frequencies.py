"""
频数表相关工具：
- frequencies / relative_frequencies：逐值频数与相对频率（百分比）；
- cumulative_*：累积频数 / 累积相对频率；
- frequency_table / frequency_table_by_size：按组距分组后的频数表；
- frequency_dataframe：把上述结果整理为 pandas DataFrame，便于导出或展示。
"""

import math
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from ..exceptions import InvalidDataInputError
from .math_utils import round_value, to_float_list


def _is_discrete(value: Any) -> bool:
    return isinstance(value, (str, bool, int))


def frequencies(data: Iterable[Any], transform_to_integer: bool = False) -> Dict[Any, int]:
    """
    统计每个取值出现的次数，按取值升序返回。

    参数：
    - data: 数值或类别序列；
    - transform_to_integer: 为 True 时先把所有值转换为 int 再计数。

    说明：
    - 第一个元素不是 str / bool / int（如 float）时，同样会转换为 int（向 0 截断）；
    - 输入为空时返回空字典。
    """
    values = list(data)
    if not values:
        return {}
    if transform_to_integer or not _is_discrete(values[0]):
        values = [int(v) for v in values]
    return dict(sorted(Counter(values).items()))


def cumulative_frequencies(data: Iterable[Any]) -> Dict[Any, int]:
    result: Dict[Any, int] = {}
    total = 0
    for value, count in frequencies(data).items():
        total += count
        result[value] = total
    return result


def relative_frequencies(data: Iterable[Any], precision: Optional[int] = None) -> Dict[Any, float]:
    """相对频率（百分比），所有取值之和为 100。"""
    values = list(data)
    n = len(values)
    return {value: round_value(count * 100 / n, precision) for value, count in frequencies(values).items()}


def cumulative_relative_frequencies(data: Iterable[Any]) -> Dict[Any, float]:
    result: Dict[Any, float] = {}
    total = 0.0
    for value, relative in relative_frequencies(data).items():
        total += relative
        result[value] = total
    return result


def _grouped_counts(values: List[Any], width) -> Dict[Any, int]:
    low = min(values)
    high = max(values)
    # 组起点统一按 low + i * width 计算，避免小数组距累加产生误差
    class_count = int((high - low) // width) + 1
    table: Dict[Any, int] = {low + i * width: 0 for i in range(class_count)}
    for value in values:
        key = low + int((value - low) // width) * width
        table[key] += 1
    return table


def frequency_table(data: Iterable[float], chunks: Optional[int] = None) -> Dict[Any, int]:
    """
    分组频数表。

    参数：
    - chunks: 期望的分组数；组距为 ceil((max - min) / chunks)，为 None 时组距为 1。

    说明：
    - 第一组从最小值开始，每组为左闭右开区间 [start, start + 组距)；
    - 返回 {组起点: 频数}，没有数据落入的组也会保留（频数为 0）；
    - 输入为空时返回空字典。
    """
    values = list(data)
    if not values:
        return {}
    to_float_list(values, "data")
    if chunks is not None and chunks < 1:
        raise InvalidDataInputError(f"chunks 必须 >= 1，当前为: {chunks}")

    if chunks is None:
        width = 1
    else:
        width = math.ceil((max(values) - min(values)) / chunks) or 1
    return _grouped_counts(values, width)


def frequency_table_by_size(data: Iterable[float], chunk_size: float = 1) -> Dict[Any, int]:
    """固定组距 chunk_size 的分组频数表，分组规则同 frequency_table。"""
    values = list(data)
    if not values:
        return {}
    to_float_list(values, "data")
    if chunk_size <= 0:
        raise InvalidDataInputError(f"chunk_size 必须大于 0，当前为: {chunk_size}")
    return _grouped_counts(values, chunk_size)


def frequency_dataframe(data: Iterable[Any], precision: Optional[int] = None) -> pd.DataFrame:
    """
    把逐值频数整理为 DataFrame。

    输出列：
    - value, frequency, cumulative_frequency, relative_frequency, cumulative_relative_frequency
    """
    values = list(data)
    columns = [
        "value",
        "frequency",
        "cumulative_frequency",
        "relative_frequency",
        "cumulative_relative_frequency",
    ]
    if not values:
        return pd.DataFrame(columns=columns)

    freq = frequencies(values)
    cumulative = cumulative_frequencies(values)
    relative = relative_frequencies(values)
    cumulative_relative = cumulative_relative_frequencies(values)

    rows = [
        {
            "value": value,
            "frequency": count,
            "cumulative_frequency": cumulative[value],
            "relative_frequency": round_value(relative[value], precision),
            "cumulative_relative_frequency": round_value(cumulative_relative[value], precision),
        }
        for value, count in freq.items()
    ]
    return pd.DataFrame(rows, columns=columns)
