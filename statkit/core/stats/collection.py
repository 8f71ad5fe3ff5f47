from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from ..exceptions import InvalidDataInputError
from . import descriptive, frequencies
from .math_utils import round_value


class Statistics:
    """
    针对单个数据集的统计量集合。

    说明：
    - 构造时保留原始序列（original_array），同时生成一份升序排列的副本（values）；
    - 所有统计量都基于排序副本计算，strip_zeroes 只影响排序副本；
    - 与 descriptive 模块中"空输入返回 None"的约定不同，本类在数据为空时统一抛出 InvalidDataInputError。

    用法：
        s = Statistics.make([98, 90, 70, 18, 92, 92, 55, 83, 45, 95, 88, 76])
        s.median(), s.first_quartile(), s.interquartile_range()
    """

    def __init__(self, values: Optional[Iterable[Any]] = None) -> None:
        self._original = list(values) if values is not None else []
        try:
            self._values = sorted(self._original)
        except TypeError as exc:
            raise InvalidDataInputError("数据集中存在无法相互比较大小的元素。") from exc

    @classmethod
    def make(cls, values: Iterable[Any]) -> "Statistics":
        return cls(values)

    def strip_zeroes(self) -> "Statistics":
        """去掉值为 0 的元素（原地修改排序副本），返回自身以便链式调用。"""
        self._values = [v for v in self._values if v != 0]
        return self

    def original_array(self) -> List[Any]:
        return list(self._original)

    def values(self) -> List[Any]:
        return list(self._values)

    def _require_values(self) -> List[Any]:
        if not self._values:
            raise InvalidDataInputError("数据集为空，无法计算统计量。")
        return self._values

    def numeric_values(self) -> List[Any]:
        """
        返回排序后的数据，并确认每个元素都是数值（或可解析为数值的字符串）。

        存在非数值元素时抛出 InvalidDataInputError。
        """
        for value in self._values:
            if isinstance(value, bool):
                raise InvalidDataInputError(f"数据集中存在非数值元素: {value!r}")
            try:
                float(value)
            except (TypeError, ValueError) as exc:
                raise InvalidDataInputError(f"数据集中存在非数值元素: {value!r}") from exc
        return list(self._values)

    # ------------------------------------------------------------------
    # 基础统计量
    # ------------------------------------------------------------------
    def count(self) -> int:
        return len(self._values)

    def min(self) -> Any:
        return self._require_values()[0]

    def max(self) -> Any:
        return self._require_values()[-1]

    def range(self) -> Any:
        return self.max() - self.min()

    def mean(self, precision: Optional[int] = None) -> float:
        return descriptive.mean(self._require_values(), precision)

    def median(self, precision: Optional[int] = None) -> float:
        return descriptive.median(self._require_values(), precision)

    def mode(self) -> Optional[Any]:
        """众数；所有值都只出现一次时返回 None。"""
        return descriptive.mode(self._require_values())

    def first_quartile(self, precision: Optional[int] = None) -> float:
        return descriptive.first_quartile(self._require_values(), precision)

    def third_quartile(self, precision: Optional[int] = None) -> float:
        return descriptive.third_quartile(self._require_values(), precision)

    def interquartile_range(self, precision: Optional[int] = None) -> float:
        q1, _, q3 = descriptive.quantiles(self._require_values(), 4)
        return round_value(q3 - q1, precision)

    def stdev(self, precision: Optional[int] = None) -> float:
        return descriptive.stdev(self._require_values(), precision)

    def pstdev(self, precision: Optional[int] = None) -> float:
        return descriptive.pstdev(self._require_values(), precision)

    def variance(self, precision: Optional[int] = None) -> float:
        return descriptive.variance(self._require_values(), precision)

    def pvariance(self, precision: Optional[int] = None) -> float:
        return descriptive.pvariance(self._require_values(), precision)

    def skewness(self, precision: Optional[int] = None) -> float:
        return descriptive.skewness(self._require_values(), precision)

    def pskewness(self, precision: Optional[int] = None) -> float:
        return descriptive.pskewness(self._require_values(), precision)

    def kurtosis(self, precision: Optional[int] = None) -> float:
        return descriptive.kurtosis(self._require_values(), precision)

    def geometric_mean(self, precision: Optional[int] = None) -> float:
        return descriptive.geometric_mean(self._require_values(), precision)

    def harmonic_mean(self, precision: Optional[int] = None) -> float:
        return descriptive.harmonic_mean(self._require_values(), precision=precision)

    def median_grouped(self, interval: float = 1, precision: Optional[int] = None) -> float:
        return descriptive.median_grouped(self._require_values(), interval, precision)

    # ------------------------------------------------------------------
    # 频数视图
    # ------------------------------------------------------------------
    def frequencies(self, transform_to_integer: bool = False) -> Dict[Any, int]:
        return frequencies.frequencies(self._values, transform_to_integer)

    def relative_frequencies(self, precision: Optional[int] = None) -> Dict[Any, float]:
        return frequencies.relative_frequencies(self._values, precision)

    def cumulative_frequencies(self) -> Dict[Any, int]:
        return frequencies.cumulative_frequencies(self._values)

    def cumulative_relative_frequencies(self) -> Dict[Any, float]:
        return frequencies.cumulative_relative_frequencies(self._values)

    def frequency_table(self, chunks: Optional[int] = None) -> Dict[Any, int]:
        return frequencies.frequency_table(self._values, chunks)

    def frequency_table_by_size(self, chunk_size: float = 1) -> Dict[Any, int]:
        return frequencies.frequency_table_by_size(self._values, chunk_size)

    def frequency_dataframe(self, precision: Optional[int] = None) -> pd.DataFrame:
        return frequencies.frequency_dataframe(self._values, precision)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Statistics(count={len(self._values)})"
