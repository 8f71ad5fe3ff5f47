"""
单次遍历、O(1) 内存的在线统计量累加器 StreamingStat。

适用场景：
- 数据量很大、无法一次性载入内存（如逐行读取的日志、生成器数据流）；
- 需要在数据到达过程中随时查询均值 / 方差 / 偏度 / 峰度。

算法：Welford 在线算法（Terriberry / Pébay 扩展到三阶、四阶中心矩）。
不保存原始数据，因此不支持中位数 / 分位数等顺序统计量。
"""

import math
from typing import Iterable, Optional

from ..exceptions import InvalidDataInputError
from .math_utils import round_value


class StreamingStat:
    """
    在线累加器。

    用法：
        acc = StreamingStat()
        for v in stream:
            acc.add(v)
        acc.mean(), acc.stdev(), acc.kurtosis()

    说明：
    - add 原地更新并返回自身，可链式调用：StreamingStat().add(1).add(2)；
    - 只有一个写入方，不做加锁处理。
    """

    def __init__(self) -> None:
        self._n = 0
        self._mu = 0.0
        self._m2 = 0.0
        self._m3 = 0.0
        self._m4 = 0.0
        self._sum = 0.0
        self._min = math.inf
        self._max = -math.inf

    def add(self, value: float) -> "StreamingStat":
        value = float(value)
        self._sum += value
        if value < self._min:
            self._min = value
        if value > self._max:
            self._max = value

        n1 = self._n
        self._n += 1
        n = self._n

        delta = value - self._mu
        delta_n = delta / n
        delta_n2 = delta_n * delta_n
        term1 = delta * delta_n * n1

        # 更新顺序不能调换：m4 依赖旧的 m2 / m3，m3 依赖旧的 m2
        self._mu += delta_n
        self._m4 += term1 * delta_n2 * (n * n - 3 * n + 3) + 6 * delta_n2 * self._m2 - 4 * delta_n * self._m3
        self._m3 += term1 * delta_n * (n - 2) - 3 * delta_n * self._m2
        self._m2 += term1
        return self

    def extend(self, values: Iterable[float]) -> "StreamingStat":
        """逐个 add 可迭代对象中的值（支持生成器）。"""
        for value in values:
            self.add(value)
        return self

    def __len__(self) -> int:
        return self._n

    def _require(self, minimum: int, message: str) -> None:
        if self._n < minimum:
            raise InvalidDataInputError(message)

    def _require_not_empty(self) -> None:
        self._require(1, "数据不能为空，请先调用 add 添加数据。")

    def _require_spread(self, statistic: str) -> None:
        if self._m2 == 0.0:
            raise InvalidDataInputError(f"所有值都相同（标准差为 0）时，{statistic}无定义。")

    def count(self) -> int:
        self._require_not_empty()
        return self._n

    def sum(self) -> float:
        self._require_not_empty()
        return self._sum

    def min(self) -> float:
        self._require_not_empty()
        return self._min

    def max(self) -> float:
        self._require_not_empty()
        return self._max

    def mean(self, precision: Optional[int] = None) -> float:
        self._require_not_empty()
        return round_value(self._mu, precision)

    def variance(self, precision: Optional[int] = None) -> float:
        """样本方差 m2 / (n - 1)，至少需要 2 个值。"""
        self._require(2, "计算样本方差至少需要 2 个值。")
        return round_value(self._m2 / (self._n - 1), precision)

    def pvariance(self, precision: Optional[int] = None) -> float:
        """总体方差 m2 / n。"""
        self._require_not_empty()
        return round_value(self._m2 / self._n, precision)

    def stdev(self, precision: Optional[int] = None) -> float:
        return round_value(math.sqrt(self.variance()), precision)

    def pstdev(self, precision: Optional[int] = None) -> float:
        return round_value(math.sqrt(self.pvariance()), precision)

    def _population_skewness(self) -> float:
        self._require(3, "计算偏度至少需要 3 个值。")
        self._require_spread("偏度")
        return math.sqrt(self._n) * self._m3 / self._m2**1.5

    def skewness(self, precision: Optional[int] = None) -> float:
        """
        调整后的 Fisher–Pearson 样本偏度 G1 = sqrt(n(n-1)) / (n-2) * g1。
        """
        g1 = self._population_skewness()
        n = self._n
        return round_value(math.sqrt(n * (n - 1)) / (n - 2) * g1, precision)

    def pskewness(self, precision: Optional[int] = None) -> float:
        """总体（有偏）偏度 g1 = sqrt(n) * m3 / m2^1.5。"""
        return round_value(self._population_skewness(), precision)

    def kurtosis(self, precision: Optional[int] = None) -> float:
        """
        样本超额峰度（Fisher 定义，无偏修正），与 Excel KURT() 口径一致：

            g2 = n * m4 / m2² - 3
            G2 = (n-1) / ((n-2)(n-3)) * ((n+1) * g2 + 6)
        """
        self._require(4, "计算峰度至少需要 4 个值。")
        self._require_spread("峰度")
        n = self._n
        g2 = n * self._m4 / (self._m2 * self._m2) - 3.0
        result = (n - 1) / ((n - 2) * (n - 3)) * ((n + 1) * g2 + 6.0)
        return round_value(result, precision)

    def __repr__(self) -> str:
        return f"StreamingStat(n={self._n})"
