"""
正态分布模型 NormalDist。

设计目标：
- 不可变值对象：mu（均值）与 sigma（标准差，>= 0）；
- 所有运算（加减乘除、拟合）都返回新实例，不修改原对象；
- 不依赖 SciPy：CDF 基于 erf 近似，逆 CDF 基于 Acklam 有理近似。

典型用法：
    birth_weights = NormalDist.from_samples([2.5, 3.1, 2.1, 2.4, 2.7, 3.5])
    combined = birth_weights + NormalDist(0.4, 0.15)
    combined.cdf(3.0)
"""

import math
from numbers import Real
from typing import Iterable, List, Optional, Union

from ..exceptions import InvalidDataInputError
from . import descriptive
from .math_utils import round_value
from .random_source import RandomSource, Seed
from .special import erf, erfc, standard_normal_inv_cdf

_SQRT_2 = math.sqrt(2.0)
_SQRT_2PI = math.sqrt(2.0 * math.pi)


class NormalDist:
    """
    正态分布 N(mu, sigma²)。

    参数：
    - mu: 均值，任意实数；
    - sigma: 标准差，必须 >= 0；zscore / overlap / pdf / cdf 要求 sigma > 0。
    """

    __slots__ = ("_mu", "_sigma")

    def __init__(self, mu: float = 0.0, sigma: float = 1.0) -> None:
        if math.isnan(sigma) or sigma < 0:
            raise InvalidDataInputError(f"标准差 sigma 必须为非负数，当前为: {sigma}")
        self._mu = float(mu)
        self._sigma = float(sigma)

    @classmethod
    def from_samples(cls, samples: Iterable[float]) -> "NormalDist":
        """
        由样本估计正态分布参数：mu 为样本均值，sigma 为样本标准差（n-1）。

        异常：
        - 样本为空时抛出 InvalidDataInputError；
        - 只有 1 个样本时，样本标准差无定义，同样抛出 InvalidDataInputError。
        """
        data = list(samples)
        if not data:
            raise InvalidDataInputError("由样本构造正态分布时，样本不能为空。")
        return cls(descriptive.mean(data), descriptive.stdev(data))

    @property
    def mean(self) -> float:
        return self._mu

    @property
    def sigma(self) -> float:
        return self._sigma

    @property
    def variance(self) -> float:
        return self._sigma * self._sigma

    def get_mean_rounded(self, precision: int = 3) -> float:
        return round(self._mu, precision)

    def get_sigma_rounded(self, precision: int = 3) -> float:
        return round(self._sigma, precision)

    # ------------------------------------------------------------------
    # 密度 / 分布函数
    # ------------------------------------------------------------------
    def _require_positive_sigma(self, operation: str) -> None:
        if self._sigma == 0:
            raise InvalidDataInputError(f"sigma 为 0 时无法计算 {operation}。")

    def pdf(self, x: float) -> float:
        """概率密度函数 f(x) = exp(-(x-mu)²/(2σ²)) / (σ√(2π))。"""
        self._require_positive_sigma("pdf")
        coeff = 1.0 / (_SQRT_2PI * self._sigma)
        exponent = -((x - self._mu) ** 2) / (2.0 * self._sigma**2)
        return coeff * math.exp(exponent)

    def pdf_rounded(self, x: float, precision: int = 3) -> float:
        return round(self.pdf(x), precision)

    def cdf(self, x: float) -> float:
        """累积分布函数 F(x) = 0.5 * (1 + erf((x-mu) / (σ√2)))。"""
        self._require_positive_sigma("cdf")
        z = (x - self._mu) / (self._sigma * _SQRT_2)
        return 0.5 * (1.0 + erf(z))

    def cdf_rounded(self, x: float, precision: int = 3) -> float:
        return round(self.cdf(x), precision)

    def inv_cdf(self, p: float) -> float:
        """
        逆累积分布函数（分位数函数）：返回 x 使得 P(X <= x) = p。

        参数：
        - p: 概率，必须满足 0 < p < 1。
        """
        if not 0.0 < p < 1.0:
            raise InvalidDataInputError(f"p 必须在 (0, 1) 开区间内，当前为: {p}")
        return self._mu + standard_normal_inv_cdf(p) * self._sigma

    def inv_cdf_rounded(self, p: float, precision: int = 3) -> float:
        return round(self.inv_cdf(p), precision)

    def quantiles(self, n: int = 4) -> List[float]:
        """
        将分布切分为 n 个等概率区间，返回 n-1 个切分点。

        例如 n=4 返回三个四分位点，n=10 返回九个十分位点。
        """
        if n < 1:
            raise InvalidDataInputError(f"n 必须 >= 1，当前为: {n}")
        return [self.inv_cdf(i / n) for i in range(1, n)]

    def zscore(self, x: float) -> float:
        """标准分 (x - mu) / sigma。"""
        self._require_positive_sigma("zscore")
        return (x - self._mu) / self._sigma

    def zscore_rounded(self, x: float, precision: int = 3) -> float:
        return round(self.zscore(x), precision)

    def samples(self, n: int, seed: Seed = None) -> List[float]:
        """
        生成 n 个服从该分布的随机样本（Box–Muller 变换）。

        参数：
        - n: 样本数，>= 1；
        - seed: 随机种子，相同 seed 得到相同序列。
        """
        if n < 1:
            raise InvalidDataInputError(f"样本数 n 必须 >= 1，当前为: {n}")
        source = RandomSource(seed)
        result: List[float] = []
        while len(result) < n:
            z0, z1 = source.normal_pair()
            result.append(self._mu + self._sigma * z0)
            if len(result) < n:
                result.append(self._mu + self._sigma * z1)
        return result

    def overlap(self, other: "NormalDist") -> float:
        """
        两个正态分布的重叠系数（OVL），取值 [0, 1]。

        说明：
        - 两个密度曲线下方公共部分的面积；
        - 方差相同时使用闭式解 erfc(|Δmu| / (2σ√2))；
        - 方差不同时求出两条密度曲线的两个交点，OVL = 1 - Σ|ΔCDF(交点)|；
        - 先按 (sigma, mu) 排序，保证 a.overlap(b) == b.overlap(a)。
        """
        if not isinstance(other, NormalDist):
            raise TypeError("overlap 的参数必须是 NormalDist 实例。")
        x, y = self, other
        if (y._sigma, y._mu) < (x._sigma, x._mu):
            x, y = y, x
        x_var, y_var = x.variance, y.variance
        if not x_var or not y_var:
            raise InvalidDataInputError("计算重叠系数时，两个分布的 sigma 都必须大于 0。")

        dv = y_var - x_var
        dm = abs(y._mu - x._mu)
        if not dv:
            return erfc(dm / (2.0 * x._sigma * _SQRT_2))

        a = x._mu * y_var - y._mu * x_var
        b = x._sigma * y._sigma * math.sqrt(dm * dm + dv * math.log(y_var / x_var))
        x1 = (a + b) / dv
        x2 = (a - b) / dv
        return 1.0 - (abs(y.cdf(x1) - x.cdf(x1)) + abs(y.cdf(x2) - x.cdf(x2)))

    # ------------------------------------------------------------------
    # 分布运算
    # ------------------------------------------------------------------
    def add(self, other: Union["NormalDist", float]) -> "NormalDist":
        """
        加上一个常数或一个独立的正态分布。

        - 常数：仅平移均值，sigma 不变；
        - NormalDist：均值相加，sigma 按 sqrt(σ1² + σ2²) 合成（仅适用于独立变量）。
        """
        if isinstance(other, NormalDist):
            return NormalDist(self._mu + other._mu, math.hypot(self._sigma, other._sigma))
        return NormalDist(self._mu + float(other), self._sigma)

    def subtract(self, other: Union["NormalDist", float]) -> "NormalDist":
        """减去一个常数或一个独立的正态分布（方差同样相加）。"""
        if isinstance(other, NormalDist):
            return NormalDist(self._mu - other._mu, math.hypot(self._sigma, other._sigma))
        return NormalDist(self._mu - float(other), self._sigma)

    def multiply(self, constant: float) -> "NormalDist":
        """乘以常数：mu * c，sigma * |c|。常用于单位换算（如摄氏度转华氏度）。"""
        return NormalDist(self._mu * constant, self._sigma * abs(constant))

    def divide(self, constant: float) -> "NormalDist":
        """除以常数：mu / c，sigma / |c|；c 为 0 时抛出异常。"""
        if constant == 0:
            raise InvalidDataInputError("NormalDist 不能除以 0。")
        return NormalDist(self._mu / constant, self._sigma / abs(constant))

    def __add__(self, other):
        if isinstance(other, (NormalDist, Real)):
            return self.add(other)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, (NormalDist, Real)):
            return self.subtract(other)
        return NotImplemented

    def __rsub__(self, other):
        # c - X 等价于 (-X) + c
        if isinstance(other, Real):
            return NormalDist(float(other) - self._mu, self._sigma)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Real):
            return self.multiply(other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Real):
            return self.divide(other)
        return NotImplemented

    def __neg__(self) -> "NormalDist":
        return NormalDist(-self._mu, self._sigma)

    def __pos__(self) -> "NormalDist":
        return NormalDist(self._mu, self._sigma)

    def __eq__(self, other) -> bool:
        if not isinstance(other, NormalDist):
            return NotImplemented
        return self._mu == other._mu and self._sigma == other._sigma

    def __hash__(self) -> int:
        return hash((self._mu, self._sigma))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mu={self._mu!r}, sigma={self._sigma!r})"


def fit_normal(samples: Iterable[float], precision: Optional[int] = None) -> dict:
    """
    拟合正态分布并返回参数字典，便于写入结果表。

    返回：
    - {"mu": ..., "sigma": ...}，precision 不为 None 时做四舍五入。
    """
    dist = NormalDist.from_samples(samples)
    return {
        "mu": round_value(dist.mean, precision),
        "sigma": round_value(dist.sigma, precision),
    }
