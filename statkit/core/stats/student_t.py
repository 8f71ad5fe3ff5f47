"""
Student t 分布模型 StudentT。

说明：
- pdf 在对数空间计算（log-gamma），避免大自由度时 Γ 函数溢出；
- cdf 通过正则化不完全 Beta 函数 I_x(df/2, 1/2) 计算，关于 t=0 对称；
- inv_cdf 以标准正态分位数为初值做 Newton–Raphson 迭代；
- 自由度趋于无穷时，pdf / cdf 收敛到标准正态分布。
"""

import math

from ..exceptions import InvalidDataInputError
from ..logger import get_logger
from .special import log_gamma, regularized_incomplete_beta, standard_normal_inv_cdf

_logger = get_logger(__name__)

_NEWTON_MAX_ITER = 100
_NEWTON_TOL = 1e-12
_MIN_DERIVATIVE = 1e-15


class StudentT:
    """
    自由度为 df 的 Student t 分布。

    参数：
    - df: 自由度，实数且 > 0（允许非整数，如 Welch 近似得到的自由度）。
    """

    __slots__ = ("_df",)

    def __init__(self, df: float) -> None:
        if math.isnan(df) or df <= 0:
            raise InvalidDataInputError(f"自由度 df 必须大于 0，当前为: {df}")
        self._df = float(df)

    @property
    def df(self) -> float:
        return self._df

    def pdf(self, t: float) -> float:
        df = self._df
        log_coeff = log_gamma((df + 1.0) / 2.0) - log_gamma(df / 2.0) - 0.5 * math.log(df * math.pi)
        log_body = -((df + 1.0) / 2.0) * math.log1p(t * t / df)
        return math.exp(log_coeff + log_body)

    def pdf_rounded(self, t: float, precision: int = 3) -> float:
        return round(self.pdf(t), precision)

    def cdf(self, t: float) -> float:
        """
        累积分布函数 P(T <= t)。

        令 x = df / (df + t²)，I = I_x(df/2, 1/2)：
        - t >= 0 时返回 1 - I/2；
        - t < 0 时返回 I/2。
        """
        df = self._df
        x = df / (df + t * t)
        ibeta = regularized_incomplete_beta(df / 2.0, 0.5, x)
        if t >= 0:
            return 1.0 - 0.5 * ibeta
        return 0.5 * ibeta

    def cdf_rounded(self, t: float, precision: int = 3) -> float:
        return round(self.cdf(t), precision)

    def inv_cdf(self, p: float) -> float:
        """
        逆累积分布函数：返回 t 使得 cdf(t) = p。

        参数：
        - p: 概率，必须满足 0 < p < 1。

        说明：
        - 以标准正态分位数为初值，迭代 x -= (cdf(x) - p) / pdf(x)；
        - 最多 100 次，步长 < 1e-12 时停止；
        - 若 pdf 下溢（< 1e-15）则提前结束并返回当前最优值，不抛异常。
        """
        if not 0.0 < p < 1.0:
            raise InvalidDataInputError(f"p 必须在 (0, 1) 开区间内，当前为: {p}")

        x = standard_normal_inv_cdf(p)
        for _ in range(_NEWTON_MAX_ITER):
            fx = self.cdf(x) - p
            fpx = self.pdf(x)
            if fpx < _MIN_DERIVATIVE:
                _logger.debug("t 分布逆 CDF 的导数下溢（df=%s, p=%s），提前结束迭代，x=%s", self._df, p, x)
                break
            delta = fx / fpx
            x -= delta
            if abs(delta) < _NEWTON_TOL:
                break
        return x

    def inv_cdf_rounded(self, p: float, precision: int = 3) -> float:
        return round(self.inv_cdf(p), precision)

    def __eq__(self, other) -> bool:
        if not isinstance(other, StudentT):
            return NotImplemented
        return self._df == other._df

    def __hash__(self) -> int:
        return hash(("StudentT", self._df))

    def __repr__(self) -> str:
        return f"StudentT(df={self._df!r})"
