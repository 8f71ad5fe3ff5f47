"""
核密度估计（KDE）与基于 KDE 的随机抽样。

说明：
- kde 返回一个函数 f(x)，给出平滑后的密度（或累积概率）估计；
- kde_random 返回一个无参函数，每次调用从估计出的分布中抽取一个随机数；
- 有界核（支撑区间为 [-1, 1]）会先对样本排序，用二分查找只累加带宽内的点。

典型用法：
    f_hat = kde([-2.1, -1.3, -0.4, 1.9, 5.1, 6.2], h=1.5)
    f_hat(2.5)
    rand = kde_random(sample, h=1.5, kernel="epanechnikov", seed=8675309)
    [rand() for _ in range(10)]
"""

import math
import statistics
from bisect import bisect_left, bisect_right
from enum import Enum
from typing import Callable, Iterable, NamedTuple, Optional, Union

from ..exceptions import InvalidDataInputError
from ..logger import get_logger
from . import descriptive
from .math_utils import to_float_list
from .random_source import RandomSource, Seed

_logger = get_logger(__name__)

_NEWTON_MAX_ITER = 100
_NEWTON_TOL = 1e-12

BANDWIDTH_RULES = ("silverman", "scott")


class KdeKernel(str, Enum):
    """
    KDE 可用的核函数。

    别名：
    - GAUSS -> NORMAL
    - UNIFORM -> RECTANGULAR
    - EPANECHNIKOV -> PARABOLIC
    - BIWEIGHT -> QUARTIC
    """

    NORMAL = "normal"
    GAUSS = "gauss"
    LOGISTIC = "logistic"
    SIGMOID = "sigmoid"
    RECTANGULAR = "rectangular"
    UNIFORM = "uniform"
    TRIANGULAR = "triangular"
    PARABOLIC = "parabolic"
    EPANECHNIKOV = "epanechnikov"
    QUARTIC = "quartic"
    BIWEIGHT = "biweight"
    TRIWEIGHT = "triweight"
    COSINE = "cosine"

    def resolve(self) -> "KdeKernel":
        """把别名映射到规范名称，其余核返回自身。"""
        return _KERNEL_ALIASES.get(self, self)

    @classmethod
    def parse(cls, kernel: Union["KdeKernel", str]) -> "KdeKernel":
        """接受枚举成员或其字符串取值（大小写不敏感），未知名称抛出 InvalidDataInputError。"""
        if isinstance(kernel, cls):
            return kernel
        try:
            return cls(str(kernel).strip().lower())
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            raise InvalidDataInputError(f"未知的核函数: {kernel}，可选值为: {supported}") from exc


_KERNEL_ALIASES = {
    KdeKernel.GAUSS: KdeKernel.NORMAL,
    KdeKernel.UNIFORM: KdeKernel.RECTANGULAR,
    KdeKernel.EPANECHNIKOV: KdeKernel.PARABOLIC,
    KdeKernel.BIWEIGHT: KdeKernel.QUARTIC,
}


class _KernelFunctions(NamedTuple):
    pdf: Callable[[float], float]
    cdf: Callable[[float], float]
    # 标准核分布的逆 CDF；正态核为 None，抽样时直接使用 Box–Muller
    inv_cdf: Optional[Callable[[float], float]]
    # 支撑区间半径；None 表示无界
    support: Optional[float]


def _newton_inv_cdf(estimate, cdf, pdf):
    """以近似值为初值做 Newton–Raphson 迭代，得到核分布的逆 CDF。"""

    def inv_cdf(p: float) -> float:
        x = estimate(p)
        for _ in range(_NEWTON_MAX_ITER):
            derivative = pdf(x)
            if derivative == 0:
                _logger.debug("核函数逆 CDF 迭代时导数为 0，提前结束（p=%s, x=%s）", p, x)
                break
            step = (cdf(x) - p) / derivative
            x -= step
            if abs(step) < _NEWTON_TOL:
                break
        else:
            _logger.debug("核函数逆 CDF 迭代 %d 次仍未收敛（p=%s, x=%s）", _NEWTON_MAX_ITER, p, x)
        return x

    return inv_cdf


def _symmetric_estimate(exponent: float, correction: bool):
    # 指数与正弦修正项的常数取自 CPython statistics.kde_random 的 quartic / triweight 初值
    def estimate(p: float) -> float:
        sign, q = (1.0, p) if p <= 0.5 else (-1.0, 1.0 - p)
        x = (2.0 * q) ** exponent - 1.0
        if correction and 0.004 <= q < 0.499:
            x += 0.026818732 * math.sin(7.101753784 * q + 2.73230839482953)
        return x * sign

    return estimate


def _normal_pdf(t: float) -> float:
    return math.exp(-t * t / 2.0) / math.sqrt(2.0 * math.pi)


def _normal_cdf(t: float) -> float:
    return 0.5 * (1.0 + math.erf(t / math.sqrt(2.0)))


def _logistic_pdf(t: float) -> float:
    # 0.5 / (1 + cosh t) 改写为 e^-|t| / (1 + e^-|t|)²，|t| 很大时不溢出
    e = math.exp(-abs(t))
    return e / (1.0 + e) ** 2


def _logistic_cdf(t: float) -> float:
    if t >= 0:
        return 1.0 / (1.0 + math.exp(-t))
    e = math.exp(t)
    return e / (1.0 + e)


def _sigmoid_pdf(t: float) -> float:
    e = math.exp(-abs(t))
    return 2.0 * e / (math.pi * (1.0 + e * e))


def _sigmoid_cdf(t: float) -> float:
    if t > 0:
        return 1.0 - 2.0 / math.pi * math.atan(math.exp(-t))
    return 2.0 / math.pi * math.atan(math.exp(t))


def _quartic_pdf(t: float) -> float:
    return 15.0 / 16.0 * (1.0 - t * t) ** 2


def _quartic_cdf(t: float) -> float:
    return 3.0 / 16.0 * t**5 - 5.0 / 8.0 * t**3 + 15.0 / 16.0 * t + 0.5


def _triweight_pdf(t: float) -> float:
    return 35.0 / 32.0 * (1.0 - t * t) ** 3


def _triweight_cdf(t: float) -> float:
    return 35.0 / 32.0 * (-(t**7) / 7.0 + 3.0 * t**5 / 5.0 - t**3 + t) + 0.5


_KERNELS = {
    KdeKernel.NORMAL: _KernelFunctions(
        pdf=_normal_pdf,
        cdf=_normal_cdf,
        inv_cdf=None,
        support=None,
    ),
    KdeKernel.LOGISTIC: _KernelFunctions(
        pdf=_logistic_pdf,
        cdf=_logistic_cdf,
        inv_cdf=lambda p: math.log(p / (1.0 - p)),
        support=None,
    ),
    KdeKernel.SIGMOID: _KernelFunctions(
        pdf=_sigmoid_pdf,
        cdf=_sigmoid_cdf,
        inv_cdf=lambda p: math.log(math.tan(p * math.pi / 2.0)),
        support=None,
    ),
    KdeKernel.RECTANGULAR: _KernelFunctions(
        pdf=lambda t: 0.5,
        cdf=lambda t: 0.5 * t + 0.5,
        inv_cdf=lambda p: 2.0 * p - 1.0,
        support=1.0,
    ),
    KdeKernel.TRIANGULAR: _KernelFunctions(
        pdf=lambda t: 1.0 - abs(t),
        cdf=lambda t: t * t * (0.5 if t < 0 else -0.5) + t + 0.5,
        inv_cdf=lambda p: math.sqrt(2.0 * p) - 1.0 if p < 0.5 else 1.0 - math.sqrt(2.0 - 2.0 * p),
        support=1.0,
    ),
    KdeKernel.PARABOLIC: _KernelFunctions(
        pdf=lambda t: 0.75 * (1.0 - t * t),
        cdf=lambda t: -0.25 * t**3 + 0.75 * t + 0.5,
        inv_cdf=lambda p: 2.0 * math.cos((math.acos(2.0 * p - 1.0) + math.pi) / 3.0),
        support=1.0,
    ),
    KdeKernel.QUARTIC: _KernelFunctions(
        pdf=_quartic_pdf,
        cdf=_quartic_cdf,
        inv_cdf=_newton_inv_cdf(_symmetric_estimate(0.4258865685331, True), _quartic_cdf, _quartic_pdf),
        support=1.0,
    ),
    KdeKernel.TRIWEIGHT: _KernelFunctions(
        pdf=_triweight_pdf,
        cdf=_triweight_cdf,
        inv_cdf=_newton_inv_cdf(_symmetric_estimate(0.3400218741872791, False), _triweight_cdf, _triweight_pdf),
        support=1.0,
    ),
    KdeKernel.COSINE: _KernelFunctions(
        pdf=lambda t: math.pi / 4.0 * math.cos(math.pi * t / 2.0),
        cdf=lambda t: 0.5 * math.sin(math.pi * t / 2.0) + 0.5,
        inv_cdf=lambda p: 2.0 * math.asin(2.0 * p - 1.0) / math.pi,
        support=1.0,
    ),
}


def _validate(sample: Iterable[float], h: float, kernel: Union[KdeKernel, str]):
    data = to_float_list(sample, "sample")
    if math.isnan(h) or h <= 0:
        raise InvalidDataInputError(f"带宽 h 必须大于 0，当前为: {h}")
    resolved = KdeKernel.parse(kernel).resolve()
    return data, _KERNELS[resolved], resolved


def kde(
    sample: Iterable[float],
    h: float,
    kernel: Union[KdeKernel, str] = KdeKernel.NORMAL,
    cumulative: bool = False,
) -> Callable[[float], float]:
    """
    核密度估计。

    参数：
    - sample: 样本，不能为空；
    - h: 带宽，> 0，控制平滑程度（越大越平滑）；
    - kernel: 核函数，KdeKernel 成员或其字符串取值（如 "normal"、"epanechnikov"）；
    - cumulative: False 返回密度估计 1/(n h) Σ K((x-s)/h)，True 返回累积分布估计 1/n Σ W((x-s)/h)。

    返回：
    - 函数 f(x) -> float。
    """
    data, funcs, resolved = _validate(sample, h, kernel)
    n = len(data)

    if funcs.support is None:
        if cumulative:

            def estimate(x: float) -> float:
                return sum(funcs.cdf((x - s) / h) for s in data) / n

        else:

            def estimate(x: float) -> float:
                return sum(funcs.pdf((x - s) / h) for s in data) / (n * h)

    else:
        ordered = sorted(data)
        bandwidth = funcs.support * h

        if cumulative:

            def estimate(x: float) -> float:
                # 带宽左侧的样本点已完全累积（W = 1），右侧的贡献为 0
                i = bisect_left(ordered, x - bandwidth)
                j = bisect_right(ordered, x + bandwidth)
                supported = ordered[i:j]
                return (i + sum(funcs.cdf((x - s) / h) for s in supported)) / n

        else:

            def estimate(x: float) -> float:
                i = bisect_left(ordered, x - bandwidth)
                j = bisect_right(ordered, x + bandwidth)
                supported = ordered[i:j]
                return sum(funcs.pdf((x - s) / h) for s in supported) / (n * h)

    kind = "CDF" if cumulative else "PDF"
    estimate.__doc__ = f"{kind} estimate with h={h!r} and kernel={resolved.value!r}"
    return estimate


def kde_random(
    sample: Iterable[float],
    h: float,
    kernel: Union[KdeKernel, str] = KdeKernel.NORMAL,
    seed: Seed = None,
) -> Callable[[], float]:
    """
    返回一个无参函数，每次调用从 KDE 平滑后的分布中抽取一个随机数。

    说明：
    - 抽样方式：均匀抽取一个样本点 s，再加上 h 倍的标准核分布随机数；
    - 正态核使用 Box–Muller 生成标准正态随机数，其余核使用逆 CDF 变换；
    - 相同 seed 会复现完全相同的随机序列。
    """
    data, funcs, resolved = _validate(sample, h, kernel)
    n = len(data)
    source = RandomSource(seed)

    if funcs.inv_cdf is None:

        def rand() -> float:
            return data[source.index(n)] + h * source.standard_normal()

    else:
        inv_cdf = funcs.inv_cdf

        def rand() -> float:
            return data[source.index(n)] + h * inv_cdf(source.uniform_open())

    rand.__doc__ = f"Random KDE selection with h={h!r} and kernel={resolved.value!r}"
    return rand


def estimate_bandwidth(sample: Iterable[float], rule: str = "silverman") -> float:
    """
    按经验法则估计 KDE 带宽。

    参数：
    - rule:
        * "silverman"：0.9 * min(sd, IQR / 1.34) * n^(-1/5)，对偏态 / 多峰数据更稳健；
        * "scott"：1.059 * sd * n^(-1/5)，适合近似正态的数据。

    说明：
    - 至少需要 2 个值，且数据不能全部相同；
    - silverman 规则下 IQR 为 0 时退回使用 sd。
    """
    data = to_float_list(sample, "sample")
    if rule not in BANDWIDTH_RULES:
        raise InvalidDataInputError(f"rule 仅支持 {BANDWIDTH_RULES}，收到: {rule}")
    if len(data) < 2:
        raise InvalidDataInputError("估计带宽至少需要 2 个值。")

    n = len(data)
    sd = statistics.stdev(data)
    if sd == 0:
        raise InvalidDataInputError("所有值都相同（标准差为 0）时无法估计带宽。")

    if rule == "scott":
        return 1.059 * sd * n ** (-0.2)

    q1, _, q3 = descriptive.quantiles(data, 4)
    iqr_scale = (q3 - q1) / 1.34
    spread = min(sd, iqr_scale) if iqr_scale > 0 else sd
    return 0.9 * spread * n ** (-0.2)
