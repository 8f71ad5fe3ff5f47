import math
import random
from typing import Optional, Tuple, Union

Seed = Optional[Union[int, str]]


class RandomSource:
    """
    可设定种子的伪随机数源。

    说明：
    - NormalDist.samples 与 KDE 随机抽样统一通过本类取随机数；
    - 相同 seed 在同一实现内产生完全相同的序列；seed 为 None 时由系统熵初始化；
    - 标准正态随机数使用 Box–Muller 变换，成对生成，第二个值缓存到下一次调用。
    """

    def __init__(self, seed: Seed = None) -> None:
        self._rng = random.Random(seed)
        self._spare_normal: Optional[float] = None

    def uniform(self) -> float:
        """[0, 1) 上的均匀分布随机数。"""
        return self._rng.random()

    def uniform_open(self) -> float:
        """(0, 1) 上的均匀分布随机数，供 log / 逆 CDF 等不能取到端点的场景使用。"""
        u = self._rng.random()
        while u == 0.0:
            u = self._rng.random()
        return u

    def index(self, size: int) -> int:
        """在 [0, size) 中均匀抽取一个下标。"""
        return self._rng.randrange(size)

    def normal_pair(self) -> Tuple[float, float]:
        """
        Box–Muller 变换：由两个均匀随机数生成一对独立的标准正态随机数。
        """
        u1 = self.uniform_open()
        u2 = self.uniform()
        radius = math.sqrt(-2.0 * math.log(u1))
        theta = 2.0 * math.pi * u2
        return radius * math.cos(theta), radius * math.sin(theta)

    def standard_normal(self) -> float:
        if self._spare_normal is not None:
            z, self._spare_normal = self._spare_normal, None
            return z
        z0, z1 = self.normal_pair()
        self._spare_normal = z1
        return z0
