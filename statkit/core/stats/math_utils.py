import math
from typing import Iterable, List, Optional

from ..exceptions import InvalidDataInputError


def round_value(value: float, precision: Optional[int] = None) -> float:
    """
    按需保留小数位：precision 为 None 时原样返回。
    """
    if precision is None:
        return value
    return round(value, precision)


def to_float_list(values: Iterable[float], name: str, allow_empty: bool = False) -> List[float]:
    """
    将任意可迭代对象转换为 float 列表，并做基础校验。

    参数：
    - values: 输入序列（list / tuple / pandas.Series / 生成器等）；
    - name: 参数名称，用于报错信息；
    - allow_empty: 是否允许空序列，默认不允许。
    """
    if isinstance(values, (str, bytes)):
        raise InvalidDataInputError(f"{name} 必须是数值序列，不能是字符串。")
    try:
        data = [float(v) for v in values]
    except TypeError as exc:
        raise InvalidDataInputError(f"{name} 必须是可迭代的数值序列。") from exc
    except ValueError as exc:
        raise InvalidDataInputError(f"{name} 中存在无法转换为浮点数的元素。") from exc

    if not data and not allow_empty:
        raise InvalidDataInputError(f"{name} 不能为空。")
    if any(math.isnan(v) for v in data):
        raise InvalidDataInputError(f"{name} 中存在 NaN，无法计算。")
    return data
