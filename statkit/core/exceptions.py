"""
core.exceptions: 统一的输入校验异常。

所有统计算法在输入不合法时（空样本、概率越界、标准差为 0 等）抛出
InvalidDataInputError，而不是静默返回 None / NaN。
"""


class InvalidDataInputError(ValueError):
    """
    统计计算的输入不满足前置条件。

    说明：
    - 继承自 ValueError，原有按 ValueError 捕获的调用方无需修改；
    - 错误信息为中文，方便排查。
    """
