"""
core.logger: 包内统一的日志入口。

用法：
    from statkit.core.logger import get_logger
    _logger = get_logger(__name__)

日志级别通过环境变量 STATKIT_LOG_LEVEL 控制（DEBUG / INFO / WARNING ...），默认 WARNING。
包内只挂 NullHandler 且保持向上传播，是否输出、输出到哪里由宿主程序的 logging 配置决定。
"""

import logging
import os
from typing import Optional

_ROOT_NAME = "statkit"
_configured = False


def _configure_root(level: Optional[str] = None) -> None:
    global _configured
    root = logging.getLogger(_ROOT_NAME)
    level_name = (level or os.environ.get("STATKIT_LOG_LEVEL", "WARNING")).upper()
    root.setLevel(getattr(logging, level_name, logging.WARNING))
    if not _configured:
        # 库内只挂 NullHandler，输出格式与去向由宿主程序配置
        root.addHandler(logging.NullHandler())
        _configured = True


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    获取挂在 statkit 命名空间下的 logger。

    参数：
    - name: 通常传 __name__；不以 "statkit" 开头时会自动加前缀；
    - level: 可选，覆盖根 logger 的级别。

    返回：
    - logging.Logger 实例。
    """
    if level is not None or not _configured:
        _configure_root(level)
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + "."):
        name = f"{_ROOT_NAME}.{name}"
    return logging.getLogger(name)
