# core.utils: 通用工具（配置加载等）
# 禁止引用 modules 下的任何内容

from statkit.core.utils.config_loader import load_yaml

__all__ = ["load_yaml"]
