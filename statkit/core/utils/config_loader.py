"""
core.utils.config_loader: 配置文件读取（当前为 YAML）。

禁止引用 modules 下的任何内容。
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


def load_yaml(path: Union[str, Path], section: Optional[str] = None) -> Dict[str, Any]:
    """
    读取 YAML 配置文件并返回字典。

    输入：
    - path: 文件路径，可为 str 或 Path；
    - section: 可选，只返回顶层的某个配置段（如 "profile"）。

    输出：
    - 解析得到的字典；文件为空或仅包含空文档时返回空字典。

    异常：
    - FileNotFoundError: 路径不存在；
    - KeyError: 指定的 section 不存在；
    - ValueError: section 对应的内容不是字典；
    - yaml.YAMLError: 解析失败时由 PyYAML 抛出。
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML 文件不存在：{path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    data = data if isinstance(data, dict) else {}

    if section is None:
        return data
    if section not in data:
        raise KeyError(f"YAML 文件 {path} 中缺少配置段：{section}")
    content = data[section]
    if not isinstance(content, dict):
        raise ValueError(f"配置段 {section} 必须是字典结构。")
    return content
