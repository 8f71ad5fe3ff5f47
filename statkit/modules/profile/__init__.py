"""
modules.profile: 列画像模块。

对外提供：
- load_profile_config: 从 YAML 字典构建 ProfileConfig；
- run_profile: 对 DataFrame 中的配置列做描述性统计、正态拟合、均值置信区间与分布诊断；
- density_grid: 生成核密度估计网格（长表）；
- resample: 按 KDE 平滑后的分布重抽样；
- mean_confidence_interval: 基于 t 分布的均值置信区间。
"""

from .config_schema import ColumnProfileConfig, KdeConfig, ProfileConfig, load_profile_config
from .profile_engine import density_grid, mean_confidence_interval, parse_array_cell, resample, run_profile

__all__ = [
    "ColumnProfileConfig",
    "KdeConfig",
    "ProfileConfig",
    "density_grid",
    "load_profile_config",
    "mean_confidence_interval",
    "parse_array_cell",
    "resample",
    "run_profile",
]
