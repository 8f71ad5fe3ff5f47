import ast
from collections.abc import Iterable as IterableABC
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional
import warnings

import pandas as pd

from statkit.core.logger import get_logger
from statkit.core.stats import (
    StudentT,
    descriptive,
    diagnose_distribution,
    estimate_bandwidth,
    fit_normal,
    kde,
    kde_random,
)
from statkit.core.stats.math_utils import round_value, to_float_list
from .config_schema import ColumnProfileConfig, KdeConfig, ProfileConfig

_logger = get_logger(__name__)

DENSITY_COLUMNS = ["metric", "x", "density", "cumulative"]
RESAMPLE_COLUMNS = ["metric", "draw", "value"]


def _parse_text_cell(text: str, metric_name: str) -> List[float]:
    name = f"指标 {metric_name} 的样本"
    if text[:1] in ("[", "("):
        try:
            parsed = ast.literal_eval(text)
        except (SyntaxError, ValueError):
            parsed = None
        if isinstance(parsed, (list, tuple)):
            return to_float_list(parsed, name)

    body = text.strip("[]{}()")
    tokens = [token.strip() for token in body.split(",")]
    tokens = [token for token in tokens if token]
    if not tokens:
        raise ValueError(f"指标 {metric_name} 的样本字符串内容为空，无法解析。")
    return to_float_list(tokens, name)


def parse_array_cell(cell: Any, metric_name: str) -> List[float]:
    """
    把一个单元格展开为 float 列表。

    支持的单元格形式：
    - 标量：长表中一行一个值，返回长度为 1 的列表；
    - list / tuple / pandas.Series 等非字符串可迭代对象；
    - 字符串形式的数组："[1, 2, 3]"、"(1, 2)"、"{1,2,3}"（PostgreSQL 数组）或 "1,2,3"。

    说明：
    - 以 [ 或 ( 开头的字符串先按 Python 字面量解析，其余按逗号切分；
    - 内容为空或存在无法转换的元素时抛出 ValueError。
    """
    if isinstance(cell, str):
        return _parse_text_cell(cell.strip(), metric_name)
    name = f"指标 {metric_name} 的样本"
    if isinstance(cell, IterableABC):
        return to_float_list(cell, name)
    return to_float_list([cell], name)


def _collect_values(df: pd.DataFrame, column_cfg: ColumnProfileConfig) -> List[float]:
    """
    把某一列的所有非空单元格展开为一个样本列表；drop_zeroes 为 True 时去掉 0。
    """
    values: List[float] = []
    for cell in df[column_cfg.column]:
        if not isinstance(cell, (str, bytes)) and not isinstance(cell, IterableABC) and pd.isna(cell):
            continue
        values.extend(parse_array_cell(cell, column_cfg.name))

    if column_cfg.drop_zeroes:
        values = [v for v in values if v != 0.0]
    if not values:
        raise ValueError(f"指标 {column_cfg.name} 在列 {column_cfg.column} 中没有可用的样本。")
    return values


def _warn_undeclared_columns(df: pd.DataFrame, config: ProfileConfig) -> None:
    configured = {c.column for c in config.columns}
    unused_columns = set(df.columns) - configured
    if unused_columns:
        warnings.warn(
            "数据中存在未在 columns 配置中声明的列："
            f"{', '.join(sorted(map(str, unused_columns)))}。"
            "如需对这些列做画像，请在配置中补充相应的 columns 项。",
            UserWarning,
        )


@dataclass
class ProfileResultRow:
    """
    单个指标的画像结果。

    字段说明：
    - metric / column: 指标名称与来源列；
    - n, mean, stdev, min, max, median: 基本统计量（stdev 在 n < 2 时为 None）；
    - skewness / kurtosis: 样本偏度与超额峰度，数据不足或所有值相同时为 None；
    - quantiles: 切分点列表（n < 2 时为空）；
    - normal_mu / normal_sigma: 拟合得到的正态分布参数；
    - ci_lower / ci_upper: 基于 t 分布的均值置信区间；
    - is_approximately_normal / is_heavy_tailed / is_zero_inflated: 分布形态标签。
    """

    metric: str
    column: str
    n: int
    mean: float
    stdev: Optional[float]
    min: float
    max: float
    median: float
    skewness: Optional[float]
    kurtosis: Optional[float]
    quantiles: List[float]
    normal_mu: Optional[float]
    normal_sigma: Optional[float]
    confidence_level: float
    ci_lower: Optional[float]
    ci_upper: Optional[float]
    is_approximately_normal: bool
    is_heavy_tailed: bool
    is_zero_inflated: bool


def mean_confidence_interval(values: List[float], confidence_level: float = 0.95) -> Dict[str, float]:
    """
    基于 Student t 分布的均值置信区间：mean ± t_{(1+cl)/2, n-1} * sem。

    参数：
    - values: 样本，至少 2 个值；
    - confidence_level: 置信水平，(0, 1)。

    返回：
    - {"mean", "sem", "t_critical", "lower", "upper"}
    """
    if not 0 < confidence_level < 1:
        raise ValueError(f"confidence_level 必须在 (0,1) 区间内，当前为: {confidence_level}")
    data_mean = descriptive.fmean(values)
    sem = descriptive.sem(values)
    t_critical = StudentT(len(values) - 1).inv_cdf((1.0 + confidence_level) / 2.0)
    half_width = t_critical * sem
    return {
        "mean": data_mean,
        "sem": sem,
        "t_critical": t_critical,
        "lower": data_mean - half_width,
        "upper": data_mean + half_width,
    }


def _profile_column(values: List[float], column_cfg: ColumnProfileConfig, config: ProfileConfig) -> ProfileResultRow:
    precision = config.precision
    n = len(values)
    diagnosis = diagnose_distribution(values)
    spread = n > 1 and diagnosis["std"] > 0

    stdev = None
    quantiles: List[float] = []
    normal_mu = normal_sigma = ci_lower = ci_upper = None
    if n > 1:
        stdev = round_value(diagnosis["std"], precision)
        quantiles = descriptive.quantiles(values, column_cfg.quantiles, precision=precision)
        fitted = fit_normal(values, precision)
        normal_mu = fitted["mu"]
        normal_sigma = fitted["sigma"]
        interval = mean_confidence_interval(values, config.confidence_level)
        ci_lower = round_value(interval["lower"], precision)
        ci_upper = round_value(interval["upper"], precision)

    skewness = descriptive.skewness(values, precision) if spread and n >= 3 else None
    kurtosis = descriptive.kurtosis(values, precision) if spread and n >= 4 else None

    return ProfileResultRow(
        metric=column_cfg.name,
        column=column_cfg.column,
        n=n,
        mean=round_value(diagnosis["mean"], precision),
        stdev=stdev,
        min=diagnosis["min"],
        max=diagnosis["max"],
        median=round_value(diagnosis["median"], precision),
        skewness=skewness,
        kurtosis=kurtosis,
        quantiles=quantiles,
        normal_mu=normal_mu,
        normal_sigma=normal_sigma,
        confidence_level=config.confidence_level,
        ci_lower=ci_lower,
        ci_upper=ci_upper,
        is_approximately_normal=bool(diagnosis["is_approximately_normal"]),
        is_heavy_tailed=bool(diagnosis["is_heavy_tailed"]),
        is_zero_inflated=bool(diagnosis["is_zero_inflated"]),
    )


def run_profile(df: pd.DataFrame, config: ProfileConfig) -> pd.DataFrame:
    """
    列画像的主入口。

    设计目标：
    - 输入为普通 DataFrame，每个配置列可以是一行一个值，也可以是一行一组样本（list/array）；
    - 根据 ProfileConfig 调用 core.stats 完成描述性统计、正态拟合、t 分布置信区间与分布诊断；
    - 返回统一结构的结果 DataFrame，每行对应一个配置的指标。

    说明：
    - 配置中声明但数据中缺少的列会跳过（记录 info 日志）；
    - 数据中存在未声明的列时给出 UserWarning 提示，方便补充配置；
    - 所有配置列都缺失时抛出 ValueError。
    """
    _warn_undeclared_columns(df, config)

    results: List[ProfileResultRow] = []
    for column_cfg in config.columns:
        if column_cfg.column not in df.columns:
            _logger.info("数据中缺少列 %s，跳过指标 %s", column_cfg.column, column_cfg.name)
            continue
        values = _collect_values(df, column_cfg)
        results.append(_profile_column(values, column_cfg, config))

    if not results:
        raise ValueError("run_profile 未生成任何结果，请检查输入数据与配置是否匹配。")

    return pd.DataFrame([asdict(row) for row in results])


def _resolve_bandwidth(values: List[float], kde_cfg: KdeConfig) -> float:
    if isinstance(kde_cfg.bandwidth, str):
        return estimate_bandwidth(values, kde_cfg.bandwidth)
    return float(kde_cfg.bandwidth)


def density_grid(df: pd.DataFrame, config: ProfileConfig) -> pd.DataFrame:
    """
    为每个配置列生成核密度估计网格（长表）。

    输出列：
    - metric: 指标名称；
    - x: 网格点，在 [min - 3h, max + 3h] 上等间距取 grid_points 个点；
    - density: 密度估计值；
    - cumulative: 累积分布估计值。

    说明：
    - kde.enabled 为 False 时返回空表；
    - 缺失的列会跳过。
    """
    kde_cfg = config.kde
    if not kde_cfg.enabled:
        _logger.info("kde.enabled 为 False，不生成密度网格")
        return pd.DataFrame(columns=DENSITY_COLUMNS)

    precision = config.precision
    rows: List[Dict[str, Any]] = []
    for column_cfg in config.columns:
        if column_cfg.column not in df.columns:
            _logger.info("数据中缺少列 %s，跳过指标 %s 的密度网格", column_cfg.column, column_cfg.name)
            continue
        values = _collect_values(df, column_cfg)
        h = _resolve_bandwidth(values, kde_cfg)
        f_hat = kde(values, h, kde_cfg.kernel)
        cdf_hat = kde(values, h, kde_cfg.kernel, cumulative=True)

        low = min(values) - 3.0 * h
        high = max(values) + 3.0 * h
        step = (high - low) / (kde_cfg.grid_points - 1)
        for i in range(kde_cfg.grid_points):
            x = low + i * step
            rows.append(
                {
                    "metric": column_cfg.name,
                    "x": round_value(x, precision),
                    "density": round_value(f_hat(x), precision),
                    "cumulative": round_value(cdf_hat(x), precision),
                }
            )

    return pd.DataFrame(rows, columns=DENSITY_COLUMNS)


def resample(df: pd.DataFrame, config: ProfileConfig, size: int) -> pd.DataFrame:
    """
    按 KDE 平滑后的分布为每个配置列生成 size 个随机样本（长表：metric, draw, value）。

    说明：
    - 使用 kde.seed 作为随机种子，相同配置得到相同结果；
    - kde.enabled 为 False 时返回空表。
    """
    if size < 1:
        raise ValueError(f"size 必须 >= 1，当前为: {size}")
    kde_cfg = config.kde
    if not kde_cfg.enabled:
        _logger.info("kde.enabled 为 False，不生成重抽样结果")
        return pd.DataFrame(columns=RESAMPLE_COLUMNS)

    precision = config.precision
    rows: List[Dict[str, Any]] = []
    for column_cfg in config.columns:
        if column_cfg.column not in df.columns:
            _logger.info("数据中缺少列 %s，跳过指标 %s 的重抽样", column_cfg.column, column_cfg.name)
            continue
        values = _collect_values(df, column_cfg)
        h = _resolve_bandwidth(values, kde_cfg)
        rand = kde_random(values, h, kde_cfg.kernel, seed=kde_cfg.seed)
        for draw in range(size):
            rows.append({"metric": column_cfg.name, "draw": draw, "value": round_value(rand(), precision)})

    return pd.DataFrame(rows, columns=RESAMPLE_COLUMNS)
