from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from statkit.core.exceptions import InvalidDataInputError
from statkit.core.stats.kde import BANDWIDTH_RULES, KdeKernel


@dataclass
class ColumnProfileConfig:
    """
    单个列（指标）的画像配置。

    说明：
    - name: 指标名称，用于结果表中的 metric 列（如 "race_time"）；
    - column: 输入 DataFrame 中的列名，缺省时与 name 相同；
      列内可以是标量（每行一个值），也可以是 list/array（每行一组样本）；
    - drop_zeroes: 是否在计算前去掉值为 0 的样本（如未完赛记为 0 的用时）；
    - quantiles: 切分点个数对应的区间数，4 为四分位数，10 为十分位数。
    """

    name: str
    column: str
    drop_zeroes: bool = False
    quantiles: int = 4


@dataclass
class KdeConfig:
    """
    核密度估计配置。

    说明：
    - enabled: 是否生成密度网格 / 重抽样结果；
    - kernel: 核函数（KdeKernel 成员）；
    - bandwidth: 带宽，"silverman" / "scott" 表示按经验法则估计，也可以直接给出正数；
    - grid_points: 密度网格的点数，>= 2；
    - seed: 重抽样的随机种子，None 表示不固定。
    """

    enabled: bool = False
    kernel: KdeKernel = KdeKernel.NORMAL
    bandwidth: Union[str, float] = "silverman"
    grid_points: int = 100
    seed: Optional[Union[int, str]] = None


@dataclass
class ProfileConfig:
    """
    列画像的整体配置对象。

    说明：
    - columns: 需要画像的列；
    - precision: 结果保留的小数位数，None 表示不做四舍五入；
    - confidence_level: 均值置信区间的置信水平；
    - kde: 核密度估计配置。
    """

    columns: List[ColumnProfileConfig] = field(default_factory=list)
    precision: Optional[int] = None
    confidence_level: float = 0.95
    kde: KdeConfig = field(default_factory=KdeConfig)


def _load_kde_config(kde_raw: Optional[Mapping[str, Any]]) -> KdeConfig:
    if kde_raw is None:
        return KdeConfig()
    if not isinstance(kde_raw, Mapping):
        raise ValueError("profile.kde 必须是字典结构。")

    enabled = kde_raw.get("enabled", True)
    if not isinstance(enabled, bool):
        raise ValueError(f"profile.kde.enabled 必须为 true/false，当前为: {enabled}")

    try:
        kernel = KdeKernel.parse(kde_raw.get("kernel", KdeKernel.NORMAL.value))
    except InvalidDataInputError as exc:
        raise ValueError(f"profile.kde.kernel 非法：{exc}") from exc

    bandwidth = kde_raw.get("bandwidth", "silverman")
    if isinstance(bandwidth, str):
        if bandwidth not in BANDWIDTH_RULES:
            raise ValueError(
                f"profile.kde.bandwidth 必须为 'silverman'/'scott' 或正数，当前为: {bandwidth}"
            )
    elif isinstance(bandwidth, bool) or not isinstance(bandwidth, (int, float)) or bandwidth <= 0:
        raise ValueError(
            f"profile.kde.bandwidth 必须为 'silverman'/'scott' 或正数，当前为: {bandwidth}"
        )
    else:
        bandwidth = float(bandwidth)

    grid_points = kde_raw.get("grid_points", 100)
    if isinstance(grid_points, bool) or not isinstance(grid_points, int) or grid_points < 2:
        raise ValueError(f"profile.kde.grid_points 必须为 >= 2 的整数，当前为: {grid_points}")

    seed = kde_raw.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, (int, str))):
        raise ValueError(f"profile.kde.seed 必须为整数或字符串，当前为: {seed}")

    return KdeConfig(
        enabled=enabled,
        kernel=kernel,
        bandwidth=bandwidth,
        grid_points=grid_points,
        seed=seed,
    )


def load_profile_config(raw_config: Mapping[str, Any]) -> ProfileConfig:
    """
    从字典（通常由 YAML 解析而来）构建 ProfileConfig 对象，并做基础校验与默认值填充。

    期望的配置结构大致为（示例）：

    - profile:
        precision: 4
        confidence_level: 0.95
        kde:
          enabled: true
          kernel: "epanechnikov"
          bandwidth: "silverman"
          grid_points: 64
          seed: 42
        columns:
          - name: "race_time"
            column: "time"
            drop_zeroes: true
            quantiles: 4

    既可以传入包含 profile 段的完整配置，也可以直接传入 profile 段本身。
    如果缺少必要字段或取值非法，将抛出 ValueError，错误信息为中文，方便排查。
    """
    profile_raw: Dict[str, Any] = raw_config.get("profile", raw_config) or {}

    precision = profile_raw.get("precision")
    if precision is not None and (
        isinstance(precision, bool) or not isinstance(precision, int) or precision < 0
    ):
        raise ValueError(f"profile.precision 必须为非负整数，当前为: {precision}")

    confidence_level = profile_raw.get("confidence_level", 0.95)
    if not isinstance(confidence_level, (int, float)) or not 0 < confidence_level < 1:
        raise ValueError(f"profile.confidence_level 必须在 (0,1) 区间内，当前为: {confidence_level}")

    columns_cfg = profile_raw.get("columns", [])
    if not columns_cfg:
        raise ValueError("列画像配置中 columns 列表不能为空。")

    columns: List[ColumnProfileConfig] = []
    seen_names = set()
    for item in columns_cfg:
        if not isinstance(item, Mapping):
            raise ValueError(f"columns 中的每一项都必须是字典结构，当前为: {item!r}")
        name = item.get("name")
        if not name:
            raise ValueError("columns 中存在缺少 name 的配置。")
        if name in seen_names:
            raise ValueError(f"columns 中的 name 不能重复：{name}")
        seen_names.add(name)

        column = item.get("column") or name
        drop_zeroes = item.get("drop_zeroes", False)
        if not isinstance(drop_zeroes, bool):
            raise ValueError(f"指标 {name} 的 drop_zeroes 必须为 true/false，当前为: {drop_zeroes}")

        quantiles = item.get("quantiles", 4)
        if isinstance(quantiles, bool) or not isinstance(quantiles, int) or quantiles < 2:
            raise ValueError(f"指标 {name} 的 quantiles 必须为 >= 2 的整数，当前为: {quantiles}")

        columns.append(
            ColumnProfileConfig(
                name=str(name),
                column=str(column),
                drop_zeroes=drop_zeroes,
                quantiles=quantiles,
            )
        )

    return ProfileConfig(
        columns=columns,
        precision=precision,
        confidence_level=float(confidence_level),
        kde=_load_kde_config(profile_raw.get("kde")),
    )
