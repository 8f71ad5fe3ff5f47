import pytest

from statkit.core.stats import KdeKernel
from statkit.core.utils import load_yaml
from statkit.modules.profile import KdeConfig, load_profile_config


def _raw(**overrides):
    raw = {
        "precision": 3,
        "columns": [{"name": "race_time", "column": "time"}],
    }
    raw.update(overrides)
    return raw


def test_defaults_are_filled_in():
    config = load_profile_config({"columns": [{"name": "speed"}]})
    assert config.precision is None
    assert config.confidence_level == 0.95
    assert config.kde == KdeConfig()
    assert config.kde.enabled is False
    column = config.columns[0]
    assert column.name == "speed"
    assert column.column == "speed"
    assert column.drop_zeroes is False
    assert column.quantiles == 4


def test_profile_section_is_unwrapped():
    config = load_profile_config({"profile": _raw()})
    assert config.precision == 3
    assert config.columns[0].column == "time"


def test_kde_section():
    config = load_profile_config(
        _raw(kde={"kernel": "epanechnikov", "bandwidth": 0.5, "grid_points": 16, "seed": 7})
    )
    assert config.kde.enabled is True
    assert config.kde.kernel is KdeKernel.EPANECHNIKOV
    assert config.kde.bandwidth == 0.5
    assert config.kde.grid_points == 16
    assert config.kde.seed == 7


@pytest.mark.parametrize(
    "raw",
    [
        {"columns": []},
        {"columns": [{"column": "time"}]},
        {"columns": [{"name": "a"}, {"name": "a"}]},
        {"columns": ["time"]},
        _raw(precision=-1),
        _raw(precision=1.5),
        _raw(confidence_level=1.0),
        _raw(confidence_level=0),
        _raw(columns=[{"name": "a", "quantiles": 1}]),
        _raw(columns=[{"name": "a", "drop_zeroes": "yes"}]),
        _raw(kde={"kernel": "box"}),
        _raw(kde={"bandwidth": "auto"}),
        _raw(kde={"bandwidth": -0.1}),
        _raw(kde={"grid_points": 1}),
        _raw(kde={"enabled": "true"}),
        _raw(kde={"seed": 1.5}),
        _raw(kde=["normal"]),
    ],
)
def test_invalid_config_raises(raw):
    with pytest.raises(ValueError):
        load_profile_config(raw)


def test_load_from_yaml_file(tmp_path):
    path = tmp_path / "profile.yaml"
    path.write_text(
        "profile:\n"
        "  precision: 2\n"
        "  kde:\n"
        "    kernel: Gauss\n"
        "    bandwidth: scott\n"
        "  columns:\n"
        "    - name: race_time\n"
        "      column: time\n"
        "      drop_zeroes: true\n"
        "      quantiles: 10\n",
        encoding="utf-8",
    )
    config = load_profile_config(load_yaml(path, section="profile"))
    assert config.precision == 2
    assert config.kde.kernel is KdeKernel.GAUSS
    assert config.kde.bandwidth == "scott"
    assert config.columns[0].drop_zeroes is True
    assert config.columns[0].quantiles == 10
