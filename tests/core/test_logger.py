import logging

import pandas as pd

from statkit.core.logger import get_logger
from statkit.modules.profile import load_profile_config, run_profile


def test_logger_lives_under_package_namespace():
    assert get_logger("custom").name == "statkit.custom"
    assert get_logger("statkit.core.stats.kde").name == "statkit.core.stats.kde"


def test_package_logger_leaves_output_to_host():
    get_logger(__name__)
    root = logging.getLogger("statkit")
    assert root.propagate is True
    assert root.handlers
    assert all(isinstance(handler, logging.NullHandler) for handler in root.handlers)


def test_records_reach_caplog(caplog):
    caplog.set_level(logging.INFO, logger="statkit")
    df = pd.DataFrame({"time": [101.2, 99.8, 103.5]})
    config = load_profile_config({"columns": [{"name": "time"}, {"name": "speed"}]})
    run_profile(df, config)
    messages = [record.getMessage() for record in caplog.records if record.name.startswith("statkit.")]
    assert any("speed" in message for message in messages)
