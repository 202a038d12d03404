"""Tests for configuration management."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from bizledger.analyzers.currency import DEFAULT_CURRENCY, get_currency
from bizledger.analyzers.periods import Granularity, WeeklyPolicy
from bizledger.config import BizLedgerConfig
from bizledger.connectors.normalize import NumericPolicy


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "BIZLEDGER_CURRENCY",
        "BIZLEDGER_GRANULARITY",
        "BIZLEDGER_NUMERIC_POLICY",
        "BIZLEDGER_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


class TestConfig:
    def test_default_config(self) -> None:
        config = BizLedgerConfig()
        assert config.default_currency == DEFAULT_CURRENCY
        assert config.report.granularity == Granularity.MONTHLY
        assert config.report.weekly_policy == WeeklyPolicy.MONTH_RELATIVE
        assert config.report.numeric_policy == NumericPolicy.LENIENT
        assert config.connectors == []
        assert config.log_level == "WARNING"

    def test_load_from_yaml(self, tmp_path: Path) -> None:
        yaml_content = {
            "default_currency": "GBP",
            "report": {"granularity": "Quarterly", "weekly_policy": "monday-aligned"},
            "connectors": [{"type": "csv", "options": {"file_path": "records.csv"}}],
            "log_level": "debug",
        }
        config_file = tmp_path / "bizledger.yaml"
        config_file.write_text(yaml.dump(yaml_content))

        config = BizLedgerConfig.load(str(config_file))
        assert config.default_currency == get_currency("GBP")
        assert config.report.granularity == Granularity.QUARTERLY
        assert config.report.weekly_policy == WeeklyPolicy.MONDAY_ALIGNED
        assert len(config.connectors) == 1
        assert config.connectors[0].enabled is True
        assert config.log_level == "DEBUG"

    def test_currency_mapping(self) -> None:
        config = BizLedgerConfig(default_currency={"code": "USD"})
        assert config.default_currency == get_currency("USD")

    def test_unsupported_currency(self) -> None:
        with pytest.raises(ValidationError):
            BizLedgerConfig(default_currency="XYZ")

    def test_unknown_granularity(self) -> None:
        with pytest.raises(ValidationError):
            BizLedgerConfig(report={"granularity": "hourly"})

    def test_load_with_overrides(self) -> None:
        config = BizLedgerConfig.load(None, default_currency="EUR", output_dir="/tmp/out")
        assert config.default_currency.code == "EUR"
        assert config.output_dir == "/tmp/out"

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BIZLEDGER_CURRENCY", "cad")
        monkeypatch.setenv("BIZLEDGER_GRANULARITY", "annual")
        monkeypatch.setenv("BIZLEDGER_NUMERIC_POLICY", "STRICT")
        monkeypatch.setenv("BIZLEDGER_LOG_LEVEL", "info")

        config = BizLedgerConfig.load()
        assert config.default_currency.code == "CAD"
        assert config.report.granularity == Granularity.ANNUAL
        assert config.report.numeric_policy == NumericPolicy.STRICT
        assert config.log_level == "INFO"

    def test_env_merges_with_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "bizledger.yaml"
        config_file.write_text(yaml.dump({"report": {"weekly_policy": "year_relative"}}))
        monkeypatch.setenv("BIZLEDGER_GRANULARITY", "weekly")

        config = BizLedgerConfig.load(str(config_file))
        assert config.report.granularity == Granularity.WEEKLY
        assert config.report.weekly_policy == WeeklyPolicy.YEAR_RELATIVE

    def test_overrides_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BIZLEDGER_CURRENCY", "CAD")
        config = BizLedgerConfig.load(default_currency="USD")
        assert config.default_currency.code == "USD"

    def test_missing_config_file(self) -> None:
        config = BizLedgerConfig.load("/nonexistent/bizledger.yaml")
        # Should use defaults without error
        assert config.report.granularity == Granularity.MONTHLY
