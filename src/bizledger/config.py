"""
BizLedger configuration management.

Supports loading from YAML files, environment variables, and keyword overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from bizledger.analyzers.currency import DEFAULT_CURRENCY, currency_from_value
from bizledger.analyzers.periods import Granularity, WeeklyPolicy
from bizledger.connectors.normalize import NumericPolicy
from bizledger.models.financial import CurrencyTag


class ConnectorConfig(BaseModel):
    """Configuration for a single record connector."""

    type: str = Field(description="Connector type: csv, json, or a dotted class path")
    enabled: bool = True
    credentials: dict[str, Any] = Field(default_factory=dict)
    options: dict[str, Any] = Field(default_factory=dict)


class ReportConfig(BaseModel):
    """How summaries are bucketed and how raw amounts are read."""

    granularity: Granularity = Field(default=Granularity.MONTHLY)
    weekly_policy: WeeklyPolicy = Field(default=WeeklyPolicy.MONTH_RELATIVE)
    numeric_policy: NumericPolicy = Field(
        default=NumericPolicy.LENIENT,
        description="lenient: bad amounts count as 0; strict: raise per record",
    )

    @field_validator("granularity", mode="before")
    @classmethod
    def _parse_granularity(cls, value: Any) -> Granularity:
        return Granularity.parse(value)

    @field_validator("weekly_policy", mode="before")
    @classmethod
    def _parse_weekly_policy(cls, value: Any) -> WeeklyPolicy:
        return WeeklyPolicy.parse(value)


class BizLedgerConfig(BaseModel):
    """Root configuration for BizLedger."""

    default_currency: CurrencyTag = Field(
        default=DEFAULT_CURRENCY,
        description="Used when records carry no currency",
    )
    report: ReportConfig = Field(default_factory=ReportConfig)
    connectors: list[ConnectorConfig] = Field(default_factory=list)

    # Output settings
    output_dir: str = Field(default="./bizledger_reports")
    log_level: str = Field(default="WARNING")

    @field_validator("default_currency", mode="before")
    @classmethod
    def _parse_currency(cls, value: Any) -> Any:
        if value is None:
            return DEFAULT_CURRENCY
        if isinstance(value, str):
            tag = currency_from_value(value)
            if tag is None:
                raise ValueError(f"Unsupported currency code: {value!r}")
            return tag
        if isinstance(value, dict) and "code" in value:
            return currency_from_value(value)
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> str:
        return str(value or "WARNING").upper()

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> BizLedgerConfig:
        """Load configuration from file, env vars, and overrides.

        Priority: overrides > env vars > config file > defaults.
        """
        data: dict[str, Any] = {}

        # 1. Load from YAML file if provided
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

        # 2. Override from environment variables
        env_currency = os.environ.get("BIZLEDGER_CURRENCY")
        env_granularity = os.environ.get("BIZLEDGER_GRANULARITY")
        env_policy = os.environ.get("BIZLEDGER_NUMERIC_POLICY")
        env_level = os.environ.get("BIZLEDGER_LOG_LEVEL")

        if env_currency:
            data["default_currency"] = env_currency
        if env_granularity or env_policy:
            report = dict(data.get("report") or {})
            if env_granularity:
                report["granularity"] = env_granularity
            if env_policy:
                report["numeric_policy"] = env_policy.lower()
            data["report"] = report
        if env_level:
            data["log_level"] = env_level

        # 3. Apply keyword overrides
        data.update(overrides)

        return cls.model_validate(data)
