"""
Connector Registry — builds record sources from config and keeps them by key.

Built-in types are ``csv`` and ``json``; any other ``type`` is treated as a
dotted ``module.ClassName`` path so projects can plug in their own source.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from bizledger.connectors.base import BaseConnector

if TYPE_CHECKING:
    from bizledger.config import BizLedgerConfig, ConnectorConfig

logger = logging.getLogger("bizledger.connectors.registry")

_BUILTIN_CONNECTORS: dict[str, str] = {
    "csv": "bizledger.connectors.csv_connector.CSVConnector",
    "json": "bizledger.connectors.json_connector.JSONConnector",
}


def _load_class(dotted_path: str) -> type[BaseConnector]:
    module_name, _, class_name = dotted_path.rpartition(".")
    if not module_name:
        raise ValueError(f"not a built-in type or a dotted class path: {dotted_path!r}")
    return getattr(importlib.import_module(module_name), class_name)


class ConnectorRegistry:
    """Connectors a ledger reads from, in registration order.

    Usage::

        registry = ConnectorRegistry()
        registry.auto_discover(config)
        registry.register(JSONConnector(records=docs), key="app")
    """

    def __init__(self) -> None:
        self._by_key: dict[str, BaseConnector] = {}

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    @property
    def active_connectors(self) -> list[BaseConnector]:
        return list(self._by_key.values())

    def register(self, connector: BaseConnector, key: str | None = None) -> None:
        """Add ``connector`` under ``key`` (its ``name`` when omitted)."""
        key = key or connector.name
        self._by_key[key] = connector
        logger.info("Registered connector: %s", key)

    def get(self, key: str) -> BaseConnector | None:
        return self._by_key.get(key)

    def auto_discover(self, config: BizLedgerConfig) -> None:
        """Build and register every enabled connector listed in ``config``."""
        for i, conn_config in enumerate(config.connectors):
            if not conn_config.enabled:
                logger.debug("Connector %d (%s) disabled", i, conn_config.type)
                continue
            connector = self._create_connector(conn_config, config)
            if connector is None:
                continue
            # Two files of the same type must not overwrite each other
            key = connector.name if connector.name not in self else f"{connector.name}:{i}"
            self.register(connector, key)

    def _create_connector(
        self,
        conn_config: ConnectorConfig,
        config: BizLedgerConfig,
    ) -> BaseConnector | None:
        path = _BUILTIN_CONNECTORS.get(conn_config.type, conn_config.type)
        try:
            connector_cls = _load_class(path)
        except (ImportError, AttributeError, ValueError) as e:
            logger.error("Cannot load connector '%s': %s", conn_config.type, e)
            return None

        options = {"numeric_policy": config.report.numeric_policy, **conn_config.options}
        try:
            return connector_cls(credentials=conn_config.credentials, **options)
        except Exception as e:  # noqa: BLE001
            logger.error("Cannot build connector '%s': %s", conn_config.type, e)
            return None
