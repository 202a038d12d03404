"""Connectors package — record source integrations."""
from bizledger.connectors.base import BaseConnector
from bizledger.connectors.csv_connector import CSVConnector
from bizledger.connectors.json_connector import JSONConnector
from bizledger.connectors.normalize import NumericPolicy, RecordValidationError

__all__ = [
    "BaseConnector",
    "CSVConnector",
    "JSONConnector",
    "NumericPolicy",
    "RecordValidationError",
]
