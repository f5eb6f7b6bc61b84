"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, ConnectorRequestError
from app.connectors.meta_graph_connector import MetaAPIError, MetaGraphConnector

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "MetaAPIError",
    "MetaGraphConnector",
]
