"""
Pydantic models and containers for retrieval and network discovery.
"""

from pacer_network.models.retrieval import (
    RetrievalStatus,
    RetrievalOutcome,
    RetrievalLogEntry,
    LOG_COLUMNS,
)
from pacer_network.models.association import Association, ASSOCIATION_COLUMNS
from pacer_network.models.requests import RetrievalSettings, DiscoverySettings
from pacer_network.models.network import NetworkState, NetworkResult

__all__ = [
    'RetrievalStatus',
    'RetrievalOutcome',
    'RetrievalLogEntry',
    'LOG_COLUMNS',
    'Association',
    'ASSOCIATION_COLUMNS',
    'RetrievalSettings',
    'DiscoverySettings',
    'NetworkState',
    'NetworkResult',
]
