"""
Business logic layer services for pacer-network.

This module contains the service classes that talk to PACER and the disk:
- authenticate: CSO login returning a session token
- PacerSession / DocketRetrievalSession: per-case portal workflow
- BatchRetriever: sequential, rate-limited retrieval with resume and checkpoints
- StorageService: XML dockets and CSV logs in an output directory
"""

from pacer_network.services.auth_service import authenticate, resolve_credentials
from pacer_network.services.docket_session import (
    PacerSession,
    DocketRetrievalSession,
    SessionState,
)
from pacer_network.services.batch_retriever import BatchRetriever
from pacer_network.services.storage_service import StorageService

__all__ = [
    'authenticate',
    'resolve_credentials',
    'PacerSession',
    'DocketRetrievalSession',
    'SessionState',
    'BatchRetriever',
    'StorageService',
]
