"""
pacer-network: PACER appellate docket retrieval and case network discovery.

Main package exports for user-facing API.
"""

from pacer_network.services import authenticate, BatchRetriever, PacerSession
from pacer_network.parsers import extract_associations
from pacer_network.types import Circuits
from pacer_network.api import (
    retrieve_cases,
    discover_network,
    NetworkDiscovery,
    BackfillService,
    build_case_graph,
    network_metrics,
    rank_central_cases,
)

__all__ = [
    'authenticate',
    'retrieve_cases',
    'extract_associations',
    'discover_network',
    'NetworkDiscovery',
    'BackfillService',
    'BatchRetriever',
    'PacerSession',
    'Circuits',
    'build_case_graph',
    'network_metrics',
    'rank_central_cases'
]
