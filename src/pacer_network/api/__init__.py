"""
User-facing API interfaces for pacer-network.

This module provides the high-level entry points for retrieving dockets,
discovering case networks, and analysing the results.
"""

from pacer_network.api.retrieval import retrieve_cases, read_case_numbers
from pacer_network.api.network import NetworkDiscovery, discover_network
from pacer_network.api.backfill import BackfillService
from pacer_network.api.analysis import build_case_graph, network_metrics, rank_central_cases

__all__ = [
    'retrieve_cases',
    'read_case_numbers',
    'NetworkDiscovery',
    'discover_network',
    'BackfillService',
    'build_case_graph',
    'network_metrics',
    'rank_central_cases'
]
