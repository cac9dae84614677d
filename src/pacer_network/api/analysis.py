"""
Graph analysis of discovered case networks.

Builds a networkx graph from an association table (the DataFrame returned by
discover_network / BackfillService, or case_associations.csv) and computes
summary metrics.

Example:
    >>> result = discover_network(["20-1234"], recursive=True, auth_token=token)
    >>> graph = build_case_graph(result.associations)
    >>> network_metrics(graph)
    {'nodes': 7, 'edges': 6, 'density': 0.2857, 'components': 1}
    >>> rank_central_cases(graph, top=5)
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union

import networkx as nx
import pandas as pd

logger = logging.getLogger(__name__)

AssociationTable = Union[pd.DataFrame, str, Path]


def _load_table(associations: AssociationTable) -> pd.DataFrame:
    if isinstance(associations, pd.DataFrame):
        return associations
    return pd.read_csv(associations, dtype=str)


def build_case_graph(associations: AssociationTable, directed: bool = False) -> nx.Graph:
    """
    Build a case graph from associations.

    Rows without an associated case contribute an isolated node for their
    main case. Parallel associations between the same pair collapse into one
    edge; their types are kept in the edge's 'types' attribute.

    Args:
        associations: Association DataFrame or path to an associations CSV
        directed: Build a DiGraph (main_case -> associated_case)

    Returns:
        nx.Graph or nx.DiGraph
    """
    frame = _load_table(associations)
    graph = nx.DiGraph() if directed else nx.Graph()

    for row in frame.itertuples(index=False):
        main_case = row.main_case
        associated = row.associated_case
        if pd.isna(main_case):
            continue
        graph.add_node(main_case)
        if pd.isna(associated):
            continue

        association_type = None if pd.isna(row.association_type) else row.association_type
        if graph.has_edge(main_case, associated):
            types = graph.edges[main_case, associated]['types']
            if association_type and association_type not in types:
                types.append(association_type)
        else:
            graph.add_edge(
                main_case,
                associated,
                types=[association_type] if association_type else []
            )

    logger.debug(
        f"Built case graph: {graph.number_of_nodes()} nodes, {graph.number_of_edges()} edges"
    )
    return graph


def network_metrics(graph: nx.Graph) -> Dict[str, Any]:
    """
    Summary metrics of a case graph.

    Returns:
        {'nodes', 'edges', 'density', 'components'}; components counts
        weakly connected components for directed graphs
    """
    if graph.number_of_nodes() == 0:
        components = 0
    elif graph.is_directed():
        components = nx.number_weakly_connected_components(graph)
    else:
        components = nx.number_connected_components(graph)

    return {
        'nodes': graph.number_of_nodes(),
        'edges': graph.number_of_edges(),
        'density': round(nx.density(graph), 4),
        'components': components,
    }


def rank_central_cases(graph: nx.Graph, top: int = 10) -> pd.DataFrame:
    """
    Most central cases by degree, with betweenness centrality.

    Returns:
        DataFrame with columns case_number, degree, betweenness, sorted by
        degree then betweenness (descending), at most `top` rows
    """
    if top < 1:
        raise ValueError(f"top must be >= 1, got: {top}")

    betweenness = nx.betweenness_centrality(graph)
    rows = [
        {
            'case_number': node,
            'degree': graph.degree(node),
            'betweenness': round(betweenness.get(node, 0.0), 4),
        }
        for node in graph.nodes
    ]
    frame = pd.DataFrame(rows, columns=['case_number', 'degree', 'betweenness'])
    frame = frame.sort_values(
        ['degree', 'betweenness', 'case_number'],
        ascending=[False, False, True]
    )
    return frame.head(top).reset_index(drop=True)
