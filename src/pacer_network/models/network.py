"""
Network discovery state and result containers.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Set

import pandas as pd

from pacer_network.models.association import Association


@dataclass
class NetworkState:
    """
    Worklist state of the breadth-first discovery loop.

    processed_cases only grows; a case in it is never queued again.
    """
    pending_queue: List[str]
    processed_cases: Set[str] = field(default_factory=set)
    all_associations: List[Association] = field(default_factory=list)
    iteration: int = 1

    def mark_processed(self, case_numbers: List[str]) -> None:
        self.processed_cases.update(case_numbers)

    def next_frontier(self) -> List[str]:
        """Associated cases not yet processed, in first-seen order."""
        frontier = []
        seen = set()
        for association in self.all_associations:
            case = association.associated_case
            if case is None or case in seen or case in self.processed_cases:
                continue
            seen.add(case)
            frontier.append(case)
        return frontier


@dataclass
class NetworkResult:
    """Result of a network discovery run."""
    associations: pd.DataFrame
    retrieval_log: pd.DataFrame
    original_cases: List[str]
    discovered_cases: List[str]
    all_unique_cases: List[str]
    iterations: int = 1

    def summary(self) -> Dict[str, int]:
        """
        Headline counts for reporting.

        Returns:
            {
                'original_cases': 2,
                'discovered_cases': 5,
                'all_unique_cases': 7,
                'associations': 6,
                'iterations': 2
            }
        """
        return {
            'original_cases': len(self.original_cases),
            'discovered_cases': len(self.discovered_cases),
            'all_unique_cases': len(self.all_unique_cases),
            'associations': len(self.associations),
            'iterations': self.iterations,
        }
