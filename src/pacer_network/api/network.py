"""
Network discovery orchestrator.

NetworkDiscovery coordinates the iterative workflow:
- Retrieve dockets for the pending cases (via BatchRetriever)
- Extract associations from each newly saved docket
- Queue associated cases not yet processed for the next iteration

Stops when recursion is off, the iteration bound is reached, or an iteration
discovers nothing new (fixed point).

Output layout:
    {output_dir}/
        xml_files/                      # dockets, checkpoints, last iteration's log
        case_associations.csv
        all_unique_cases.csv
        newly_discovered_cases.csv
"""

import logging
import random
import time
from pathlib import Path
from typing import Callable, List, Optional, Union

import requests

from pacer_network.api.retrieval import CaseInput, read_case_numbers
from pacer_network.config import get_app_config
from pacer_network.models.association import Association
from pacer_network.models.network import NetworkResult, NetworkState
from pacer_network.models.requests import DiscoverySettings, RetrievalSettings
from pacer_network.models.retrieval import RetrievalLogEntry, RetrievalStatus
from pacer_network.parsers.association_parser import associations_to_frame, extract_edges
from pacer_network.services.auth_service import authenticate
from pacer_network.services.batch_retriever import BatchRetriever
from pacer_network.services.docket_session import PacerSession
from pacer_network.services.storage_service import StorageService

logger = logging.getLogger(__name__)

XML_SUBDIR = "xml_files"
ASSOCIATIONS_FILE = "case_associations.csv"
ALL_CASES_FILE = "all_unique_cases.csv"
DISCOVERED_FILE = "newly_discovered_cases.csv"


class NetworkDiscovery:
    """
    Breadth-first expansion of a case network.

    Usage:
        with PacerSession.open(token, "cadc") as session:
            discovery = NetworkDiscovery(
                session,
                output_dir="pacer_network_output",
                settings=DiscoverySettings(recursive=True, max_iterations=2)
            )
            result = discovery.discover(["20-1234"])
            print(result.summary())
    """

    def __init__(
        self,
        session: PacerSession,
        output_dir: Union[str, Path] = "pacer_network_output",
        settings: Optional[DiscoverySettings] = None,
        rate_limit=(5, 10),
        checkpoint_interval: Optional[int] = 50,
        verbose: bool = True,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize discovery with a session and output location.

        Args:
            session: Authenticated PacerSession (one court)
            output_dir: Root directory for network artifacts
            settings: recursive / max_iterations / include_skipped
            rate_limit: Seconds between cases, fixed or (min, max)
            checkpoint_interval: Checkpoint every N cases within an iteration
            verbose: Report progress at INFO level
            sleep: Sleep function passed to the batch retriever
            rng: Random source for the delay range
        """
        self.session = session
        self.settings = settings or DiscoverySettings()
        self.storage = StorageService(output_dir)
        self.xml_dir = self.storage.output_dir / XML_SUBDIR

        # Discovery always resumes: re-fetching a docket within one network
        # would bill the account twice.
        self.retrieval_settings = RetrievalSettings(
            output_dir=self.xml_dir,
            rate_limit=rate_limit,
            checkpoint_interval=checkpoint_interval,
            resume_if_exists=True,
            verbose=verbose,
        )
        self.retriever = BatchRetriever(
            session,
            self.retrieval_settings,
            storage=StorageService(self.xml_dir),
            sleep=sleep,
            rng=rng,
        )
        self._progress = logger.info if verbose else logger.debug

    def discover(self, cases: CaseInput, case_column: Optional[str] = None) -> NetworkResult:
        """
        Run discovery from a seed set of cases.

        Args:
            cases: Seed case numbers, a single case number, or a CSV path
            case_column: Column with case numbers when `cases` is a CSV

        Returns:
            NetworkResult with associations, concatenated retrieval log and
            the original / discovered / all-unique case sets

        Raises:
            NoValidCasesError: If the seed set is empty after cleaning
        """
        original_cases = read_case_numbers(cases, case_column)
        max_iterations = self.settings.max_iterations if self.settings.recursive else 1

        state = NetworkState(pending_queue=list(original_cases))
        logs: List[RetrievalLogEntry] = []

        while True:
            self._progress("")
            self._progress("=" * 40)
            self._progress(f"ITERATION {state.iteration}/{max_iterations}")
            self._progress(f"Cases to process: {len(state.pending_queue)}")
            self._progress("=" * 40)

            entries = self.retriever.retrieve(state.pending_queue)
            logs.extend(entries)

            found = self._collect_associations(entries)
            state.all_associations.extend(found)
            state.mark_processed(state.pending_queue)
            self._progress(f"Found {len(found)} association(s) in iteration {state.iteration}")

            if state.iteration >= max_iterations:
                break

            frontier = state.next_frontier()
            if not frontier:
                self._progress("No new cases discovered. Stopping.")
                break

            self._progress(f"Discovered {len(frontier)} new case(s) for next iteration")
            state.pending_queue = frontier
            state.iteration += 1

        result = self._build_result(state, original_cases, logs)
        self._save(result)
        self._report(result)
        return result

    def _collect_associations(self, entries: List[RetrievalLogEntry]) -> List[Association]:
        parse_statuses = {RetrievalStatus.SUCCESS}
        if self.settings.include_skipped:
            parse_statuses.add(RetrievalStatus.SKIPPED_EXISTS)

        associations: List[Association] = []
        for entry in entries:
            if entry.status not in parse_statuses or not entry.xml_path:
                continue
            edges = extract_edges(Path(entry.xml_path))
            if edges:
                self._progress(f"  {entry.case_number}: {len(edges)} associated case(s)")
            associations.extend(edges)
        return associations

    def _build_result(
        self,
        state: NetworkState,
        original_cases: List[str],
        logs: List[RetrievalLogEntry]
    ) -> NetworkResult:
        original = set(original_cases)
        associated = [a.associated_case for a in state.all_associations]
        main = [a.main_case for a in state.all_associations]

        discovered = _unique(case for case in associated if case not in original)
        all_unique = _unique(list(original_cases) + associated + main)

        return NetworkResult(
            associations=associations_to_frame(state.all_associations),
            retrieval_log=StorageService.log_to_frame(logs),
            original_cases=list(original_cases),
            discovered_cases=discovered,
            all_unique_cases=all_unique,
            iterations=state.iteration,
        )

    def _save(self, result: NetworkResult) -> None:
        self.storage.write_frame(result.associations, ASSOCIATIONS_FILE)
        self.storage.write_case_list(result.all_unique_cases, ALL_CASES_FILE)
        self.storage.write_case_list(result.discovered_cases, DISCOVERED_FILE)

    def _report(self, result: NetworkResult) -> None:
        summary = result.summary()
        self._progress("")
        self._progress("=" * 40)
        self._progress("NETWORK DISCOVERY COMPLETE")
        self._progress(f"Iterations run: {summary['iterations']}")
        self._progress(f"Original cases: {summary['original_cases']}")
        self._progress(f"Newly discovered cases: {summary['discovered_cases']}")
        self._progress(f"Total unique cases: {summary['all_unique_cases']}")
        self._progress(f"Total associations: {summary['associations']}")
        self._progress(f"Output directory: {self.storage.output_dir}")
        self._progress("=" * 40)


def _unique(cases) -> List[str]:
    seen = set()
    ordered = []
    for case in cases:
        if case is None or case in seen:
            continue
        seen.add(case)
        ordered.append(case)
    return ordered


def discover_network(
    cases: CaseInput,
    circuit: str = "cadc",
    case_column: Optional[str] = None,
    output_dir: Optional[Union[str, Path]] = None,
    auth_token: Optional[str] = None,
    recursive: bool = False,
    max_iterations: int = 2,
    include_skipped: bool = False,
    rate_limit=None,
    checkpoint_interval: Optional[int] = 50,
    verbose: bool = True,
    sleep: Callable[[float], None] = time.sleep,
    rng: Optional[random.Random] = None,
    http: Optional[requests.Session] = None
) -> NetworkResult:
    """
    Discover the network of cases associated with a seed set.

    Args:
        cases: Seed case numbers, a single case number, or a CSV path
        circuit: Court code (default 'cadc')
        case_column: Column with case numbers when `cases` is a CSV
        output_dir: Root output directory (default from config: 'pacer_network_output')
        auth_token: Token from authenticate(); authenticates if None
        recursive: Follow discovered cases into further iterations
        max_iterations: Iteration ceiling when recursive (ignored otherwise)
        include_skipped: Also parse dockets that already existed on disk
        rate_limit: Seconds between cases, fixed or (min, max); default (5, 10)
        checkpoint_interval: Checkpoint every N cases within an iteration
        verbose: Report progress at INFO level
        sleep: Sleep function (tests pass a recorder)
        rng: Random source for the delay range
        http: Optional requests session for the court host

    Returns:
        NetworkResult

    Example:
        >>> result = discover_network(["20-1234", "20-1235"], recursive=True,
        ...                           max_iterations=2, auth_token=token)
        >>> result.associations.head()
        >>> result.summary()
        {'original_cases': 2, 'discovered_cases': 5, ...}

    Warning:
        Recursive discovery can grow quickly and every retrieved docket may
        be billed.
    """
    config = get_app_config()
    original_cases = read_case_numbers(cases, case_column)
    settings = DiscoverySettings(
        recursive=recursive,
        max_iterations=max_iterations,
        include_skipped=include_skipped,
    )
    output_dir = Path(output_dir or config.default_network_output_dir)

    if auth_token is None:
        logger.info("No auth token provided, authenticating...")
        auth_token = authenticate()

    with PacerSession.open(auth_token, circuit, config=config, http=http) as session:
        discovery = NetworkDiscovery(
            session,
            output_dir=output_dir,
            settings=settings,
            rate_limit=rate_limit if rate_limit is not None else config.default_rate_limit,
            checkpoint_interval=checkpoint_interval,
            verbose=verbose,
            sleep=sleep,
            rng=rng,
        )
        return discovery.discover(original_cases)
