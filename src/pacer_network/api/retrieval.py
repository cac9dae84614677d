"""
User-facing retrieval entry point.

retrieve_cases() accepts case numbers directly or a CSV file, authenticates
when no token is given, and returns the retrieval log as a DataFrame.

WARNING - PACER fees: PACER charges per page unless the account holds an
active fee exemption. Each retrieved docket may be billed to the account.
"""

import logging
import random
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

import pandas as pd
import requests

from pacer_network.config import get_app_config
from pacer_network.models.requests import RetrievalSettings
from pacer_network.services.auth_service import authenticate
from pacer_network.services.batch_retriever import BatchRetriever
from pacer_network.services.docket_session import PacerSession
from pacer_network.services.storage_service import StorageService
from pacer_network.validators import normalize_case_numbers

logger = logging.getLogger(__name__)

CaseInput = Union[str, Path, Iterable[object]]


def read_case_numbers(cases: CaseInput, case_column: Optional[str] = None) -> List[str]:
    """
    Resolve case input to a clean list of case numbers.

    Args:
        cases: A CSV file path, a single case number, or an iterable of case numbers
        case_column: Column holding case numbers (required for CSV input)

    Returns:
        Unique, non-blank case numbers in input order

    Raises:
        ValueError: CSV given without case_column, or column not in file
        NoValidCasesError: Nothing valid remains after cleaning

    Example:
        >>> read_case_numbers(["20-1234", "20-1234", "  ", "20-1235"])
        ['20-1234', '20-1235']
        >>> read_case_numbers("my_cases.csv", case_column="case_number")
        ['20-1234', ...]
    """
    if isinstance(cases, (str, Path)) and Path(cases).is_file():
        logger.info(f"Reading cases from CSV file: {cases}")

        if case_column is None:
            raise ValueError(
                "When providing a CSV file, you must specify the case_column parameter."
            )

        cases_df = pd.read_csv(cases, dtype=str)
        if case_column not in cases_df.columns:
            raise ValueError(
                f"Column '{case_column}' not found in CSV file.\n"
                f"Available columns: {', '.join(cases_df.columns)}"
            )
        return normalize_case_numbers(cases_df[case_column].tolist())

    if isinstance(cases, Path):
        raise FileNotFoundError(f"Case file not found: {cases}")

    return normalize_case_numbers(cases)


def retrieve_cases(
    cases: CaseInput,
    circuit: str = "cadc",
    case_column: Optional[str] = None,
    output_dir: Optional[Union[str, Path]] = None,
    auth_token: Optional[str] = None,
    rate_limit=None,
    checkpoint_interval: Optional[int] = 50,
    resume_if_exists: bool = True,
    verbose: bool = True,
    sleep: Callable[[float], None] = time.sleep,
    rng: Optional[random.Random] = None,
    http: Optional[requests.Session] = None
) -> pd.DataFrame:
    """
    Retrieve full XML dockets for one or more cases.

    Args:
        cases: Case numbers, a single case number, or a CSV path
        circuit: Court code (default 'cadc', the D.C. Circuit)
        case_column: Column with case numbers when `cases` is a CSV
        output_dir: Directory for XML files (default from config: 'pacer_xml_output')
        auth_token: Token from authenticate(); authenticates if None
        rate_limit: Seconds between requests, fixed or (min, max);
            default from config (5, 10)
        checkpoint_interval: Save progress every N cases (None disables)
        resume_if_exists: Skip cases whose XML already exists
        verbose: Report per-case progress at INFO level
        sleep: Sleep function (tests pass a recorder)
        rng: Random source for the delay range
        http: Optional requests session for the court host

    Returns:
        DataFrame with columns case_number, status, timestamp, xml_path, error

    Raises:
        NoValidCasesError: No valid case numbers (before any network call)
        MissingCredentialsError / AuthenticationError: When authentication is needed and fails

    Example:
        >>> token = authenticate()
        >>> log = retrieve_cases(["20-1234", "20-1235"], circuit="cadc",
        ...                      auth_token=token, rate_limit=(8, 12))
        >>> log['status'].value_counts()
    """
    config = get_app_config()
    case_numbers = read_case_numbers(cases, case_column)

    settings = RetrievalSettings(
        output_dir=Path(output_dir or config.default_output_dir),
        rate_limit=rate_limit if rate_limit is not None else config.default_rate_limit,
        checkpoint_interval=checkpoint_interval,
        resume_if_exists=resume_if_exists,
        verbose=verbose,
    )
    storage = StorageService(settings.output_dir)

    if auth_token is None:
        logger.info("No auth token provided, authenticating...")
        auth_token = authenticate()

    with PacerSession.open(auth_token, circuit, config=config, http=http) as session:
        retriever = BatchRetriever(session, settings, storage=storage, sleep=sleep, rng=rng)
        entries = retriever.retrieve(case_numbers)

    return StorageService.log_to_frame(entries)
