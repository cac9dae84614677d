"""
Reusable validators and normalizers.

These work with the packaged circuits.yaml and can be used with the Pydantic
@field_validator decorator for automatic input validation.
"""

import logging
import pandas as pd
import re
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from pacer_network.config import get_config
from pacer_network.exceptions import NoValidCasesError

logger = logging.getLogger(__name__)

_CIRCUIT_PATTERN = re.compile(r'^[a-z0-9]{2,8}$')
_FILENAME_FILLER = '_'

RateLimit = Union[int, float, Tuple[int, int]]


def normalize_case_numbers(case_numbers: Iterable[object]) -> List[str]:
    """
    Trim, drop blanks/None/NaN and de-duplicate case numbers.

    First occurrence wins, so the processing order follows the input order.

    Args:
        case_numbers: Raw case numbers (list, pandas Series, ...)

    Returns:
        Ordered list of unique, non-blank case numbers

    Raises:
        NoValidCasesError: If nothing remains after cleaning

    Example:
        >>> normalize_case_numbers(["20-1234", "20-1234", "  ", "20-1235"])
        ['20-1234', '20-1235']
    """
    if isinstance(case_numbers, str):
        case_numbers = [case_numbers]

    seen = set()
    cleaned = []
    for raw in case_numbers:
        if raw is None or (not isinstance(raw, str) and pd.isna(raw)):
            continue
        case_number = str(raw).strip()
        if not case_number or case_number in seen:
            continue
        seen.add(case_number)
        cleaned.append(case_number)

    if not cleaned:
        raise NoValidCasesError("No valid case numbers provided.")

    return cleaned


def validate_circuit(circuit: str) -> str:
    """
    Validate a PACER court code.

    The code must be a short lowercase alphanumeric token (it becomes part of
    the host name). Codes that are not in circuits.yaml, or not yet tested,
    are accepted with a warning.

    Raises:
        ValueError: If the code is malformed

    Example:
        >>> validate_circuit('cadc')
        'cadc'
        >>> validate_circuit('CA DC')  # Raises ValueError
    """
    if not circuit or not _CIRCUIT_PATTERN.match(circuit):
        raise ValueError(
            f"Circuit must be a lowercase court code, got: '{circuit}'\n"
            f"Example: 'cadc' (D.C. Circuit)"
        )

    config = get_config()
    if not config.is_known_circuit(circuit):
        logger.warning(
            f"Circuit '{circuit}' is not listed in circuits.yaml; "
            f"page layouts may differ"
        )
    elif not config.is_tested_circuit(circuit):
        logger.warning(
            f"Circuit '{circuit}' ({config.courts[circuit]}) has not been tested. "
            f"Verify your fee exemption applies before retrieving."
        )

    return circuit


def validate_rate_limit(rate_limit: Union[RateLimit, Sequence[int]]) -> RateLimit:
    """
    Validate an inter-case delay setting.

    Accepts a fixed non-negative number of seconds, or a (min, max) pair of
    non-negative integers with min <= max.

    Raises:
        ValueError: If the value is negative or the range is malformed

    Example:
        >>> validate_rate_limit(3)
        3
        >>> validate_rate_limit([5, 10])
        (5, 10)
    """
    if isinstance(rate_limit, bool):
        raise ValueError(f"Rate limit must be seconds or a (min, max) range, got: {rate_limit!r}")

    if isinstance(rate_limit, (int, float)):
        if rate_limit < 0:
            raise ValueError(f"Rate limit must be non-negative, got: {rate_limit}")
        return rate_limit

    values = list(rate_limit)
    if len(values) == 1:
        return validate_rate_limit(values[0])
    if len(values) != 2:
        raise ValueError(
            f"Rate limit range must have exactly two values (min, max), got: {values}"
        )

    low, high = values
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in values):
        raise ValueError(f"Rate limit range bounds must be integers, got: {values}")
    if low < 0 or high < low:
        raise ValueError(
            f"Rate limit range must satisfy 0 <= min <= max, got: ({low}, {high})"
        )
    return (low, high)


def validate_max_iterations(max_iterations: int) -> int:
    """Network discovery needs at least one iteration."""
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got: {max_iterations}")
    return max_iterations


def validate_checkpoint_interval(interval: Optional[int]) -> Optional[int]:
    """Checkpoint interval is a positive integer or None (disabled)."""
    if interval is not None and interval < 1:
        raise ValueError(
            f"checkpoint_interval must be a positive integer or None, got: {interval}"
        )
    return interval


def case_number_to_filename(case_number: str) -> str:
    """
    Deterministic XML filename for a case number.

    Example:
        >>> case_number_to_filename('1:20-cv-01234')
        'docket_1_20_cv_01234.xml'
    """
    safe = re.sub(r'[^A-Za-z0-9]', _FILENAME_FILLER, case_number)
    return f"docket_{safe}.xml"
