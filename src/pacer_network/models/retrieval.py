"""
Retrieval outcome and log entry models.

RetrievalOutcome is produced once per (case, attempt) by the docket retrieval
session; RetrievalLogEntry is the append-only record the batch retriever
persists for every processed case.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RetrievalStatus(str, Enum):
    """Kinds of per-case retrieval outcome."""

    SUCCESS = "SUCCESS"
    NOT_FOUND = "NOT_FOUND"
    NO_DOCKET = "NO_DOCKET"
    SKIPPED_EXISTS = "SKIPPED_EXISTS"
    ERROR = "ERROR"


class RetrievalOutcome(BaseModel):
    """
    Immutable result of one docket retrieval attempt.

    Attributes:
        status: Outcome kind
        xml: Raw docket XML bytes as served (SUCCESS only)
        error: Failure message (ERROR only)

    Example:
        >>> outcome = RetrievalOutcome.success(b"<docket/>")
        >>> outcome.is_success
        True
    """

    status: RetrievalStatus
    xml: Optional[bytes] = None
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def success(cls, xml: Union[str, bytes]) -> 'RetrievalOutcome':
        if isinstance(xml, str):
            xml = xml.encode('utf-8')
        return cls(status=RetrievalStatus.SUCCESS, xml=xml)

    @classmethod
    def not_found(cls) -> 'RetrievalOutcome':
        return cls(status=RetrievalStatus.NOT_FOUND)

    @classmethod
    def no_docket(cls) -> 'RetrievalOutcome':
        return cls(status=RetrievalStatus.NO_DOCKET)

    @classmethod
    def skipped(cls) -> 'RetrievalOutcome':
        return cls(status=RetrievalStatus.SKIPPED_EXISTS)

    @classmethod
    def failure(cls, message: str) -> 'RetrievalOutcome':
        return cls(status=RetrievalStatus.ERROR, error=message)

    @property
    def is_success(self) -> bool:
        return self.status == RetrievalStatus.SUCCESS


LOG_COLUMNS = ['case_number', 'status', 'timestamp', 'xml_path', 'error']


class RetrievalLogEntry(BaseModel):
    """
    One row of the retrieval log.

    Attributes:
        case_number: Normalized case identifier
        status: Outcome kind
        timestamp: When the case finished processing
        xml_path: Saved or pre-existing XML artifact (SUCCESS / SKIPPED_EXISTS)
        error: Failure message for ERROR entries
    """

    case_number: str = Field(..., min_length=1, examples=["20-1234"])
    status: RetrievalStatus
    timestamp: datetime = Field(default_factory=datetime.now)
    xml_path: Optional[str] = None
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def to_row(self) -> Dict[str, Any]:
        """Flatten to a CSV-ready dict (column order follows LOG_COLUMNS)."""
        return {
            'case_number': self.case_number,
            'status': self.status.value,
            'timestamp': self.timestamp.isoformat(sep=' ', timespec='seconds'),
            'xml_path': self.xml_path,
            'error': self.error,
        }
