"""
Error taxonomy for pacer-network.

Fatal errors (raised to the caller, no partial log written):
- MissingCredentialsError, AuthenticationError, NoValidCasesError

Per-case signals (caught inside the retrieval session, recorded as log entries):
- NotFoundOutcome, NoDocketOutcome, RetrievalError

Non-fatal warning (emitted via warnings.warn during association extraction):
- ParseWarning
"""

from typing import Optional


class PacerNetworkError(Exception):
    """Base class for all pacer-network errors."""


class MissingCredentialsError(PacerNetworkError):
    """Username or password absent from both arguments and environment."""


class AuthenticationError(PacerNetworkError):
    """PACER login rejected the credentials."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NoValidCasesError(PacerNetworkError, ValueError):
    """No case numbers left after trimming blanks and de-duplicating."""


class NotFoundOutcome(PacerNetworkError):
    """Search results contain no case summary link."""


class NoDocketOutcome(PacerNetworkError):
    """Case summary exposes no full docket request form."""


class RetrievalError(PacerNetworkError):
    """Network or page-structure failure during the retrieval workflow."""


class ParseWarning(UserWarning):
    """Malformed or unexpected docket XML; extraction degrades to empty."""
