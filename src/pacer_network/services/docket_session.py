"""
Docket Retrieval Session

Drives the appellate CM/ECF portal through its form workflow to obtain one
case's full docket as XML:

    START -> SEARCH_SUBMITTED -> RESULT_LOCATED -> SUMMARY_LOADED
          -> DOCKET_FORM_LOCATED -> XML_REQUESTED -> CHARGE_CONFIRMED -> DONE

with terminal early exits NOT_FOUND, NO_DOCKET and ERROR.

Every request depends on values scraped from the previous page (CSRF token,
form actions, hidden fields), so a case is a dependent request chain. A
failed step aborts the case; nothing is retried here.

Form field names and servlet paths are portal-specific and live only in
this module.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional
from urllib.parse import urljoin, urlparse

import requests
from requests.cookies import create_cookie
from lxml.html import HtmlElement

from pacer_network.config import AppConfig, get_app_config
from pacer_network.exceptions import NoDocketOutcome, NotFoundOutcome, RetrievalError
from pacer_network.models.retrieval import RetrievalOutcome
from pacer_network.parsers.html_forms import (
    find_form_with_input,
    find_link,
    first_form,
    hidden_fields,
    input_value,
    non_submit_fields,
    parse_page,
)
from pacer_network.validators import validate_circuit

logger = logging.getLogger(__name__)

SERVLET_PATH = "/n/beam/servlet/"
TRANSPORT_ROOM = SERVLET_PATH + "TransportRoom"
SEARCH_PAGE = TRANSPORT_ROOM + "?servlet=CaseSearch.jsp"

TOKEN_COOKIE = "NextGenCSO"
CSRF_FIELD = "CSRF"
CASE_SUMMARY_PATTERN = r"CaseSummary"
FULL_DOCKET_FIELD = "fullDocket"
OUTPUT_FORMAT_FIELD = "outputXML_TXT"
OUTPUT_FORMAT_XML = "XML"
CONFIRM_FIELD = "confirmCharge"
CONFIRM_YES = "Y"

_HTML_START = re.compile(rb'^(\xef\xbb\xbf)?\s*(<!doctype\s+html|<html)', re.IGNORECASE)


class SessionState(str, Enum):
    """States of the per-case retrieval workflow."""

    START = "START"
    SEARCH_SUBMITTED = "SEARCH_SUBMITTED"
    RESULT_LOCATED = "RESULT_LOCATED"
    SUMMARY_LOADED = "SUMMARY_LOADED"
    DOCKET_FORM_LOCATED = "DOCKET_FORM_LOCATED"
    XML_REQUESTED = "XML_REQUESTED"
    CHARGE_CONFIRMED = "CHARGE_CONFIRMED"
    DONE = "DONE"
    NOT_FOUND = "NOT_FOUND"
    NO_DOCKET = "NO_DOCKET"
    ERROR = "ERROR"


@dataclass
class PacerSession:
    """
    Authenticated session against one court host.

    Holds the CSO token and the HTTP client whose cookie jar carries the
    portal's session state. The jar is shared mutable state: use one
    PacerSession per worker and never issue two requests on it concurrently.

    Usage:
        with PacerSession.open(token, "cadc") as session:
            outcome = DocketRetrievalSession(session).retrieve("20-1234")
    """
    token: str
    circuit: str
    http: requests.Session
    base_url: str
    request_timeout: float = 30.0
    xml_timeout: float = 120.0

    @classmethod
    def open(
        cls,
        token: str,
        circuit: str = "cadc",
        config: Optional[AppConfig] = None,
        http: Optional[requests.Session] = None
    ) -> 'PacerSession':
        """
        Create a session for a court.

        Raises:
            ValueError: If the token is empty or the circuit code is malformed
        """
        if not token:
            raise ValueError("A PACER session token is required")
        circuit = validate_circuit(circuit)
        config = config or get_app_config()

        if http is None:
            http = requests.Session()
            http.headers.update({'User-Agent': config.user_agent})

        session = cls(
            token=token,
            circuit=circuit,
            http=http,
            base_url=config.base_url_for(circuit),
            request_timeout=config.request_timeout,
            xml_timeout=config.xml_timeout,
        )
        session.reset()
        return session

    def reset(self) -> None:
        """Start from a clean cookie jar holding only the CSO token."""
        self.http.cookies.clear()
        host = urlparse(self.base_url).hostname or ""
        self.http.cookies.set_cookie(
            create_cookie(name=TOKEN_COOKIE, value=self.token, domain=host, path='/')
        )

    def url(self, target: str) -> str:
        """
        Absolute URL for a servlet-relative target.

        'TransportRoom?x=1' -> {base}/n/beam/servlet/TransportRoom?x=1
        '/n/beam/...' and absolute URLs are resolved normally.
        """
        return urljoin(self.base_url + SERVLET_PATH, target)

    def get(self, target: str, timeout: Optional[float] = None, **kwargs) -> requests.Response:
        response = self.http.get(
            self.url(target),
            timeout=timeout or self.request_timeout,
            **kwargs
        )
        response.raise_for_status()
        return response

    def post(
        self,
        target: str,
        data: Dict[str, str],
        timeout: Optional[float] = None,
        **kwargs
    ) -> requests.Response:
        response = self.http.post(
            self.url(target),
            data=data,
            timeout=timeout or self.request_timeout,
            **kwargs
        )
        response.raise_for_status()
        return response

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> 'PacerSession':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class DocketRetrievalSession:
    """
    Per-case state machine for retrieving one XML docket.

    Strictly sequential, one case at a time, no backtracking. The current
    state is exposed as `state` for progress reporting and tests.

    Usage:
        retriever = DocketRetrievalSession(session)
        outcome = retriever.retrieve("20-1234")
        if outcome.is_success:
            xml = outcome.xml
    """

    def __init__(self, session: PacerSession):
        self.session = session
        self.state = SessionState.START
        self.case_number: Optional[str] = None

    def retrieve(self, case_number: str) -> RetrievalOutcome:
        """
        Run the full workflow for one case.

        Returns:
            RetrievalOutcome: SUCCESS with the XML bytes, NOT_FOUND, NO_DOCKET,
            or ERROR with the failure message. Never raises for per-case
            failures.
        """
        self.case_number = case_number
        self.state = SessionState.START
        self.session.reset()

        try:
            result_page = self._submit_search(case_number)
            summary_target = self._locate_result(result_page)
            summary_page = self._load_summary(summary_target)
            docket_form = self._locate_docket_form(summary_page)
            filter_page = self._request_full_docket(docket_form)
            confirm_page = self._request_xml(filter_page)
            xml = self._confirm_charge(confirm_page)
        except NotFoundOutcome:
            self._transition(SessionState.NOT_FOUND)
            logger.debug(f"{case_number}: case not found")
            return RetrievalOutcome.not_found()
        except NoDocketOutcome:
            self._transition(SessionState.NO_DOCKET)
            logger.debug(f"{case_number}: no full docket available")
            return RetrievalOutcome.no_docket()
        except (RetrievalError, requests.RequestException) as e:
            failed_at = self.state
            self._transition(SessionState.ERROR)
            logger.error(f"{case_number}: retrieval failed after {failed_at.value}: {e}")
            return RetrievalOutcome.failure(str(e))
        except Exception as e:
            failed_at = self.state
            self._transition(SessionState.ERROR)
            logger.error(
                f"{case_number}: unexpected error after {failed_at.value}: {e}",
                exc_info=True
            )
            return RetrievalOutcome.failure(str(e))

        self._transition(SessionState.DONE)
        return RetrievalOutcome.success(xml)

    def _transition(self, state: SessionState) -> None:
        logger.debug(f"{self.case_number}: {self.state.value} -> {state.value}")
        self.state = state

    def _submit_search(self, case_number: str) -> HtmlElement:
        search_response = self.session.get(SEARCH_PAGE)
        search_page = parse_page(search_response.text, "search page")
        csrf_token = input_value(first_form(search_page, "search page"), CSRF_FIELD)
        if csrf_token is None:
            raise RetrievalError("CSRF token not found on search page")

        search_data = {
            'servlet': 'CaseSelectionTable.jsp',
            CSRF_FIELD: csrf_token,
            'csnum1': case_number,
            'csnum2': '',
            'aName': '',
            'searchPty': 'pty',
        }
        result_response = self.session.post(
            TRANSPORT_ROOM,
            data=search_data,
            headers={'Referer': self.session.url(SEARCH_PAGE)},
        )
        self._transition(SessionState.SEARCH_SUBMITTED)
        return parse_page(result_response.text, "search results")

    def _locate_result(self, result_page: HtmlElement) -> str:
        summary_target = find_link(result_page, CASE_SUMMARY_PATTERN)
        if summary_target is None:
            raise NotFoundOutcome(self.case_number)
        self._transition(SessionState.RESULT_LOCATED)
        return summary_target

    def _load_summary(self, summary_target: str) -> HtmlElement:
        summary_response = self.session.get(summary_target)
        self._transition(SessionState.SUMMARY_LOADED)
        return parse_page(summary_response.text, "case summary")

    def _locate_docket_form(self, summary_page: HtmlElement) -> HtmlElement:
        docket_form = find_form_with_input(summary_page, FULL_DOCKET_FIELD)
        if docket_form is None:
            raise NoDocketOutcome(self.case_number)
        self._transition(SessionState.DOCKET_FORM_LOCATED)
        return docket_form

    def _request_full_docket(self, docket_form: HtmlElement) -> HtmlElement:
        form_data = hidden_fields(docket_form, submit_name=FULL_DOCKET_FIELD)
        action = docket_form.get('action') or TRANSPORT_ROOM
        filter_response = self.session.post(action, data=form_data)
        return parse_page(filter_response.text, "docket filter page")

    def _request_xml(self, filter_page: HtmlElement) -> HtmlElement:
        filter_data = non_submit_fields(first_form(filter_page, "docket filter page"))
        filter_data[OUTPUT_FORMAT_FIELD] = OUTPUT_FORMAT_XML

        confirm_response = self.session.post(
            TRANSPORT_ROOM,
            data=filter_data,
            timeout=self.session.xml_timeout,
        )
        self._transition(SessionState.XML_REQUESTED)
        return parse_page(confirm_response.text, "charge confirmation page")

    def _confirm_charge(self, confirm_page: HtmlElement) -> bytes:
        confirm_data = non_submit_fields(first_form(confirm_page, "charge confirmation page"))
        confirm_data[OUTPUT_FORMAT_FIELD] = OUTPUT_FORMAT_XML
        confirm_data[CONFIRM_FIELD] = CONFIRM_YES

        xml_response = self.session.post(
            TRANSPORT_ROOM,
            data=confirm_data,
            timeout=self.session.xml_timeout,
        )
        self._transition(SessionState.CHARGE_CONFIRMED)

        # Raw bytes: the XML declaration names the encoding, not the headers.
        xml = xml_response.content
        if not xml or not xml.strip():
            raise RetrievalError("Empty docket response")
        if _HTML_START.match(xml):
            raise RetrievalError("Expected XML docket but received an HTML page")
        return xml
