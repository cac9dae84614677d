"""
Shared pytest fixtures.

Provides an in-memory stand-in for the appellate CM/ECF portal so retrieval
and discovery can be exercised end-to-end without network access.
"""

from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import parse_qs, urlparse

import pytest
import requests
from requests.cookies import RequestsCookieJar

import pacer_network.config as config_module


CSRF_TOKEN = "csrf-abc123"


def make_docket_xml(
    case_number: Optional[str],
    associated: Sequence[Tuple[str, Optional[str], Optional[str]]] = ()
) -> str:
    """Minimal appellate docket with optional associatedCase elements."""
    stub = f'<stub caseNumber="{case_number}"/>' if case_number is not None else '<stub/>'
    members = "".join(
        '<associatedCase memberCaseNumber="{}"{}{}/>'.format(
            member,
            f' associatedType="{kind}"' if kind is not None else '',
            f' dateStart="{start}"' if start is not None else '',
        )
        for member, kind, start in associated
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<caseSummary>{stub}<associatedCases>{members}</associatedCases></caseSummary>'
    )


class FakeResponse:
    """Just enough of requests.Response for the session code."""

    def __init__(
        self,
        body: str = "",
        status_code: int = 200,
        url: str = "",
        encoding: str = "utf-8"
    ):
        # Server sends UTF-8; `encoding` is what requests would guess from headers
        self.content = body.encode('utf-8')
        self.encoding = encoding
        self.text = self.content.decode(encoding, errors='replace')
        self.status_code = status_code
        self.url = url

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(
                f"{self.status_code} Error for url: {self.url}", response=self
            )


class FakePortal:
    """
    Scripted CM/ECF portal.

    Args:
        dockets: case number -> docket XML; None means the case exists but
            exposes no full docket form. Cases absent from the mapping are
            not found by the search.
        broken: case numbers whose summary request fails at transport level
    """

    def __init__(self, dockets: Dict[str, Optional[str]], broken: Sequence[str] = ()):
        self.dockets = dockets
        self.broken = set(broken)
        self.cookies = RequestsCookieJar()
        self.headers: Dict[str, str] = {}
        self.calls: List[dict] = []
        self.closed = False

    # requests.Session surface

    def get(self, url, timeout=None, **kwargs):
        self._record('GET', url, None, timeout)
        if 'CaseSearch.jsp' in url:
            return FakeResponse(self._search_page(), url=url)
        if 'CaseSummary' in url:
            case_number = parse_qs(urlparse(url).query)['caseNum'][0]
            if case_number in self.broken:
                raise requests.ConnectionError("connection reset by peer")
            return FakeResponse(self._summary_page(case_number), url=url)
        return FakeResponse("Not Found", status_code=404, url=url)

    def post(self, url, data=None, timeout=None, **kwargs):
        data = dict(data or {})
        self._record('POST', url, data, timeout)

        if data.get('servlet') == 'CaseSelectionTable.jsp':
            if data.get('CSRF') != CSRF_TOKEN:
                return FakeResponse("Forbidden", status_code=403, url=url)
            return FakeResponse(self._results_page(data['csnum1']), url=url)
        if 'fullDocket' in data:
            return FakeResponse(self._filter_page(data['caseNum']), url=url)
        if data.get('confirmCharge') == 'Y':
            # text/xml without a charset: requests falls back to ISO-8859-1
            return FakeResponse(self.dockets[data['caseNum']], url=url, encoding='ISO-8859-1')
        if data.get('outputXML_TXT') == 'XML':
            return FakeResponse(self._confirm_page(data['caseNum']), url=url)
        return FakeResponse("Bad Request", status_code=400, url=url)

    def close(self):
        self.closed = True

    # Inspection helpers

    def cases_requested(self) -> List[str]:
        """Case numbers submitted to the search form, in order."""
        return [
            call['data']['csnum1'] for call in self.calls
            if call['data'] and call['data'].get('servlet') == 'CaseSelectionTable.jsp'
        ]

    def _record(self, method, url, data, timeout):
        self.calls.append({
            'method': method,
            'url': url,
            'data': data,
            'timeout': timeout,
            'cookies': dict(self.cookies),
        })

    # Pages

    @staticmethod
    def _search_page():
        return (
            '<html><body><form method="post" action="TransportRoom">'
            f'<input type="hidden" name="CSRF" value="{CSRF_TOKEN}"/>'
            '<input type="text" name="csnum1"/>'
            '<input type="submit" name="search" value="Search"/>'
            '</form></body></html>'
        )

    def _results_page(self, case_number):
        if case_number not in self.dockets:
            return '<html><body><p>No cases found.</p></body></html>'
        return (
            '<html><body><table><tr><td>'
            f'<a href="TransportRoom?servlet=CaseSummary.jsp&amp;caseNum={case_number}">'
            f'{case_number}</a></td></tr></table></body></html>'
        )

    def _summary_page(self, case_number):
        if self.dockets.get(case_number) is None:
            return f'<html><body><h3>{case_number}</h3><p>Sealed.</p></body></html>'
        return (
            '<html><body>'
            '<form method="post" action="TransportRoom">'
            '<input type="hidden" name="servlet" value="CaseSummary.jsp"/>'
            f'<input type="hidden" name="caseNum" value="{case_number}"/>'
            '<input type="checkbox" name="incOrigDkt"/>'
            '<input type="submit" name="fullDocket" value="Full Docket"/>'
            '<input type="submit" name="dktEntries" value="Entries"/>'
            '</form></body></html>'
        )

    @staticmethod
    def _filter_page(case_number):
        return (
            '<html><body><form method="post" action="TransportRoom">'
            '<input type="hidden" name="servlet" value="CaseFilter.jsp"/>'
            f'<input type="hidden" name="caseNum" value="{case_number}"/>'
            '<input type="text" name="dateFrom"/>'
            '<input type="radio" name="outputXML_TXT" value="HTML"/>'
            '<input type="submit" name="view" value="View Docket"/>'
            '</form></body></html>'
        )

    @staticmethod
    def _confirm_page(case_number):
        return (
            '<html><body><p>Cost: 3.00</p>'
            '<form method="post" action="TransportRoom">'
            '<input type="hidden" name="servlet" value="ConfirmCharge.jsp"/>'
            f'<input type="hidden" name="caseNum" value="{case_number}"/>'
            '<input type="hidden" name="outputXML_TXT" value="PDF"/>'
            '<input type="submit" name="accept" value="Accept Charges"/>'
            '</form></body></html>'
        )


@pytest.fixture(autouse=True)
def reset_config_singletons(monkeypatch):
    """Fresh config for every test; no real credentials leak in."""
    monkeypatch.delenv('PACER_USERNAME', raising=False)
    monkeypatch.delenv('PACER_PASSWORD', raising=False)
    config_module._config = None
    config_module.reset_app_config()
    yield
    config_module._config = None
    config_module.reset_app_config()


@pytest.fixture
def docket_xml():
    """Factory building docket XML: docket_xml("20-1234", [("20-5678", "related", None)])."""
    return make_docket_xml


@pytest.fixture
def fake_portal():
    """Factory for FakePortal instances."""
    return FakePortal


class SleepRecorder:
    """Records requested delays instead of sleeping."""

    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()
