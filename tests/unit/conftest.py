"""
Pytest configuration for unit tests.

Provides fixtures that apply to the mocked unit tests.
"""

import pytest

from pacer_network.config import AppConfig


@pytest.fixture
def app_config():
    """AppConfig isolated from any .env file in the working directory."""
    return AppConfig(_env_file=None)


@pytest.fixture
def pacer_session(fake_portal, docket_xml, app_config):
    """
    Factory: PacerSession for 'cadc' backed by a FakePortal.

    Usage:
        session, portal = pacer_session({"20-1234": docket_xml("20-1234")})
    """
    from pacer_network.services.docket_session import PacerSession

    def make(dockets, broken=()):
        portal = fake_portal(dockets, broken=broken)
        session = PacerSession.open("token-xyz", "cadc", config=app_config, http=portal)
        return session, portal

    return make
