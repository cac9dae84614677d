"""
PACER Authentication Service

Obtains a NextGen CSO session token from the central PACER login service.
Credentials come from arguments or from PACER_USERNAME / PACER_PASSWORD
(environment or .env). No retry: a rejected login is terminal for the run.
"""

import logging
from typing import Optional, Tuple

import requests

from pacer_network.config import AppConfig, get_app_config
from pacer_network.exceptions import AuthenticationError, MissingCredentialsError

logger = logging.getLogger(__name__)

TOKEN_FIELD = 'nextGenCSO'


def resolve_credentials(
    username: Optional[str] = None,
    password: Optional[str] = None,
    config: Optional[AppConfig] = None
) -> Tuple[str, str]:
    """
    Resolve username/password from arguments, falling back to configuration.

    Raises:
        MissingCredentialsError: If either value is absent everywhere
    """
    config = config or get_app_config()

    if not username:
        username = config.username
        if not username:
            raise MissingCredentialsError(
                "Username not provided and PACER_USERNAME environment variable not set.\n"
                "Either provide username argument or set PACER_USERNAME environment variable."
            )

    if not password:
        password = config.password
        if not password:
            raise MissingCredentialsError(
                "Password not provided and PACER_PASSWORD environment variable not set.\n"
                "Either provide password argument or set PACER_PASSWORD environment variable."
            )

    return username, password


def authenticate(
    username: Optional[str] = None,
    password: Optional[str] = None,
    config: Optional[AppConfig] = None,
    http: Optional[requests.Session] = None
) -> str:
    """
    Authenticate with PACER and return the session token.

    Args:
        username: PACER username. If None, reads PACER_USERNAME.
        password: PACER password. If None, reads PACER_PASSWORD.
        config: Application config (defaults to the global AppConfig)
        http: Optional requests session to send the login request with

    Returns:
        NextGen CSO token to pass to retrieval calls

    Raises:
        MissingCredentialsError: Credentials absent (no request is made)
        AuthenticationError: Non-200 response, unreachable login service, or
            a response without a session token

    Example:
        >>> token = authenticate()  # uses PACER_USERNAME / PACER_PASSWORD
    """
    config = config or get_app_config()
    username, password = resolve_credentials(username, password, config)

    logger.info("Authenticating with PACER...")

    sender = http or requests
    try:
        response = sender.post(
            config.login_url,
            json={'loginId': username, 'password': password},
            headers={
                'Content-Type': 'application/json',
                'Accept': 'application/json',
            },
            timeout=config.request_timeout,
        )
    except requests.RequestException as e:
        raise AuthenticationError(f"Could not reach PACER login service: {e}") from e

    if response.status_code != 200:
        raise AuthenticationError(
            f"Authentication failed. Please check your credentials.\n"
            f"Status code: {response.status_code}",
            status_code=response.status_code
        )

    try:
        auth_data = response.json()
    except ValueError as e:
        raise AuthenticationError(
            "Authentication response was not valid JSON",
            status_code=response.status_code
        ) from e

    token = auth_data.get(TOKEN_FIELD) if isinstance(auth_data, dict) else None
    if not token:
        description = (
            auth_data.get('errorDescription') if isinstance(auth_data, dict) else None
        ) or "no session token in response"
        raise AuthenticationError(
            f"Authentication failed: {description}",
            status_code=response.status_code
        )

    logger.info("✓ Authentication successful")
    return token
