"""
Configuration management using Pydantic Settings.

Automatically loads configuration from the packaged circuits.yaml and environment variables.
Provides type-safe access to:
- PACER court codes (circuits) and which of them have been tested
- PACER credentials (PACER_USERNAME / PACER_PASSWORD)
- Portal endpoints, timeouts and politeness defaults
"""

from pathlib import Path
from typing import Dict, List, Optional
import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CIRCUITS_FILE = Path(__file__).parent / 'circuits.yaml'


class CircuitsConfig(BaseSettings):
    """
    Configuration automatically loaded from pacer_network/circuits.yaml.

    Provides type-safe access to the PACER court codes that select which
    regional host (https://ecf.{code}.uscourts.gov) serves requests.

    Attributes:
        courts: Dictionary of court codes to English descriptions
        tested: Court codes verified end-to-end against the live portal

    Example:
        >>> config = CircuitsConfig()
        >>> config.is_known_circuit('cadc')
        True
        >>> config.get_circuit_description('cadc')
        'U.S. Court of Appeals for the D.C. Circuit'
    """

    courts: Dict[str, str] = Field(
        default_factory=dict,
        description="Known court codes with descriptions"
    )
    tested: List[str] = Field(
        default_factory=list,
        description="Court codes tested against the live portal"
    )

    model_config = SettingsConfigDict(
        extra='ignore'
    )

    @model_validator(mode='before')
    @classmethod
    def load_yaml_config(cls, data: dict) -> dict:
        """
        Load configuration from circuits.yaml if not already provided.

        Runs before field validation; values passed explicitly (e.g. from
        tests) take precedence over the file.
        """
        if data:
            return data

        # Shipped inside the package so installed copies find it too
        config_path = CIRCUITS_FILE

        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found at {config_path}. "
                f"The pacer_network installation is missing circuits.yaml."
            )

        with open(config_path, 'r', encoding='utf-8') as f:
            yaml_data = yaml.safe_load(f) or {}

        return {
            'courts': yaml_data.get('courts', {}),
            'tested': yaml_data.get('tested', [])
        }

    def is_known_circuit(self, code: Optional[str]) -> bool:
        """Check if a court code is listed in circuits.yaml."""
        if code is None:
            return False
        return code in self.courts

    def is_tested_circuit(self, code: Optional[str]) -> bool:
        """Check if a court code has been tested end-to-end."""
        if code is None:
            return False
        return code in self.tested

    def get_circuit_description(self, code: str) -> str:
        """
        Get the description for a court code.

        Raises:
            KeyError: If code is not found in configuration
        """
        if code not in self.courts:
            raise KeyError(f"Unknown circuit: {code}")
        return self.courts[code]


# Singleton pattern - loaded once, cached forever
_config: Optional[CircuitsConfig] = None


def get_config() -> CircuitsConfig:
    """
    Get global circuits config instance (lazy-loaded singleton).

    Returns:
        Singleton CircuitsConfig instance
    """
    global _config
    if _config is None:
        _config = CircuitsConfig()
    return _config


class AppConfig(BaseSettings):
    """
    Application configuration loaded from environment variables.

    Every field can be overridden with a PACER_-prefixed environment variable
    or through a .env file in the working directory.

    Environment Variables (from .env):
        PACER_USERNAME: PACER login id
        PACER_PASSWORD: PACER password
        PACER_LOGIN_URL: CSO authentication endpoint
        PACER_ECF_BASE_URL: Court host template, formatted with the circuit code
        PACER_REQUEST_TIMEOUT: Timeout (seconds) for ordinary portal requests
        PACER_XML_TIMEOUT: Timeout (seconds) for the two XML generation requests

    Example:
        >>> config = get_app_config()
        >>> config.base_url_for('cadc')
        'https://ecf.cadc.uscourts.gov'
    """

    username: Optional[str] = Field(
        default=None,
        description="PACER username (PACER_USERNAME)"
    )

    password: Optional[str] = Field(
        default=None,
        description="PACER password (PACER_PASSWORD)"
    )

    login_url: str = Field(
        default="https://pacer.login.uscourts.gov/services/cso-auth",
        description="PACER CSO authentication endpoint"
    )

    ecf_base_url: str = Field(
        default="https://ecf.{circuit}.uscourts.gov",
        description="Court host template; {circuit} is replaced by the court code"
    )

    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for ordinary portal requests"
    )

    xml_timeout: float = Field(
        default=120.0,
        gt=0,
        description="Timeout in seconds for the XML generation requests"
    )

    user_agent: str = Field(
        default="Mozilla/5.0",
        description="User-Agent header sent to the court host"
    )

    default_output_dir: str = Field(
        default="pacer_xml_output",
        description="Default directory for retrieved XML dockets"
    )

    default_network_output_dir: str = Field(
        default="pacer_network_output",
        description="Default directory for network discovery artifacts"
    )

    rate_limit_min: int = Field(
        default=5,
        ge=0,
        description="Lower bound (seconds) of the default inter-case delay"
    )

    rate_limit_max: int = Field(
        default=10,
        ge=0,
        description="Upper bound (seconds) of the default inter-case delay"
    )

    model_config = SettingsConfigDict(
        env_prefix='PACER_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

    @property
    def default_rate_limit(self) -> tuple:
        """Default (min, max) inter-case delay range."""
        return (self.rate_limit_min, self.rate_limit_max)

    def base_url_for(self, circuit: str) -> str:
        """Court host URL for a circuit code."""
        return self.ecf_base_url.format(circuit=circuit)


# Singleton pattern - loaded once, cached forever
_app_config: Optional[AppConfig] = None


def get_app_config() -> AppConfig:
    """
    Get global application config instance (lazy-loaded singleton).

    Configuration is loaded from environment variables and .env file.
    Cached after first access.
    """
    global _app_config
    if _app_config is None:
        _app_config = AppConfig()
    return _app_config


def reset_app_config() -> None:
    """Drop the cached AppConfig so the next access re-reads the environment."""
    global _app_config
    _app_config = None
