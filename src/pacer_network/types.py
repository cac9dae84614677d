"""
Discovery helper for exploring supported PACER courts.

Provides a user-facing API to discover known court codes and which of them
have been tested, from circuits.yaml.
"""

from typing import Dict
from pacer_network.config import get_config


class Circuits:
    """
    Helper class for discovering available PACER court codes.

    All methods use the centralized configuration from circuits.yaml
    and return copies to prevent accidental mutations.

    Example:
        >>> Circuits.list_tested()
        {'cadc': 'U.S. Court of Appeals for the D.C. Circuit'}

        >>> Circuits.is_valid('ca9')
        True
    """

    @staticmethod
    def list_available() -> Dict[str, str]:
        """
        List all known court codes with descriptions.

        Example:
            >>> Circuits.list_available()['cafc']
            'U.S. Court of Appeals for the Federal Circuit'
        """
        return get_config().courts.copy()

    @staticmethod
    def list_appellate() -> Dict[str, str]:
        """List only the Courts of Appeals (codes starting with 'ca')."""
        return {
            code: name for code, name in get_config().courts.items()
            if code.startswith('ca')
        }

    @staticmethod
    def list_tested() -> Dict[str, str]:
        """List courts that have been exercised against the live portal."""
        config = get_config()
        return {
            code: config.courts.get(code, code) for code in config.tested
        }

    @staticmethod
    def get_description(code: str) -> str:
        """
        Get the description for a court code.

        Raises:
            ValueError: If code is not found
        """
        try:
            return get_config().get_circuit_description(code)
        except KeyError as e:
            raise ValueError(f"Unknown circuit: {code}") from e

    @staticmethod
    def is_valid(code: str) -> bool:
        """Check if a court code is listed in circuits.yaml."""
        return get_config().is_known_circuit(code)

    @staticmethod
    def is_tested(code: str) -> bool:
        """Check if a court code has been tested end-to-end."""
        return get_config().is_tested_circuit(code)
