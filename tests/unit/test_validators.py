"""
Unit tests for validation functions.

Tests reusable normalizers and validators used by the Pydantic settings
models and by the retrieval entry points.
"""

import logging

import pytest
from pydantic import BaseModel, field_validator, ValidationError


class TestNormalizeCaseNumbers:
    """Test suite for normalize_case_numbers()."""

    def test_trims_drops_blanks_and_dedupes(self):
        """Duplicates and blanks are processed exactly once, input order kept."""
        from pacer_network.validators import normalize_case_numbers

        result = normalize_case_numbers(["20-1234", "20-1234", "  ", "20-1235"])

        assert result == ["20-1234", "20-1235"]

    def test_trims_whitespace_before_dedupe(self):
        from pacer_network.validators import normalize_case_numbers

        result = normalize_case_numbers([" 20-1234", "20-1234 ", "\t20-1234\n"])

        assert result == ["20-1234"]

    def test_first_occurrence_wins(self):
        from pacer_network.validators import normalize_case_numbers

        result = normalize_case_numbers(["B", "A", "B", "C", "A"])

        assert result == ["B", "A", "C"]

    def test_drops_none_and_nan(self):
        """pandas NaN from CSV input is treated like a blank."""
        import pandas as pd
        from pacer_network.validators import normalize_case_numbers

        series = pd.Series(["20-1234", None, float('nan'), "20-1235"])
        result = normalize_case_numbers(series)

        assert result == ["20-1234", "20-1235"]

    def test_single_string_is_one_case(self):
        """A bare string is one case number, not a sequence of characters."""
        from pacer_network.validators import normalize_case_numbers

        assert normalize_case_numbers("20-1234") == ["20-1234"]

    def test_raises_when_nothing_valid_remains(self):
        from pacer_network.validators import normalize_case_numbers
        from pacer_network.exceptions import NoValidCasesError

        with pytest.raises(NoValidCasesError, match="No valid case numbers"):
            normalize_case_numbers(["", "   ", None])

    def test_no_valid_cases_error_is_value_error(self):
        """Callers catching ValueError also catch empty input."""
        from pacer_network.validators import normalize_case_numbers

        with pytest.raises(ValueError):
            normalize_case_numbers([])


class TestValidateCircuit:
    """Test suite for validate_circuit()."""

    def test_accepts_tested_circuit_silently(self, caplog):
        from pacer_network.validators import validate_circuit

        with caplog.at_level(logging.WARNING):
            assert validate_circuit('cadc') == 'cadc'

        assert caplog.records == []

    def test_known_untested_circuit_warns(self, caplog):
        from pacer_network.validators import validate_circuit

        with caplog.at_level(logging.WARNING):
            assert validate_circuit('ca9') == 'ca9'

        assert "has not been tested" in caplog.text

    def test_unknown_circuit_warns_but_is_accepted(self, caplog):
        from pacer_network.validators import validate_circuit

        with caplog.at_level(logging.WARNING):
            assert validate_circuit('nysd') == 'nysd'

        assert "not listed" in caplog.text

    @pytest.mark.parametrize("bad", ["", "CADC", "ca dc", "c", "ecf.cadc", "abcdefghij"])
    def test_rejects_malformed_codes(self, bad):
        """Codes become part of the host name, so only short lowercase tokens pass."""
        from pacer_network.validators import validate_circuit

        with pytest.raises(ValueError, match="lowercase court code"):
            validate_circuit(bad)


class TestValidateRateLimit:
    """Test suite for validate_rate_limit()."""

    def test_fixed_seconds(self):
        from pacer_network.validators import validate_rate_limit

        assert validate_rate_limit(3) == 3
        assert validate_rate_limit(0) == 0
        assert validate_rate_limit(1.5) == 1.5

    def test_range_list_becomes_tuple(self):
        from pacer_network.validators import validate_rate_limit

        assert validate_rate_limit([5, 10]) == (5, 10)
        assert validate_rate_limit((8, 8)) == (8, 8)

    def test_single_element_unwraps(self):
        from pacer_network.validators import validate_rate_limit

        assert validate_rate_limit([4]) == 4

    @pytest.mark.parametrize("bad", [-1, (10, 5), (-1, 3), (1, 2, 3), (1.5, 3), True])
    def test_rejects_invalid_values(self, bad):
        from pacer_network.validators import validate_rate_limit

        with pytest.raises(ValueError):
            validate_rate_limit(bad)


class TestIterationAndCheckpointValidators:

    def test_max_iterations_must_be_positive(self):
        from pacer_network.validators import validate_max_iterations

        assert validate_max_iterations(1) == 1
        with pytest.raises(ValueError, match="max_iterations"):
            validate_max_iterations(0)

    def test_checkpoint_interval_allows_none(self):
        from pacer_network.validators import validate_checkpoint_interval

        assert validate_checkpoint_interval(None) is None
        assert validate_checkpoint_interval(50) == 50
        with pytest.raises(ValueError, match="checkpoint_interval"):
            validate_checkpoint_interval(0)


class TestCaseNumberToFilename:

    def test_replaces_non_alphanumerics(self):
        from pacer_network.validators import case_number_to_filename

        assert case_number_to_filename("20-1234") == "docket_20_1234.xml"
        assert case_number_to_filename("1:20-cv-01234") == "docket_1_20_cv_01234.xml"

    def test_is_deterministic(self):
        from pacer_network.validators import case_number_to_filename

        assert case_number_to_filename("20-5678") == case_number_to_filename("20-5678")


class TestValidatorsWithPydantic:
    """Validators plug into Pydantic models like the settings models do."""

    def test_rate_limit_validator_in_model(self):
        from pacer_network.validators import validate_rate_limit

        class Delay(BaseModel):
            rate_limit: object

            _check = field_validator('rate_limit')(validate_rate_limit)

        assert Delay(rate_limit=[2, 4]).rate_limit == (2, 4)
        with pytest.raises(ValidationError):
            Delay(rate_limit=-5)
