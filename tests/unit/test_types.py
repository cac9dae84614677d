"""
Unit tests for the Circuits discovery helper (types.py).
"""

import pytest


class TestCircuits:
    """Test suite for Circuits discovery helper."""

    def test_list_available_returns_all_courts(self):
        from pacer_network.types import Circuits

        courts = Circuits.list_available()

        assert isinstance(courts, dict)
        assert courts['cafc'] == 'U.S. Court of Appeals for the Federal Circuit'
        assert 'dcd' in courts

    def test_list_available_returns_copy_not_reference(self):
        """Should return a copy to prevent mutation of config."""
        from pacer_network.types import Circuits

        courts = Circuits.list_available()
        courts['fake'] = 'Fake Court'

        assert 'fake' not in Circuits.list_available()

    def test_list_appellate_excludes_district_courts(self):
        from pacer_network.types import Circuits

        appellate = Circuits.list_appellate()

        assert 'ca1' in appellate
        assert 'cadc' in appellate
        assert 'dcd' not in appellate

    def test_list_tested(self):
        from pacer_network.types import Circuits

        assert Circuits.list_tested() == {
            'cadc': 'U.S. Court of Appeals for the D.C. Circuit'
        }

    def test_get_description_raises_value_error_for_unknown(self):
        from pacer_network.types import Circuits

        with pytest.raises(ValueError, match="Unknown circuit: zz"):
            Circuits.get_description('zz')

    def test_is_valid_and_is_tested(self):
        from pacer_network.types import Circuits

        assert Circuits.is_valid('ca9')
        assert not Circuits.is_valid('zz')
        assert Circuits.is_tested('cadc')
        assert not Circuits.is_tested('ca9')
