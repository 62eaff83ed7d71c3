"""
Tests for gender and category normalization.
"""

import pytest

from race_reports.shared.constants import GenderCategory
from race_reports.features.results.gender import (
    normalize_category,
    normalize_gender,
    normalize_ingestion_gender,
)


# =============================================================================
# Test report path
# =============================================================================

class TestNormalizeGender:
    """Tests for normalize_gender."""

    @pytest.mark.parametrize("value", ["F", "f", "Mujer", "DAMAS", "Female", "Femenino", "W"])
    def test_feminine(self, value):
        assert normalize_gender(value) is GenderCategory.FEMENINO

    @pytest.mark.parametrize("value", ["M", "Hombre", "Varón", "VARONES", "Male", "Caballeros", "Masculino"])
    def test_masculine(self, value):
        assert normalize_gender(value) is GenderCategory.MASCULINO

    def test_masculina_is_deliberately_masculine(self):
        """Masculine on purpose, even though upload-form lists file it as feminine."""
        assert normalize_gender("Masculina") is GenderCategory.MASCULINO

    @pytest.mark.parametrize("value", ["", "   ", "X", "No binario", "Otro", "???"])
    def test_neutral_or_unknown(self, value):
        assert normalize_gender(value) is GenderCategory.X

    @pytest.mark.parametrize("value", [None, 1, 0.5, ["F"]])
    def test_non_string(self, value):
        assert normalize_gender(value) is GenderCategory.X

    def test_punctuation_ignored(self):
        assert normalize_gender(" F. ") is GenderCategory.FEMENINO


class TestNormalizeCategory:
    """Tests for normalize_category."""

    def test_vendor_codes(self):
        assert normalize_category("H") == "20 a 29"
        assert normalize_category("ju20") == "18 a 19 años"
        assert normalize_category(" JU20 ") == "18 a 19 años"

    def test_other_values_unchanged(self):
        assert normalize_category("M40-44") == "M40-44"
        assert normalize_category("") == ""


# =============================================================================
# Test ingestion path
# =============================================================================

class TestNormalizeIngestionGender:
    """Tests for normalize_ingestion_gender."""

    @pytest.mark.parametrize("value", ["F", "f.", "Fem.", "Mujeres", "Dama", "Ladies"])
    def test_feminine_synonyms(self, value):
        assert normalize_ingestion_gender(value) == "Femenino"

    @pytest.mark.parametrize("value", ["M", "m.", "Masc.", "Varón", "Gentlemen", "Hombre"])
    def test_masculine_synonyms(self, value):
        assert normalize_ingestion_gender(value) == "Masculino"

    def test_word_hints(self):
        """Free text containing a gender word is recognized."""
        assert normalize_ingestion_gender("Categoría Damas") == "Femenino"
        assert normalize_ingestion_gender("Open Varones") == "Masculino"

    def test_unrecognized_kept_verbatim(self):
        assert normalize_ingestion_gender("Mixto") == "Mixto"

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_empty(self, value):
        assert normalize_ingestion_gender(value) is None
