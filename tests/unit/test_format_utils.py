"""
Unit tests for formatting and text helpers.

Run: pytest tests/unit/test_format_utils.py -v
"""

import re
from datetime import date

import pytest

from utils.format_utils import format_currency, generate_storage_path
from utils.text_utils import normalize_label, strip_accents


class TestFormatCurrency:
    """Tests for format_currency()"""

    @pytest.mark.parametrize("cents,expected", [
        (0, "R$ 0,00"),
        (5, "R$ 0,05"),
        (15000, "R$ 150,00"),
        (123456, "R$ 1.234,56"),
        (123456789, "R$ 1.234.567,89"),
        (-2050, "-R$ 20,50"),
    ])
    def test_formats_brl(self, cents, expected):
        assert format_currency(cents) == expected


class TestGenerateStoragePath:
    """Tests for generate_storage_path()"""

    def test_path_shape(self):
        """Should be prefix/YYYY-MM-DD-<32 hex>.ext"""
        # Act
        path = generate_storage_path("product-photos", "jpeg", today=date(2024, 2, 18))

        # Assert
        assert re.fullmatch(r"product-photos/2024-02-18-[0-9a-f]{32}\.jpeg", path)

    def test_paths_are_unique(self):
        """Two calls should never collide."""
        paths = {generate_storage_path("product-photos", "png") for _ in range(50)}
        assert len(paths) == 50


class TestNormalizeLabel:
    """Tests for text normalization."""

    def test_strip_accents(self):
        assert strip_accents("Eletrônicos físico ação") == "Eletronicos fisico acao"

    @pytest.mark.parametrize("label,expected", [
        ("  Físico ", "fisico"),
        ("MONETÁRIO", "monetario"),
        ("", ""),
        (None, ""),
    ])
    def test_normalize_label(self, label, expected):
        assert normalize_label(label) == expected
