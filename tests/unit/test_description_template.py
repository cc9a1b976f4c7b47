"""
Unit tests for the default item description.

Run: pytest tests/unit/test_description_template.py -v
"""

from utils.description_template import generate_description


class TestGenerateDescription:
    """Tests for generate_description()"""

    def test_with_category(self):
        assert generate_description("Impressora", "Eletrônicos") == (
            "Impressora para doação. Categoria: Eletrônicos"
        )

    def test_empty_category(self):
        assert generate_description("Cadeira", "") == "Cadeira para doação."

    def test_whitespace_category_counts_as_empty(self):
        assert generate_description("Cadeira", "   ") == "Cadeira para doação."

    def test_trims_both_inputs(self):
        """Surrounding whitespace should not leak into the description."""
        assert generate_description("  Mesa ", " Móveis  ") == "Mesa para doação. Categoria: Móveis"
