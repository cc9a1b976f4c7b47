"""
Unit tests for the import CSV parser.

Run: pytest tests/unit/test_import_csv_parser.py -v
"""

import pytest

from parsers.import_csv_parser import (
    IMPORT_CSV_TEMPLATE,
    parse_import_csv,
    parse_import_row,
)
from models.product import DonationType


class TestParseImportCsv:
    """Tests for parse_import_csv()"""

    def test_parses_valid_and_invalid_rows(self, sample_import_csv):
        """Should return one candidate per data row, in order."""
        # Act
        result = parse_import_csv(sample_import_csv)

        # Assert
        assert [item.row_index for item in result.items] == [0, 1, 2]
        assert result.valid_count == 2
        assert result.invalid_count == 1
        assert result.errors == []

    def test_monetary_row(self):
        """Should convert amount to cents and build the description."""
        # Act
        result = parse_import_csv("nome,categoria,valor,tipo\nImpressora,Eletrônicos,150.00,monetário\n")

        # Assert
        item = result.items[0]
        assert item.name == "Impressora"
        assert item.category_name_raw == "Eletrônicos"
        assert item.category_id is None
        assert item.target_amount == 15000
        assert item.donation_type == DonationType.MONETARY
        assert item.description == "Impressora para doação. Categoria: Eletrônicos"
        assert item.selected_photo_url is None
        assert item.is_valid is True
        assert item.is_excluded is False

    def test_physical_row(self):
        """Should recognize físico as a physical donation."""
        # Act
        result = parse_import_csv("nome,categoria,valor,tipo\nCadeira,Móveis,80.50,físico\n")

        # Assert
        assert result.items[0].donation_type == DonationType.PHYSICAL
        assert result.items[0].target_amount == 8050

    def test_invalid_row_is_excluded_with_all_errors(self):
        """Should accumulate every error and auto-exclude the row."""
        # Act
        result = parse_import_csv("nome,categoria,valor,tipo\n,,-5,doação\n")

        # Assert
        item = result.items[0]
        assert item.is_valid is False
        assert item.is_excluded is True
        assert item.validation_errors == [
            "Nome é obrigatório",
            "Categoria é obrigatória",
            "Valor deve ser um número positivo",
            'Tipo deve ser "monetário" ou "físico"',
        ]

    def test_bad_row_does_not_stop_later_rows(self):
        """Rows after an invalid row should still parse."""
        # Arrange
        csv_text = (
            "nome,categoria,valor,tipo\n"
            "A,Cat,abc,monetario\n"
            "B,Cat,10,monetario\n"
        )

        # Act
        result = parse_import_csv(csv_text)

        # Assert
        assert len(result.items) == 2
        assert result.items[0].is_valid is False
        assert result.items[1].is_valid is True
        assert result.items[1].target_amount == 1000

    def test_english_headers_in_any_order(self):
        """Should locate columns by name, not position."""
        # Act
        result = parse_import_csv("Type,Amount,Name,Category\nphysical,20,Livros,Educação\n")

        # Assert
        item = result.items[0]
        assert item.name == "Livros"
        assert item.category_name_raw == "Educação"
        assert item.target_amount == 2000
        assert item.donation_type == DonationType.PHYSICAL

    def test_headers_ignore_case_and_accents(self):
        """NOME and CATEGÓRIA should still match."""
        # Act
        result = parse_import_csv("NOME,CATEGÓRIA,Valor,TIPO\nMesa,Móveis,99.90,\n")

        # Assert
        assert result.items[0].name == "Mesa"
        assert result.items[0].category_name_raw == "Móveis"
        assert result.items[0].is_valid is True

    def test_blank_lines_are_skipped(self):
        """Empty lines should not produce candidates."""
        # Act
        result = parse_import_csv("nome,categoria,valor,tipo\n\nA,Cat,10,\n\nB,Cat,20,\n")

        # Assert
        assert [item.name for item in result.items] == ["A", "B"]
        assert [item.row_index for item in result.items] == [0, 1]

    def test_fields_are_trimmed(self):
        """Should trim surrounding whitespace from every field."""
        # Act
        result = parse_import_csv('nome,categoria,valor,tipo\n"  Mesa  ","  Móveis ", 10 , Físico \n')

        # Assert
        item = result.items[0]
        assert item.name == "Mesa"
        assert item.category_name_raw == "Móveis"
        assert item.target_amount == 1000
        assert item.donation_type == DonationType.PHYSICAL

    @pytest.mark.parametrize("csv_text", ["", "   \n  ", "nome,categoria,valor,tipo\n"])
    def test_empty_documents(self, csv_text):
        """Should return no candidates and no errors."""
        # Act
        result = parse_import_csv(csv_text)

        # Assert
        assert result.items == []
        assert result.errors == []

    def test_unreadable_document_never_raises(self):
        """A row with extra fields should give an empty result and an error."""
        # Act
        result = parse_import_csv('nome,categoria\n"A","B","C","D","E"\n')

        # Assert
        assert result.items == []
        assert len(result.errors) == 1

    def test_trailing_comma_on_data_rows_does_not_shift_columns(self):
        """Data rows wider than the header should be unreadable, never re-aligned."""
        # Arrange
        csv_text = (
            "nome,categoria,valor,tipo\n"
            "Impressora,Tecnologia,500.00,monetario,\n"
            "Cadeira,Móveis,80.00,fisico,\n"
        )

        # Act
        result = parse_import_csv(csv_text)

        # Assert
        assert result.items == []
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Erro ao ler arquivo CSV")

    def test_trailing_comma_on_header_keeps_columns(self):
        # Act
        result = parse_import_csv("nome,categoria,valor,tipo,\nImpressora,Tecnologia,500.00,monetario\n")

        # Assert
        assert result.errors == []
        assert result.items[0].name == "Impressora"
        assert result.items[0].category_name_raw == "Tecnologia"
        assert result.items[0].target_amount == 50000

    def test_oversized_amount_does_not_stop_later_rows(self):
        """An amount too large for whole cents is a row error, not a crash."""
        # Act
        result = parse_import_csv(
            "nome,categoria,valor,tipo\n"
            "A,Cat,1e30,monetario\n"
            "B,Cat,10.00,monetario\n"
        )

        # Assert
        assert len(result.items) == 2
        assert result.items[0].validation_errors == ["Valor deve ser um número positivo"]
        assert result.items[0].is_excluded is True
        assert result.items[1].target_amount == 1000
        assert result.items[1].is_valid is True

    def test_template_parses_cleanly(self):
        """The downloadable template should be a valid import."""
        # Act
        result = parse_import_csv(IMPORT_CSV_TEMPLATE)

        # Assert
        assert len(result.items) == 3
        assert result.invalid_count == 0
        assert result.items[2].donation_type == DonationType.PHYSICAL


class TestParseImportRow:
    """Tests for parse_import_row()"""

    @pytest.mark.parametrize("amount,expected", [
        ("150.00", 15000),
        ("150.50", 15050),
        ("200.50", 20050),
        ("0.005", 1),
        ("10", 1000),
        ("1.999", 200),
    ])
    def test_amount_to_cents(self, amount, expected):
        """Should multiply by 100 rounding halves away from zero."""
        # Act
        item = parse_import_row(0, "Item", "Cat", amount, "")

        # Assert
        assert item.target_amount == expected
        assert item.is_valid is True

    @pytest.mark.parametrize("amount", ["0", "-10", "abc", "1,50", "NaN", "Infinity", "1e30", "9" * 29])
    def test_amount_not_positive_number(self, amount):
        """Should reject zero, negatives and non-numbers."""
        # Act
        item = parse_import_row(0, "Item", "Cat", amount, "")

        # Assert
        assert item.validation_errors == ["Valor deve ser um número positivo"]
        assert item.target_amount == 0

    def test_amount_required(self):
        # Act
        item = parse_import_row(0, "Item", "Cat", "  ", "")

        # Assert
        assert item.validation_errors == ["Valor é obrigatório"]

    def test_name_too_long(self):
        """Names over 200 characters should be rejected."""
        # Act
        ok = parse_import_row(0, "a" * 200, "Cat", "1", "")
        too_long = parse_import_row(1, "a" * 201, "Cat", "1", "")

        # Assert
        assert ok.is_valid is True
        assert too_long.validation_errors == ["Nome deve ter no máximo 200 caracteres"]

    @pytest.mark.parametrize("label,expected", [
        ("monetario", DonationType.MONETARY),
        ("MONETÁRIO", DonationType.MONETARY),
        ("monetary", DonationType.MONETARY),
        ("", DonationType.MONETARY),
        ("fisico", DonationType.PHYSICAL),
        ("Físico", DonationType.PHYSICAL),
        ("PHYSICAL", DonationType.PHYSICAL),
    ])
    def test_type_labels(self, label, expected):
        # Act
        item = parse_import_row(0, "Item", "Cat", "1", label)

        # Assert
        assert item.donation_type == expected
        assert item.is_valid is True

    def test_unknown_type_defaults_to_monetary_with_error(self):
        # Act
        item = parse_import_row(0, "Item", "Cat", "1", "serviço")

        # Assert
        assert item.donation_type == DonationType.MONETARY
        assert item.validation_errors == ['Tipo deve ser "monetário" ou "físico"']
        assert item.is_excluded is True

    def test_missing_category_description(self):
        """Description should omit the category part when it is empty."""
        # Act
        item = parse_import_row(0, "Item", "", "1", "")

        # Assert
        assert item.description == "Item para doação."
        assert item.validation_errors == ["Categoria é obrigatória"]
