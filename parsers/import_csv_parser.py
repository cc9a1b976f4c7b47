"""
CSV parser for the bulk import wizard.

Turns an uploaded CSV (header row + nome, categoria, valor, tipo columns)
into ImportCandidate rows. Validation is per row: a bad row is flagged and
auto-excluded but never stops the rows after it.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from io import StringIO
from typing import Optional
import structlog

import pandas as pd

from models.import_wizard import ImportCandidate
from models.product import DonationType
from utils.description_template import generate_description
from utils.text_utils import normalize_label

logger = structlog.get_logger(__name__)


IMPORT_CSV_TEMPLATE = """nome,categoria,valor,tipo
Impressora,Tecnologia,500.00,monetario
Cadeiras,Móveis,150.00,monetario
Livros,Educação,75.50,fisico
"""

NAME_MAX_LENGTH = 200

# Normalized header -> logical column
COLUMN_ALIASES = {
    "nome": "name",
    "name": "name",
    "categoria": "category",
    "category": "category",
    "valor": "amount",
    "amount": "amount",
    "tipo": "type",
    "type": "type",
}

PHYSICAL_LABELS = {"fisico", "physical"}
MONETARY_LABELS = {"monetario", "monetary"}

MSG_NAME_REQUIRED = "Nome é obrigatório"
MSG_NAME_TOO_LONG = f"Nome deve ter no máximo {NAME_MAX_LENGTH} caracteres"
MSG_CATEGORY_REQUIRED = "Categoria é obrigatória"
MSG_AMOUNT_REQUIRED = "Valor é obrigatório"
MSG_AMOUNT_NOT_POSITIVE = "Valor deve ser um número positivo"
MSG_TYPE_INVALID = 'Tipo deve ser "monetário" ou "físico"'


@dataclass
class ImportCsvParseResult:
    """Result of parsing an import CSV."""
    items: list[ImportCandidate] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def valid_count(self) -> int:
        return sum(1 for item in self.items if item.is_valid)

    @property
    def invalid_count(self) -> int:
        return len(self.items) - self.valid_count


def parse_import_csv(csv_text: str) -> ImportCsvParseResult:
    """
    Parse import CSV text into candidates.

    Args:
        csv_text: Raw CSV document with a header row

    Returns:
        ImportCsvParseResult with one candidate per non-blank data row.
        An empty document gives an empty result; a document the reader
        cannot tokenize gives no items and a document-level error.
    """
    result = ImportCsvParseResult()

    if not csv_text or not csv_text.strip():
        return result

    # header=None makes the header line fix the field count, so a data row
    # with extra fields is a tokenizing error rather than a shifted index
    try:
        df = pd.read_csv(
            StringIO(csv_text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return result
    except pd.errors.ParserError as e:
        logger.warning("import_csv_unreadable", error=str(e))
        result.errors.append(f"Erro ao ler arquivo CSV: {e}")
        return result

    if df.empty:
        return result

    col_mapping = _get_column_mapping(df.iloc[0])
    df = df.iloc[1:]

    for index, (_, row) in enumerate(df.iterrows()):
        result.items.append(
            parse_import_row(
                index,
                name=_cell(row, col_mapping.get("name")),
                category=_cell(row, col_mapping.get("category")),
                amount=_cell(row, col_mapping.get("amount")),
                type_label=_cell(row, col_mapping.get("type")),
            )
        )

    logger.info(
        "import_csv_parsed",
        rows=len(result.items),
        valid=result.valid_count,
        invalid=result.invalid_count
    )

    return result


def parse_import_row(
    row_index: int,
    name: str,
    category: str,
    amount: str,
    type_label: str,
) -> ImportCandidate:
    """
    Validate and normalize one CSV row.

    Errors accumulate; every check runs even after an earlier one fails.
    """
    validation_errors: list[str] = []

    name = (name or "").strip()
    if not name:
        validation_errors.append(MSG_NAME_REQUIRED)
    elif len(name) > NAME_MAX_LENGTH:
        validation_errors.append(MSG_NAME_TOO_LONG)

    category_name_raw = (category or "").strip()
    if not category_name_raw:
        validation_errors.append(MSG_CATEGORY_REQUIRED)

    amount_text = (amount or "").strip()
    target_amount = 0
    if not amount_text:
        validation_errors.append(MSG_AMOUNT_REQUIRED)
    else:
        cents = _parse_amount_cents(amount_text)
        if cents is None:
            validation_errors.append(MSG_AMOUNT_NOT_POSITIVE)
        else:
            target_amount = cents

    donation_type, type_ok = _parse_donation_type(type_label)
    if not type_ok:
        validation_errors.append(MSG_TYPE_INVALID)

    is_valid = not validation_errors

    return ImportCandidate(
        row_index=row_index,
        name=name,
        category_name_raw=category_name_raw,
        category_id=None,
        target_amount=target_amount,
        donation_type=donation_type,
        description=generate_description(name, category_name_raw),
        photo_options=[],
        selected_photo_url=None,
        is_valid=is_valid,
        validation_errors=validation_errors,
        is_excluded=not is_valid,
    )


# ===================
# HELPERS
# ===================

def _normalize_column(col) -> str:
    """Normalize a header cell: trim, lowercase, drop accents."""
    return normalize_label(str(col))


def _get_column_mapping(header: pd.Series) -> dict[str, int]:
    """Map logical columns (name, category, amount, type) to header positions."""
    mapping: dict[str, int] = {}
    for position, col in header.items():
        logical = COLUMN_ALIASES.get(_normalize_column(col))
        if logical and logical not in mapping:
            mapping[logical] = position
    return mapping


def _cell(row: pd.Series, column: Optional[int]) -> str:
    """Read a cell as text; missing columns and short rows read as empty."""
    if column is None:
        return ""
    value = row.get(column)
    if value is None or pd.isna(value):
        return ""
    return str(value)


def _parse_amount_cents(text: str) -> Optional[int]:
    """
    Convert decimal text to integer cents.

    "150.00" → 15000, "200.50" → 20050. Halves round away from zero.

    Returns:
        Cents, or None if the text is not a finite number greater than zero
        or is too large to convert
    """
    try:
        value = Decimal(text)
        if not value.is_finite() or value <= 0:
            return None
        return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # Too many digits to represent as whole cents
        return None


def _parse_donation_type(label: str) -> tuple[DonationType, bool]:
    """
    Map a type label to a donation type.

    Returns:
        (donation_type, recognized). Unrecognized non-empty labels fall
        back to monetary with recognized=False.
    """
    normalized = normalize_label(label)
    if normalized in PHYSICAL_LABELS:
        return DonationType.PHYSICAL, True
    if not normalized or normalized in MONETARY_LABELS:
        return DonationType.MONETARY, True
    return DonationType.MONETARY, False
