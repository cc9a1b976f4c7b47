"""
File parsers module.
"""

from parsers.import_csv_parser import (
    parse_import_csv,
    parse_import_row,
    ImportCsvParseResult,
    IMPORT_CSV_TEMPLATE,
)

__all__ = [
    "parse_import_csv",
    "parse_import_row",
    "ImportCsvParseResult",
    "IMPORT_CSV_TEMPLATE",
]
