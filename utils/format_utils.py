"""
Formatting helpers for currency amounts and storage paths.
"""

import secrets
from datetime import date
from decimal import Decimal
from typing import Optional


def format_currency(cents: int) -> str:
    """
    Format an amount in cents as Brazilian reais.

    - 12345 → "R$ 123,45"
    - 123456789 → "R$ 1.234.567,89"

    Args:
        cents: Amount in cents (integer)

    Returns:
        Formatted string using pt-BR separators
    """
    value = Decimal(cents) / Decimal(100)
    sign = "-" if value < 0 else ""
    # Format with US separators, then swap them for pt-BR
    us_formatted = f"{abs(value):,.2f}"
    br_formatted = us_formatted.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {br_formatted}"


def generate_storage_path(prefix: str, extension: str, today: Optional[date] = None) -> str:
    """
    Generate a unique storage path for uploads.

    Args:
        prefix: Folder inside the bucket (e.g., 'product-photos')
        extension: File extension without dot (e.g., 'jpeg')
        today: Date for the path (defaults to today)

    Returns:
        Path like "product-photos/2024-02-18-<32 hex chars>.jpeg"
    """
    day = (today or date.today()).isoformat()
    return f"{prefix}/{day}-{secrets.token_hex(16)}.{extension}"
