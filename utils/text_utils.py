"""
Text utilities for handling Portuguese text with accents.

Used for CSV header matching, donation type labels and category lookup.
"""

import unicodedata
from typing import Optional


def strip_accents(text: str) -> str:
    """
    Remove accent marks, keeping base characters.

    - "Eletrônicos" → "Eletronicos"
    - "físico" → "fisico"
    """
    # NFD decomposition separates base chars from accents
    normalized = unicodedata.normalize('NFD', text)
    return ''.join(
        c for c in normalized
        if unicodedata.category(c) != 'Mn'
    )


def normalize_label(label: Optional[str]) -> str:
    """
    Normalize a free-text label for comparison.

    Handles accents, case and surrounding whitespace:
    - "  Físico " → "fisico"
    - "MONETÁRIO" → "monetario"
    - None → ""

    Args:
        label: Original label (may have accents, mixed case)

    Returns:
        Lowercase ASCII string, empty for missing input
    """
    if not label:
        return ""
    return strip_accents(label.strip()).lower()
