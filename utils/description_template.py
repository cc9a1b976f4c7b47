"""
Default description for imported catalog items.

Pattern: "{name} para doação. Categoria: {category}"
If category is empty: "{name} para doação."
"""


def generate_description(name: str, category: str) -> str:
    """Build the default description from an item name and category label."""
    trimmed_name = name.strip()
    trimmed_category = category.strip()

    if not trimmed_category:
        return f"{trimmed_name} para doação."

    return f"{trimmed_name} para doação. Categoria: {trimmed_category}"
