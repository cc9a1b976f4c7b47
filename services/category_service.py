"""
Category service.

Lists catalog categories and matches the free-text category labels from
import CSVs to existing categories.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.category import CategoryResponse
from exceptions import DatabaseError
from utils.text_utils import normalize_label

logger = structlog.get_logger(__name__)


def match_category(
    label: str,
    categories: list[CategoryResponse],
) -> Optional[CategoryResponse]:
    """
    First category whose name contains the label.

    Comparison ignores case and accents: "eletronicos" matches
    "Eletrônicos". An empty label never matches.
    """
    needle = normalize_label(label)
    if not needle:
        return None
    for category in categories:
        if needle in normalize_label(category.name):
            return category
    return None


class CategoryService:
    """Category lookups."""

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "categories"

    def get_all(self) -> list[CategoryResponse]:
        """All categories, oldest first."""
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .order("created_at")
                .execute()
            )
        except Exception as e:
            logger.error("get_categories_failed", error=str(e))
            raise DatabaseError("select", str(e))

        categories = [CategoryResponse(**row) for row in result.data]
        logger.debug("categories_retrieved", count=len(categories))
        return categories


_category_service: Optional[CategoryService] = None


def get_category_service() -> CategoryService:
    """Get or create CategoryService instance."""
    global _category_service
    if _category_service is None:
        _category_service = CategoryService()
    return _category_service
