"""
Business logic services.

Each service handles one domain area.
"""

from services.product_service import ProductService, get_product_service, create_catalog_item
from services.category_service import CategoryService, get_category_service, match_category
from services.storage_service import StorageService, get_storage_service
from services.photo_service import PhotoService, get_photo_service
from services.session_service import AdminSession, StaticSession
from services.wizard_reducer import wizard_reducer, INITIAL_WIZARD_STATE
from services.import_service import ImportService, get_import_service
from services.import_wizard_service import ImportWizardSession

__all__ = [
    "ProductService",
    "get_product_service",
    "create_catalog_item",
    "CategoryService",
    "get_category_service",
    "match_category",
    "StorageService",
    "get_storage_service",
    "PhotoService",
    "get_photo_service",
    "AdminSession",
    "StaticSession",
    "wizard_reducer",
    "INITIAL_WIZARD_STATE",
    "ImportService",
    "get_import_service",
    "ImportWizardSession",
]
