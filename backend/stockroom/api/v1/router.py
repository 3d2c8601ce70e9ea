"""API v1 router aggregator.

All v1 endpoint routers are included here and mounted at /api/v1.
"""

from fastapi import APIRouter

from stockroom.api.v1 import auth, categories, products, suppliers, users

router = APIRouter()

# =============================================================================
# Authentication
# =============================================================================

router.include_router(auth.router, prefix="/auth", tags=["auth"])

# =============================================================================
# Inventory
# =============================================================================

router.include_router(categories.router, prefix="/categories", tags=["categories"])
router.include_router(suppliers.router, prefix="/suppliers", tags=["suppliers"])
router.include_router(products.router, prefix="/products", tags=["products"])

# =============================================================================
# User management
# =============================================================================

router.include_router(users.router, prefix="/users", tags=["users"])
