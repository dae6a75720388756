# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - products.py: Product create/list/get/update/delete
# - users.py: Registration, login/logout, lookup and profile update
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import products
from . import users

__all__ = [
    "health",
    "products",
    "users",
]
