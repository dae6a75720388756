# =============================================================================
# app/context.py - Application Context
# =============================================================================
# Everything a request needs from the outside world, constructed once at
# startup and handed to route handlers through dependency injection:
# - settings
# - record stores for users and products
# - the remote image store
# - password hasher and token service
#
# Tests build their own AppContext with in-memory stores.
# =============================================================================

import logging
from dataclasses import dataclass

from app.config import Settings
from core.services.asset_service import AssetStore
from core.services.product_service import ProductService
from core.services.user_service import UserService
from lib.security import PasswordHasher, TokenService
from lib.supabase_client import SupabaseTable, create_supabase_client

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Explicitly constructed handle replacing module-level singletons."""

    settings: Settings
    users: SupabaseTable
    products: SupabaseTable
    assets: AssetStore
    hasher: PasswordHasher
    tokens: TokenService

    @property
    def product_service(self) -> ProductService:
        return ProductService(
            products=self.products,
            users=self.users,
            assets=self.assets,
            description_unique=self.settings.PRODUCT_DESCRIPTION_UNIQUE,
        )

    @property
    def user_service(self) -> UserService:
        return UserService(
            users=self.users,
            assets=self.assets,
            hasher=self.hasher,
            tokens=self.tokens,
        )


def build_context(settings: Settings) -> AppContext:
    """
    Build the production context from settings.

    Raises:
        SupabaseClientError: If the Supabase client can't be created
    """
    client = create_supabase_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)

    logger.info(
        f"Context ready: tables={settings.USERS_TABLE},{settings.PRODUCTS_TABLE} "
        f"bucket={settings.STORAGE_BUCKET}"
    )
    return AppContext(
        settings=settings,
        users=SupabaseTable(client, settings.USERS_TABLE),
        products=SupabaseTable(client, settings.PRODUCTS_TABLE),
        assets=AssetStore(client, settings.STORAGE_BUCKET),
        hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        tokens=TokenService(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.JWT_EXPIRE_MINUTES,
        ),
    )
