# =============================================================================
# core/services/user_service.py - User Business Logic
# =============================================================================
# Registration, login/logout, lookup and profile updates.
#
# Session model: a token is valid while the account's is_logged_in flag and
# session_version equal the values embedded in it. Login sets the flag;
# logout clears it and bumps the version, so every earlier token stops
# working.
# =============================================================================

import logging

from app.exceptions import (
    IncorrectPasswordError,
    MissingFieldsError,
    MissingImageError,
    UserAlreadyExistsError,
    UserNotFoundError,
    ValidationFailedError,
)
from core.models import ImageRef, User, UserCreate, UserUpdate
from core.services.asset_service import AssetStore
from core.services.staging import StagedFile
from lib.security import PasswordHasher, TokenService
from lib.supabase_client import DuplicateKeyError, SupabaseTable
from lib.utils import clean_text, normalize_email, utc_now_iso

logger = logging.getLogger(__name__)

# Folder inside the media bucket
USERS_FOLDER = "users"


class UserService:
    """
    Service for user account operations.

    Provides a clean interface between API routes and the record store.
    """

    def __init__(
        self,
        users: SupabaseTable,
        assets: AssetStore,
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self.users = users
        self.assets = assets
        self.hasher = hasher
        self.tokens = tokens

    def get_user(self, user_id: str) -> User:
        """
        Get a user by ID.

        Raises:
            UserNotFoundError: If no user has this ID
        """
        row = self.users.fetch_by_id(user_id)
        if not row:
            raise UserNotFoundError(user_ref=user_id)
        return User.model_validate(row)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, data: UserCreate, picture: StagedFile | None) -> User:
        """
        Register a new account.

        Steps:
        1. Validate and normalize fields (email lowercased)
        2. Reject an email or phone number that is already registered
        3. Hash the password
        4. Upload the profile picture and remove the staged file
        5. Insert the record; destroy the uploaded picture if the insert fails

        Returns:
            The created user (password hash never serialized)

        Raises:
            ValidationFailedError: Missing or invalid fields
            UserAlreadyExistsError: Email or phone number taken
            MissingImageError: No profile picture supplied
            StorageUploadError: Media host rejected the picture
        """
        try:
            full_name = clean_text(data.full_name)
            email = normalize_email(data.email) if data.email else ""
            phone_number = clean_text(data.phone_number)
            if not full_name or not email or not phone_number or not data.password:
                raise ValidationFailedError(
                    "fullName, email, password, age and phoneNumber are required"
                )
            if "@" not in email:
                raise ValidationFailedError("email is not valid", {"email": email})
            if data.age < 0:
                raise ValidationFailedError("age must not be negative", {"age": data.age})

            if self.users.fetch_one("email", email) or self.users.fetch_one("phone_number", phone_number):
                raise UserAlreadyExistsError()

            if picture is None:
                raise MissingImageError("profilePicture")

            try:
                password_hash = self.hasher.hash(data.password)
            except ValueError as e:
                raise ValidationFailedError(str(e))

            stored = self.assets.store_staged(picture, USERS_FOLDER)

            row = {
                "full_name": full_name,
                "email": email,
                "password": password_hash,
                "age": data.age,
                "phone_number": phone_number,
                "profile_picture": stored.to_row(),
                "is_logged_in": False,
                "session_version": 0,
            }
            try:
                created = self.users.insert(row)
            except DuplicateKeyError:
                self.assets.discard_quietly(stored)
                raise UserAlreadyExistsError()
            except Exception:
                self.assets.discard_quietly(stored)
                raise

            logger.info(f"Registered user: {created.get('id')}")
            return User.model_validate(created)

        finally:
            if picture is not None:
                picture.discard()

    # -------------------------------------------------------------------------
    # Profile update
    # -------------------------------------------------------------------------

    def update_user(
        self,
        user_id: str,
        data: UserUpdate,
        picture: StagedFile | None,
    ) -> User:
        """
        Partially update a user's profile.

        fullName and age keep their stored values when not provided. The
        profile picture is only replaced when a new file is supplied.

        Raises:
            MissingFieldsError: Nothing to update
            UserNotFoundError: No user has this ID
            ValidationFailedError: Invalid age
        """
        try:
            full_name = clean_text(data.full_name)
            if full_name is None and data.age is None and picture is None:
                raise MissingFieldsError()

            existing = self.get_user(user_id)

            changes: dict = {}
            if full_name is not None:
                changes["full_name"] = full_name
            if data.age is not None:
                if data.age < 0:
                    raise ValidationFailedError("age must not be negative", {"age": data.age})
                changes["age"] = data.age

            stored: ImageRef | None = None
            if picture is not None:
                stored = self.assets.store_staged(picture, USERS_FOLDER)
                changes["profile_picture"] = stored.to_row()

            changes["updated_at"] = utc_now_iso()

            try:
                updated = self.users.update(user_id, changes)
            except Exception:
                self.assets.discard_quietly(stored)
                raise

            if updated is None:
                self.assets.discard_quietly(stored)
                raise UserNotFoundError(user_ref=user_id)

            if stored is not None and existing.profile_picture is not None:
                self.assets.destroy(existing.profile_picture.public_id)

            logger.info(f"Updated user: {user_id}")
            return User.model_validate(updated)

        finally:
            if picture is not None:
                picture.discard()

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def login(self, email: str, password: str) -> tuple[User, str]:
        """
        Check credentials, mark the account logged in and issue a token.

        Returns:
            (user, token)

        Raises:
            ValidationFailedError: Missing email or password
            UserNotFoundError: No account with this email
            IncorrectPasswordError: Password doesn't match
        """
        if not email or not email.strip() or not password:
            raise ValidationFailedError("email and password are required")

        row = self.users.fetch_one("email", normalize_email(email))
        if not row:
            raise UserNotFoundError()

        user = User.model_validate(row)
        if not self.hasher.verify(password, user.password):
            logger.warning(f"Incorrect password for user: {user.id}")
            raise IncorrectPasswordError()

        if not user.is_logged_in:
            updated = self.users.update(user.id, {"is_logged_in": True, "updated_at": utc_now_iso()})
            if updated is None:
                raise UserNotFoundError(user_ref=user.id)
            user = User.model_validate(updated)

        token = self.tokens.issue(user.id, user.is_logged_in, user.session_version)
        logger.info(f"User logged in: {user.id} (session {user.session_version})")
        return user, token

    def logout(self, user_id: str) -> User:
        """
        Clear the login flag and bump the session version.

        Every token issued before this call stops passing the auth gate.

        Raises:
            UserNotFoundError: No user has this ID
        """
        user = self.get_user(user_id)
        updated = self.users.update(
            user.id,
            {
                "is_logged_in": False,
                "session_version": user.session_version + 1,
                "updated_at": utc_now_iso(),
            },
        )
        if updated is None:
            raise UserNotFoundError(user_ref=user_id)

        logger.info(f"User logged out: {user_id}")
        return User.model_validate(updated)
