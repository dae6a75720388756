# =============================================================================
# app/routers/users.py - User Account Endpoints
# =============================================================================
# Registration, login/logout, lookup and profile update.
# Responses never include the password hash.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Path, status

from app.auth import TokenClaims, authenticate
from app.dependencies import UserServiceDep
from app.uploads import staged_image
from core.models import LoginRequest, UserCreate, UserUpdate
from core.services.staging import StagedFile

router = APIRouter()

profile_picture = staged_image("profilePicture", "Profile picture (image/*, size-capped by MAX_UPLOAD_SIZE_MB)")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    service: UserServiceDep,
    full_name: Annotated[str, Form(alias="fullName", examples=["Ada Lovelace"])],
    email: Annotated[str, Form(examples=["ada@example.com"])],
    password: Annotated[str, Form()],
    age: Annotated[int, Form(examples=[36])],
    phone_number: Annotated[str, Form(alias="phoneNumber", examples=["+2348012345678"])],
    picture: StagedFile | None = Depends(profile_picture),
):
    """
    Register a new user.

    Emails are compared case-insensitively; email and phone number must
    both be unused. The profile picture is uploaded before the account
    is stored.
    """
    user = service.register(
        UserCreate(
            full_name=full_name,
            email=email,
            password=password,
            age=age,
            phone_number=phone_number,
        ),
        picture,
    )
    return {
        "message": "Created successfully",
        "data": user.to_response(),
    }


@router.post("/login")
async def login(service: UserServiceDep, credentials: LoginRequest):
    """
    Log in with email and password.

    Returns the user and a bearer token for protected routes.
    Errors: 400 (wrong password), 404 (unknown email).
    """
    user, token = service.login(credentials.email, credentials.password)
    return {
        "message": "Login successful",
        "data": user.to_response(),
        "token": token,
    }


@router.post("/logout")
async def logout(
    service: UserServiceDep,
    claims: TokenClaims = Depends(authenticate),
):
    """
    Log out.

    Invalidates every token issued to this account so far.
    """
    service.logout(claims.user_id)
    return {"message": "Logout successful"}


@router.get("/get-one/{user_id}")
async def get_user(
    service: UserServiceDep,
    user_id: Annotated[str, Path(description="User ID")],
):
    """Get one user by ID."""
    user = service.get_user(user_id)
    return {
        "message": "User below",
        "data": user.to_response(),
    }


@router.put("/update/{user_id}")
async def update_user(
    service: UserServiceDep,
    user_id: Annotated[str, Path(description="User ID")],
    full_name: Annotated[str | None, Form(alias="fullName")] = None,
    age: Annotated[int | None, Form()] = None,
    claims: TokenClaims = Depends(authenticate),
    picture: StagedFile | None = Depends(profile_picture),
):
    """
    Update a user's name, age or profile picture.

    Omitted fields keep their current values; the profile picture is only
    replaced when a new file is sent.
    """
    user = service.update_user(
        user_id,
        UserUpdate(full_name=full_name, age=age),
        picture,
    )
    return {
        "message": "User updated successfully",
        "data": user.to_response(),
    }
