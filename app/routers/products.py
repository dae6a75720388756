# =============================================================================
# app/routers/products.py - Product CRUD Endpoints
# =============================================================================
# Thin HTTP layer over ProductService. Mutations require authentication;
# reads are public. Every response uses the {message, data?} envelope.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Path, status

from app.auth import TokenClaims, authenticate
from app.dependencies import ProductServiceDep
from app.uploads import staged_image
from core.models import ProductCreate, ProductUpdate
from core.services.staging import StagedFile

router = APIRouter()

product_image = staged_image("productImage", "Product image (image/*, size-capped by MAX_UPLOAD_SIZE_MB)")


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_product(
    service: ProductServiceDep,
    product_name: Annotated[str, Form(alias="productName", examples=["Chicken Burger"])],
    price: Annotated[float, Form(examples=[12.99], allow_inf_nan=False)],
    description: Annotated[str, Form(examples=["Juicy grilled chicken burger with fries"])],
    user_id: Annotated[str | None, Form(alias="userId", description="Owning user (defaults to caller)")] = None,
    claims: TokenClaims = Depends(authenticate),
    image: StagedFile | None = Depends(product_image),
):
    """
    Create a product.

    Uploads the product image to the media host, then stores the record.
    The owner is `userId` when given, otherwise the authenticated user.

    Errors: 400 (missing/invalid fields, duplicate name), 404 (unknown user),
    500 (store or media host failure).
    """
    product = service.create_product(
        ProductCreate(
            product_name=product_name,
            price=price,
            description=description,
            user_id=user_id,
        ),
        image,
        owner_id=claims.user_id,
    )

    return {
        "message": "Product created successfully",
        "data": product.to_response(),
    }


@router.get("/get-all")
async def get_all_products(service: ProductServiceDep):
    """List every product."""
    products = service.list_products()
    return {
        "message": "All products",
        "data": [p.to_response() for p in products],
    }


@router.get("/get-one/{product_id}")
async def get_product(
    service: ProductServiceDep,
    product_id: Annotated[str, Path(description="Product ID")],
):
    """Get one product by ID."""
    product = service.get_product(product_id)
    return {
        "message": "Product",
        "data": product.to_response(),
    }


@router.put("/update/{product_id}")
async def update_product(
    service: ProductServiceDep,
    product_id: Annotated[str, Path(description="Product ID")],
    product_name: Annotated[str | None, Form(alias="productName")] = None,
    price: Annotated[float | None, Form(allow_inf_nan=False)] = None,
    description: Annotated[str | None, Form()] = None,
    claims: TokenClaims = Depends(authenticate),
    image: StagedFile | None = Depends(product_image),
):
    """
    Update a product.

    Omitted fields keep their current values. Sending a new productImage
    replaces the stored image; otherwise the existing image is kept.
    """
    product = service.update_product(
        product_id,
        ProductUpdate(product_name=product_name, price=price, description=description),
        image,
    )
    return {
        "message": "Product updated successfully",
        "data": product.to_response(),
    }


@router.delete("/delete/{product_id}")
async def delete_product(
    service: ProductServiceDep,
    product_id: Annotated[str, Path(description="Product ID")],
    claims: TokenClaims = Depends(authenticate),
):
    """
    Delete a product.

    The record is removed first; its image is destroyed only once the
    record is gone.
    """
    service.delete_product(product_id)
    return {"message": "Product deleted successfully"}
