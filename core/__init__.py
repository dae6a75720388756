# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the entity workflows:
# - models/: Pydantic schemas for users and products
# - services/: product/user workflows, remote image storage, staged files
#
# Routers stay thin; everything that decides an outcome lives here.
# =============================================================================
