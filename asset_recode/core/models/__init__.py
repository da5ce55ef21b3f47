"""
Domain models — Pydantic types for asset-recode.

    from asset_recode.core.models import Asset, Receipt, TransformSpec
"""

from asset_recode.core.models.action import Receipt
from asset_recode.core.models.asset import (
    EXTENSION_CATEGORIES,
    TRANSFORM_SPECS,
    Asset,
    Category,
    TransformSpec,
    spec_for,
)

__all__ = [
    # asset.py
    "Asset",
    "Category",
    "EXTENSION_CATEGORIES",
    # action.py
    "Receipt",
    "TRANSFORM_SPECS",
    "TransformSpec",
    "spec_for",
]
