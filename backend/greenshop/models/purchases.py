"""
Pydantic Purchase Models

Request body for POST /api/purchase and the record shape returned by the
purchase history endpoints.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class PurchaseRequest(BaseModel):
    """Product being bought, as sent by the frontend."""
    product_code: str = Field(min_length=1)
    product_name: Optional[str] = None
    price: Optional[float] = None
    image_url: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "product_code": "3017620422003",
                "product_name": "Organic oat drink",
                "price": 2.49,
                "image_url": "https://images.openfoodfacts.org/images/products/301/762/042/2003/front_en.jpg"
            }
        }
    }


class PurchaseRecord(BaseModel):
    """
    One row of a user's purchase history.

    purchased_at is only included in the delete response; the history list
    returns the four product fields.
    """
    product_code: str
    product_name: Optional[str] = None
    price: Optional[float] = None
    image_url: Optional[str] = None
    purchased_at: Optional[datetime] = None
