"""
Pydantic Product Models

Catalog entries as parsed from products.json (Open Food Facts export).
Every field is optional at the loader boundary; fields not listed here are
kept and passed through to API responses unchanged.
"""
from typing import Optional, List, Union
from pydantic import BaseModel


class EnvironmentalScoreData(BaseModel):
    """Environmental score block of a catalog entry."""
    grade: Optional[str] = None  # a..e, or "unknown"
    score: Optional[float] = None  # 0-100

    model_config = {
        "extra": "allow",
        "coerce_numbers_to_str": True,
    }


class Product(BaseModel):
    """
    Catalog product.

    Display rules live in catalog_service.is_displayable.
    """
    code: Optional[str] = None
    product_name: Optional[str] = None
    image_url: Optional[str] = None
    image_front_url: Optional[str] = None
    nutriscore_grade: Optional[str] = None
    environmental_score_data: Optional[EnvironmentalScoreData] = None
    price: Optional[float] = None
    category: Optional[str] = None
    categories: Optional[Union[str, List[str]]] = None

    model_config = {
        "extra": "allow",
        "coerce_numbers_to_str": True,
        "json_schema_extra": {
            "example": {
                "code": "3017620422003",
                "product_name": "Organic oat drink",
                "image_url": "https://images.openfoodfacts.org/images/products/301/762/042/2003/front_en.jpg",
                "nutriscore_grade": "a",
                "environmental_score_data": {"grade": "b", "score": 72},
                "price": 2.49,
                "categories": "Plant-based drinks"
            }
        }
    }

    @property
    def environmental_grade(self) -> Optional[str]:
        if self.environmental_score_data is None:
            return None
        return self.environmental_score_data.grade

    @property
    def environmental_score(self) -> Optional[float]:
        if self.environmental_score_data is None:
            return None
        return self.environmental_score_data.score

    @property
    def primary_image(self) -> Optional[str]:
        return self.image_url or self.image_front_url

    @property
    def primary_category(self) -> Optional[str]:
        """category, else the first entry of categories (list or comma separated)."""
        if self.category:
            return self.category
        if isinstance(self.categories, list):
            return self.categories[0] if self.categories else None
        if self.categories:
            return self.categories.split(",")[0].strip() or None
        return None
