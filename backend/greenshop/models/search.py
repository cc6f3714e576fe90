"""
Pydantic Search Models

Documents pushed to the search index and query criteria sent to it.
"""
from typing import Optional
from pydantic import BaseModel


class IndexDocument(BaseModel):
    """
    Normalized product document stored in the search index.

    Also the shape of a trending product: provider hits are parsed back into
    this model, dropping provider metadata such as _highlightResult.
    """
    objectID: str
    name: Optional[str] = None
    image: Optional[str] = None
    nutriscore_grade: Optional[str] = None
    environmental_grade: Optional[str] = None
    environmental_score: Optional[float] = None
    price: Optional[float] = None
    category: Optional[str] = None
    popularity: int = 0

    model_config = {
        "extra": "ignore",
        "coerce_numbers_to_str": True,
    }


TrendingProduct = IndexDocument


class SearchCriteria(BaseModel):
    """Filtered/sorted search request."""
    query: str = ""
    filters: Optional[str] = None
    sort_by: Optional[str] = None
    descending: bool = True
    limit: int = 8
