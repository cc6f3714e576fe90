"""
Static Trending Fallback

Eight eco-friendly products shown when the search service returns too few
trending results (new index, no purchases yet, or Algolia unavailable).
"""
from typing import List

from ..models.search import TrendingProduct

IMAGE_BASE = "https://images.openfoodfacts.org/images/products"


FALLBACK_TRENDING: List[TrendingProduct] = [
    TrendingProduct(
        objectID="3017620422003",
        name="Organic Oat Drink",
        image=f"{IMAGE_BASE}/301/762/042/2003/front_en.jpg",
        nutriscore_grade="a",
        environmental_grade="a",
        environmental_score=88,
        price=2.49,
        category="Plant-based drinks",
        popularity=120,
    ),
    TrendingProduct(
        objectID="3229820129488",
        name="Organic Whole Grain Muesli",
        image=f"{IMAGE_BASE}/322/982/012/9488/front_en.jpg",
        nutriscore_grade="a",
        environmental_grade="a",
        environmental_score=85,
        price=3.99,
        category="Breakfast cereals",
        popularity=104,
    ),
    TrendingProduct(
        objectID="8410188012092",
        name="Extra Virgin Olive Oil",
        image=f"{IMAGE_BASE}/841/018/801/2092/front_en.jpg",
        nutriscore_grade="b",
        environmental_grade="a",
        environmental_score=83,
        price=7.49,
        category="Olive oils",
        popularity=97,
    ),
    TrendingProduct(
        objectID="3560070894222",
        name="Red Lentils",
        image=f"{IMAGE_BASE}/356/007/089/4222/front_en.jpg",
        nutriscore_grade="a",
        environmental_grade="a",
        environmental_score=91,
        price=1.89,
        category="Pulses",
        popularity=88,
    ),
    TrendingProduct(
        objectID="7613035974685",
        name="Wholewheat Penne",
        image=f"{IMAGE_BASE}/761/303/597/4685/front_en.jpg",
        nutriscore_grade="a",
        environmental_grade="b",
        environmental_score=79,
        price=1.29,
        category="Pasta",
        popularity=76,
    ),
    TrendingProduct(
        objectID="5449000214911",
        name="Sparkling Spring Water",
        image=f"{IMAGE_BASE}/544/900/021/4911/front_en.jpg",
        nutriscore_grade="a",
        environmental_grade="b",
        environmental_score=74,
        price=0.79,
        category="Waters",
        popularity=65,
    ),
    TrendingProduct(
        objectID="3270190207924",
        name="Organic Chickpeas",
        image=f"{IMAGE_BASE}/327/019/020/7924/front_en.jpg",
        nutriscore_grade="a",
        environmental_grade="a",
        environmental_score=87,
        price=1.59,
        category="Canned legumes",
        popularity=59,
    ),
    TrendingProduct(
        objectID="20724696",
        name="Rolled Oats",
        image=f"{IMAGE_BASE}/000/002/072/4696/front_en.jpg",
        nutriscore_grade="a",
        environmental_grade="a",
        environmental_score=90,
        price=1.19,
        category="Cereal flakes",
        popularity=51,
    ),
]
