"""GreenShop backend: eco product catalog, purchase history and trending recommendations."""

__version__ = "0.1.0"
