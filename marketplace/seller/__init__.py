"""Seller dashboard package."""
from .service import SellerService

__all__ = ["SellerService"]
