"""Product catalog package."""
from .service import ProductCatalog

__all__ = ["ProductCatalog"]
