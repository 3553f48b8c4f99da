"""Product models for the cart engine"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from enum import Enum

from .cart import Variant


class ProductCategory(str, Enum):
    PROTEIN = "protein"
    SNACKS = "snacks"
    SUPPLEMENTS = "supplements"
    BEVERAGES = "beverages"


class Product(BaseModel):
    """Product in the catalog"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    # Smallest currency unit
    price: int = Field(gt=0)
    currency: str = "INR"
    category: ProductCategory
    sku: str
    images: list[str] = []
    variants: list[Variant] = []
    in_stock: bool = True
    stock_quantity: int = Field(ge=0, default=100)

    @property
    def image(self) -> str:
        return self.images[0] if self.images else "/images/placeholder.jpg"


class ProductSearchResponse(BaseModel):
    """Response from product search"""
    products: list[Product]
    total: int
    limit: int
    offset: int
