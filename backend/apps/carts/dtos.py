from dataclasses import dataclass, field
from typing import List

from apps.catalog.dtos import GalleryImageDTO


@dataclass
class CartItemProductDTO:
    """Display snapshot of a product, read fresh with every cart read."""

    id: int
    title: str
    price: str
    discount: int
    thumbnail: str
    colors: List[str] = field(default_factory=list)
    sizes: List[str] = field(default_factory=list)
    gallery: List[GalleryImageDTO] = field(default_factory=list)


@dataclass
class CartItemDTO:
    id: int
    product_id: int
    quantity: int
    product: CartItemProductDTO


@dataclass
class CartDTO:
    id: int
    user_id: int
    items: List[CartItemDTO]
    total_quantity: int
