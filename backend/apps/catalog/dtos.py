from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class CategoryDTO:
    id: int
    name: str


@dataclass
class GalleryImageDTO:
    thumbnail: str


@dataclass
class ProductSummaryDTO:
    id: int
    title: str
    price: str
    discount: int
    final_price: str
    thumbnail: str
    rating: str
    review_count: int
    category: Optional[CategoryDTO]


@dataclass
class ReviewDTO:
    id: int
    author: str
    rating: int
    comment: str
    date: Optional[str]


@dataclass
class RatingSummaryDTO:
    product_id: int
    rating: str
    review_count: int


@dataclass
class ProductDetailDTO(ProductSummaryDTO):
    description: str = ""
    colors: List[str] = field(default_factory=list)
    sizes: List[str] = field(default_factory=list)
    gallery: List[GalleryImageDTO] = field(default_factory=list)
    related: List[ProductSummaryDTO] = field(default_factory=list)
    reviews: List[ReviewDTO] = field(default_factory=list)
