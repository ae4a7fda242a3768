from dataclasses import dataclass, asdict, field
from typing import Any, Optional

FACTORS = (
    "relevance",
    "quality",
    "price",
    "brand",
    "recency",
    "discount",
    "completeness",
    "keyword",
)


@dataclass(frozen=True)
class ProductListing:
    product_id: str
    title: str
    price: Any = ""
    original_price: Any = None
    rating: Any = None
    reviews: Any = None
    brand: str = ""
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, item: dict) -> "ProductListing":
        """Build a listing from a raw shopping result record."""
        original = item.get("old_price")
        if original in (None, ""):
            original = item.get("original_price")
        if original in (None, ""):
            original = item.get("extracted_price")
        return cls(
            product_id=str(item.get("product_id") or ""),
            title=item.get("title") or "",
            price=item.get("price") or "",
            original_price=original,
            rating=item.get("rating"),
            reviews=item.get("reviews"),
            brand=item.get("brand") or "",
            raw=dict(item),
        )

    def to_dict(self) -> dict:
        if self.raw:
            return dict(self.raw)
        data = asdict(self)
        data.pop("raw")
        return data


@dataclass(frozen=True)
class StructuredProduct:
    product_id: str
    clean_title: str
    brand: str
    model: str
    specs: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CategoryProfile:
    key: str
    weights: dict[str, float] = field(default_factory=dict)
    brands: dict[str, int] = field(default_factory=dict)
    positive_keywords: dict[str, int] = field(default_factory=dict)
    negative_keywords: dict[str, int] = field(default_factory=dict)

    def weight(self, factor: str) -> float:
        return float(self.weights.get(factor, 1.0))

    @classmethod
    def neutral(cls, key: str = "default") -> "CategoryProfile":
        return cls(key=key, weights={name: 1.0 for name in FACTORS})

    @classmethod
    def from_dict(cls, key: str, data: dict) -> "CategoryProfile":
        weights = {name: 1.0 for name in FACTORS}
        weights.update(
            {k: float(v) for k, v in (data.get("weights") or {}).items()}
        )
        return cls(
            key=key,
            weights=weights,
            brands={
                str(k).lower(): int(v) for k, v in (data.get("brands") or {}).items()
            },
            positive_keywords={
                str(k).lower(): int(v)
                for k, v in (data.get("positiveKeywords") or {}).items()
            },
            negative_keywords={
                str(k).lower(): int(v)
                for k, v in (data.get("negativeKeywords") or {}).items()
            },
        )


@dataclass
class ScoredProduct:
    listing: ProductListing
    numeric_price: float
    extracted_numeric_price: float
    rating: float
    review_count: int
    title: str
    brand: str
    specs: list[str] = field(default_factory=list)
    score: float = 0.0
    pros: list[str] = field(default_factory=list)
    cons: list[str] = field(default_factory=list)

    @property
    def product_id(self) -> str:
        return self.listing.product_id


@dataclass
class ProductAnalysis:
    product_id: str
    pros: list[str]
    contras: list[str]
    is_recommended: bool = False

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "pros": list(self.pros),
            "contras": list(self.contras),
            "isRecommended": self.is_recommended,
        }


@dataclass
class AnalysisResult:
    productos_analisis: list[ProductAnalysis]
    recomendacion_final: str

    def to_dict(self) -> dict:
        return {
            "productos_analisis": [p.to_dict() for p in self.productos_analisis],
            "recomendacion_final": self.recomendacion_final,
        }


@dataclass
class SearchRequest:
    query: str
    user_id: str
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    country_code: str = "ar"
    language_code: str = "es"
    currency: str = "ARS"
    category: str = "default"
    brand_preference: str = ""
    feature_keyword: str = ""
    rating_filter: bool = False


@dataclass
class SearchResults:
    products: list[ProductListing]
    total_results: int = 0
