from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ReviewCreateCommand:
    product_id: int
    user_id: int
    rating: Optional[int]
    comment: str

    @staticmethod
    def from_raw(product_id: int, user_id: int, payload: Dict[str, Any]):
        data = dict(payload or {})
        raw_rating = data.get("rating")
        rating = raw_rating if isinstance(raw_rating, int) and not isinstance(raw_rating, bool) else None
        return ReviewCreateCommand(
            product_id=int(product_id),
            user_id=int(user_id),
            rating=rating,
            comment=str(data.get("comment") or "").strip(),
        )

    def validation_errors(self) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        if self.rating is None or not 1 <= self.rating <= 5:
            errors["rating"] = "Rating must be an integer between 1 and 5"
        if not self.comment:
            errors["comment"] = "Comment must not be blank"
        return errors
