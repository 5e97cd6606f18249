from datetime import datetime
from typing import List, Optional

from movies_api.models.base import CamelModel


class RatingItem(CamelModel):
    rating_id: str
    movie_id: str
    rating: float
    created_at: Optional[datetime] = None


class RatingListResponse(CamelModel):
    items: List[RatingItem]
    total: int
