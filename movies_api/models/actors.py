from typing import List, Optional

from movies_api.models.base import CamelModel


class ActorItem(CamelModel):
    actor_id: str
    name: str
    birth_year: Optional[int] = None


class ActorListResponse(CamelModel):
    items: List[ActorItem]
    total: int
    page: int
    limit: int
    pages: int
