"""Service layer for the actors listing."""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from movies_api.models.actors import ActorItem, ActorListResponse
from movies_api.services.query_params import Page, clean_text
from .repositories.actors_repo import ActorsRepo


class ActorsService:
    """Paginated, optionally name-filtered actor listing."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.repo = ActorsRepo(db)

    async def list_actors(
        self,
        name: Optional[str] = None,
        page: object = None,
        limit: object = None,
    ) -> ActorListResponse:
        paging = Page.from_raw(page, limit)
        query = self.repo.build_filter(clean_text(name))
        try:
            docs = await self.repo.list(
                query,
                skip=paging.skip,
                limit=paging.limit,
            )
            total = await self.repo.count(query)
        except PyMongoError as error:
            raise RuntimeError(f'mongo_actor_list_error: {error}') from error

        items = [
            ActorItem(
                actor_id=str(doc['_id']),
                name=doc['name'],
                birth_year=doc.get('birth_year'),
            )
            for doc in docs
        ]
        return ActorListResponse(
            items=items,
            total=total,
            page=paging.page,
            limit=paging.limit,
            pages=paging.pages(total),
        )
