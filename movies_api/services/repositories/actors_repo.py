from __future__ import annotations

from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from movies_api.db.mongo import ACTORS
from movies_api.services.query_params import contains_regex


class ActorsRepo:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db[ACTORS]

    @staticmethod
    def build_filter(name: Optional[str]) -> Dict[str, Any]:
        return {"name": contains_regex(name)} if name else {}

    async def list(
            self,
            query: Dict[str, Any],
            skip: int,
            limit: int) -> List[Dict[str, Any]]:
        cur = (self.col.find(query)
               .sort([("name", 1), ("_id", 1)]).skip(skip).limit(limit))
        return [d async for d in cur]

    async def count(self, query: Dict[str, Any]) -> int:
        return await self.col.count_documents(query)
