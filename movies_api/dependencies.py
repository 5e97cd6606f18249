from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from movies_api.db.mongo import get_mongo_db
from movies_api.services.movies_service import MoviesService
from movies_api.services.actors_service import ActorsService


async def get_db() -> AsyncIOMotorDatabase:
    # единая точка доступа к БД через singleton-клиент
    return await get_mongo_db()


async def get_movies_service(db=Depends(get_db)) -> MoviesService:
    return MoviesService(db)


async def get_actors_service(db=Depends(get_db)) -> ActorsService:
    return ActorsService(db)
