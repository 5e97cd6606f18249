from http import HTTPStatus
from typing import Optional

from fastapi import APIRouter, Depends, Query

from movies_api.dependencies import get_actors_service
from movies_api.services.actors_service import ActorsService
from movies_api.models.actors import ActorListResponse

router = APIRouter(prefix="/api/v1/actors", tags=["actors"])


@router.get("",
            response_model=ActorListResponse,
            status_code=HTTPStatus.OK)
async def list_actors(
    name: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    svc: ActorsService = Depends(get_actors_service),
):
    return await svc.list_actors(name=name, page=page, limit=limit)
