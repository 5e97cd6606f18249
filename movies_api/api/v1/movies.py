from http import HTTPStatus
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from movies_api.core.auth import require_token
from movies_api.dependencies import get_movies_service
from movies_api.services.movies_service import MoviesService
from movies_api.models.movies import (
    MovieItem, MovieListResponse, MovieWriteRequest, TopRatedResponse,
)
from movies_api.models.ratings import RatingListResponse
from movies_api.api.http_utils import handle_runtime_errors, not_found_if_none

router = APIRouter(prefix="/api/v1/movies", tags=["movies"])

MOVIE_NOT_FOUND = "movie_not_found"

ERRMAP = {
    MOVIE_NOT_FOUND: HTTPStatus.NOT_FOUND,
}


@router.get("",
            response_model=MovieListResponse,
            status_code=HTTPStatus.OK)
@handle_runtime_errors(ERRMAP)
async def list_movies(
    genre: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    svc: MoviesService = Depends(get_movies_service),
):
    # числа приходят строками: кривые значения молча заменяются дефолтами
    return await svc.list_movies(genre=genre, year=year,
                                 page=page, limit=limit)


# объявлен раньше /{movie_id}, иначе "top-rated" уйдёт в id
@router.get("/top-rated",
            response_model=TopRatedResponse,
            status_code=HTTPStatus.OK)
@handle_runtime_errors(ERRMAP)
async def top_rated_movies(
    genre: Optional[str] = Query(None),
    min_votes: Optional[str] = Query(None, alias="minVotes"),
    limit: Optional[str] = Query(None),
    svc: MoviesService = Depends(get_movies_service),
):
    return await svc.top_rated(genre=genre, min_votes=min_votes,
                               limit=limit)


@router.get("/{movie_id}",
            response_model=MovieItem,
            status_code=HTTPStatus.OK)
@handle_runtime_errors(ERRMAP)
async def get_movie(
    movie_id: str,
    svc: MoviesService = Depends(get_movies_service),
):
    return not_found_if_none(await svc.get_movie(movie_id),
                             detail=MOVIE_NOT_FOUND)


@router.get("/{movie_id}/ratings",
            response_model=RatingListResponse,
            status_code=HTTPStatus.OK)
@handle_runtime_errors(ERRMAP)
async def list_movie_ratings(
    movie_id: str,
    svc: MoviesService = Depends(get_movies_service),
):
    return not_found_if_none(await svc.movie_ratings(movie_id),
                             detail=MOVIE_NOT_FOUND)


@router.post("",
             response_model=MovieItem,
             status_code=HTTPStatus.CREATED)
@handle_runtime_errors(ERRMAP)
async def create_movie(
    body: MovieWriteRequest,
    _claims: dict = Depends(require_token),
    svc: MoviesService = Depends(get_movies_service),
):
    return await svc.create_movie(body)


@router.put("/{movie_id}",
            response_model=MovieItem,
            status_code=HTTPStatus.OK)
@handle_runtime_errors(ERRMAP)
async def update_movie(
    movie_id: str,
    body: MovieWriteRequest,
    _claims: dict = Depends(require_token),
    svc: MoviesService = Depends(get_movies_service),
):
    return not_found_if_none(await svc.update_movie(movie_id, body),
                             detail=MOVIE_NOT_FOUND)


@router.delete("/{movie_id}",
               status_code=HTTPStatus.NO_CONTENT)
@handle_runtime_errors(ERRMAP)
async def delete_movie(
    movie_id: str,
    _claims: dict = Depends(require_token),
    svc: MoviesService = Depends(get_movies_service),
) -> Response:
    if not await svc.delete_movie(movie_id):
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND,
                            detail=MOVIE_NOT_FOUND)
    return Response(status_code=HTTPStatus.NO_CONTENT)
