"""Album API endpoints."""
import time
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.db import get_db
from ..core.logging import get_logger
from ..core.metrics import http_request_duration_seconds, http_requests_total
from ..metrics import album_search_duration_seconds, album_search_queries_total, album_search_results_total
from ..services.album_service import ALBUM_DEFAULT_SORT, AlbumData, AlbumService
from ..services.pagination import PageRequest
from .params import PageParams, PageResponse, blank_to_none, not_blank

logger = get_logger(__name__)

router = APIRouter(prefix="/albums", tags=["album"])


class ArtistSummary(BaseModel):
    """Artist reference embedded in album responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class GenreSummary(BaseModel):
    """Genre reference embedded in album responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class AlbumRequest(BaseModel):
    """Album create/update request.

    Updates replace every scalar field. ``genre_ids`` omitted keeps the
    current genres; an explicit list, even empty, replaces them.
    """
    title: str = Field(..., max_length=255, description="Album title, unique ignoring case")
    release_date: Optional[date] = Field(None, description="Release date (YYYY-MM-DD)")
    artist_id: int = Field(..., gt=0, description="ID of the album's artist")
    genre_ids: Optional[List[int]] = Field(None, description="IDs of the album's genres")
    cover_image_url: Optional[str] = Field(None, max_length=500, description="Cover image URL")
    track_count: Optional[int] = Field(None, ge=1, description="Number of tracks")
    catalog_number: Optional[str] = Field(None, max_length=100, description="Catalog number, unique when set")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        return not_blank(value)

    @field_validator("cover_image_url", "catalog_number")
    @classmethod
    def optional_text_blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)

    @field_validator("genre_ids")
    @classmethod
    def genre_ids_positive(cls, value: Optional[List[int]]) -> Optional[List[int]]:
        if value is not None and any(genre_id <= 0 for genre_id in value):
            raise ValueError("genre IDs must be positive numbers")
        return value


class AlbumResponse(BaseModel):
    """Album response model."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str = Field(..., description="Album title")
    release_date: Optional[date] = Field(None, description="Release date")
    release_year: Optional[int] = Field(None, description="Year derived from the release date")
    cover_image_url: Optional[str] = None
    track_count: Optional[int] = None
    catalog_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    artist: ArtistSummary
    genres: List[GenreSummary] = Field(default_factory=list)

    @field_validator("genres")
    @classmethod
    def genres_by_name(cls, value: List[GenreSummary]) -> List[GenreSummary]:
        return sorted(value, key=lambda genre: genre.name.casefold())


def _album_data(request: AlbumRequest) -> AlbumData:
    return AlbumData(
        title=request.title,
        artist_id=request.artist_id,
        release_date=request.release_date,
        cover_image_url=request.cover_image_url,
        track_count=request.track_count,
        catalog_number=request.catalog_number,
        genre_ids=request.genre_ids,
    )


@router.post("", response_model=AlbumResponse, status_code=status.HTTP_201_CREATED)
async def create_album(
    request: AlbumRequest,
    db: AsyncSession = Depends(get_db)
) -> AlbumResponse:
    """Create a new album for an existing artist."""
    logger.info("creating_album", album_title=request.title, artist_id=request.artist_id)

    service = AlbumService(db)
    album = await service.create_album(_album_data(request))
    return AlbumResponse.model_validate(album)


@router.get("", response_model=PageResponse[AlbumResponse])
async def list_albums(
    params: PageParams = Depends(),
    db: AsyncSession = Depends(get_db)
) -> PageResponse[AlbumResponse]:
    """List albums."""
    page_request = PageRequest.from_params(params.page, params.size, params.sort, ALBUM_DEFAULT_SORT)

    service = AlbumService(db)
    page = await service.list_albums(page_request)
    return PageResponse[AlbumResponse].from_page(page, AlbumResponse)


@router.get("/search", response_model=PageResponse[AlbumResponse])
async def search_albums(
    q: Optional[str] = Query(None, max_length=255, description="Matches album title or artist name"),
    title: Optional[str] = Query(None, max_length=255, description="Matches album title"),
    start_year: Optional[int] = Query(None, ge=1, le=9999, description="Earliest release year (inclusive)"),
    end_year: Optional[int] = Query(None, ge=1, le=9999, description="Latest release year (inclusive)"),
    genre_id: Optional[int] = Query(None, gt=0, description="Only albums in this genre"),
    params: PageParams = Depends(),
    db: AsyncSession = Depends(get_db)
) -> PageResponse[AlbumResponse]:
    """
    Search albums by any combination of criteria.

    All criteria are optional and combined with AND; with none given every
    album is returned.
    """
    start_time = time.time()

    logger.info(
        "album_search_request",
        q=q,
        title=title,
        start_year=start_year,
        end_year=end_year,
        genre_id=genre_id,
    )

    try:
        page_request = PageRequest.from_params(params.page, params.size, params.sort, ALBUM_DEFAULT_SORT)

        service = AlbumService(db)
        page = await service.search(
            page_request,
            q=q,
            title=title,
            start_year=start_year,
            end_year=end_year,
            genre_id=genre_id,
        )
        response = PageResponse[AlbumResponse].from_page(page, AlbumResponse)

        # Record metrics
        duration = time.time() - start_time
        http_request_duration_seconds.labels(method="GET", endpoint="/albums/search").observe(duration)
        http_requests_total.labels(method="GET", endpoint="/albums/search", status="success").inc()
        album_search_duration_seconds.observe(duration)
        album_search_results_total.inc(len(response.content))
        for name, value in (("q", q), ("title", title), ("year", start_year or end_year), ("genre", genre_id)):
            if value:
                album_search_queries_total.labels(filter=name).inc()
        if not any((q, title, start_year, end_year, genre_id)):
            album_search_queries_total.labels(filter="none").inc()

        return response

    except Exception:
        duration = time.time() - start_time
        http_request_duration_seconds.labels(method="GET", endpoint="/albums/search").observe(duration)
        http_requests_total.labels(method="GET", endpoint="/albums/search", status="error").inc()
        raise


@router.get("/{album_id}", response_model=AlbumResponse)
async def get_album(
    album_id: int,
    db: AsyncSession = Depends(get_db)
) -> AlbumResponse:
    """Get an album by ID."""
    service = AlbumService(db)
    album = await service.get_album_by_id(album_id)
    return AlbumResponse.model_validate(album)


@router.put("/{album_id}", response_model=AlbumResponse)
async def update_album(
    album_id: int,
    request: AlbumRequest,
    db: AsyncSession = Depends(get_db)
) -> AlbumResponse:
    """Replace an album's fields; genres are replaced only when ``genre_ids`` is sent."""
    logger.info("updating_album", album_id=album_id)

    service = AlbumService(db)
    album = await service.update_album(album_id, _album_data(request))
    return AlbumResponse.model_validate(album)


@router.delete("/{album_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_album(
    album_id: int,
    db: AsyncSession = Depends(get_db)
) -> Response:
    """Delete an album."""
    logger.info("deleting_album", album_id=album_id)

    service = AlbumService(db)
    await service.delete_album(album_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{album_id}/genres/{genre_id}", response_model=AlbumResponse)
async def add_album_genre(
    album_id: int,
    genre_id: int,
    db: AsyncSession = Depends(get_db)
) -> AlbumResponse:
    """Link a genre to an album."""
    service = AlbumService(db)
    album = await service.add_genre(album_id, genre_id)
    return AlbumResponse.model_validate(album)


@router.delete("/{album_id}/genres/{genre_id}", response_model=AlbumResponse)
async def remove_album_genre(
    album_id: int,
    genre_id: int,
    db: AsyncSession = Depends(get_db)
) -> AlbumResponse:
    """Unlink a genre from an album."""
    service = AlbumService(db)
    album = await service.remove_genre(album_id, genre_id)
    return AlbumResponse.model_validate(album)
