"""Genre API endpoints."""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.db import get_db
from ..core.logging import get_logger
from ..services.genre_service import GENRE_DEFAULT_SORT, GenreService
from ..services.pagination import PageRequest
from .albums import AlbumResponse
from .params import PageParams, PageResponse, blank_to_none, not_blank

logger = get_logger(__name__)

router = APIRouter(prefix="/genres", tags=["genre"])


class GenreRequest(BaseModel):
    """Genre create/update request; updates replace every field."""
    name: str = Field(..., max_length=100, description="Genre name, unique ignoring case")
    description: Optional[str] = Field(None, max_length=1000, description="Genre description")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return not_blank(value)

    @field_validator("description")
    @classmethod
    def description_blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)


class GenreResponse(BaseModel):
    """Genre response model."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str = Field(..., description="Genre name")
    description: Optional[str] = Field(None, description="Genre description")
    created_at: datetime
    updated_at: datetime


class AlbumSummary(BaseModel):
    """Album reference embedded in genre link responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str


class GenreAlbumsResponse(GenreResponse):
    """Genre together with the albums linked to it."""
    albums: List[AlbumSummary] = Field(default_factory=list)

    @computed_field(description="Number of albums linked to the genre")
    @property
    def album_count(self) -> int:
        return len(self.albums)


@router.post("", response_model=GenreResponse, status_code=status.HTTP_201_CREATED)
async def create_genre(
    request: GenreRequest,
    db: AsyncSession = Depends(get_db)
) -> GenreResponse:
    """Create a new genre."""
    logger.info("creating_genre", genre_name=request.name)

    service = GenreService(db)
    genre = await service.create_genre(name=request.name, description=request.description)
    return GenreResponse.model_validate(genre)


@router.get("", response_model=PageResponse[GenreResponse])
async def list_genres(
    params: PageParams = Depends(),
    db: AsyncSession = Depends(get_db)
) -> PageResponse[GenreResponse]:
    """List genres."""
    page_request = PageRequest.from_params(params.page, params.size, params.sort, GENRE_DEFAULT_SORT)

    service = GenreService(db)
    page = await service.list_genres(page_request)
    return PageResponse[GenreResponse].from_page(page, GenreResponse)


@router.get("/{genre_id}", response_model=GenreResponse)
async def get_genre(
    genre_id: int,
    db: AsyncSession = Depends(get_db)
) -> GenreResponse:
    """Get a genre by ID."""
    service = GenreService(db)
    genre = await service.get_genre_by_id(genre_id)
    return GenreResponse.model_validate(genre)


@router.put("/{genre_id}", response_model=GenreResponse)
async def update_genre(
    genre_id: int,
    request: GenreRequest,
    db: AsyncSession = Depends(get_db)
) -> GenreResponse:
    """Replace a genre's fields."""
    logger.info("updating_genre", genre_id=genre_id)

    service = GenreService(db)
    genre = await service.update_genre(genre_id, name=request.name, description=request.description)
    return GenreResponse.model_validate(genre)


@router.delete("/{genre_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_genre(
    genre_id: int,
    db: AsyncSession = Depends(get_db)
) -> Response:
    """Delete a genre. Its albums are kept."""
    logger.info("deleting_genre", genre_id=genre_id)

    service = GenreService(db)
    await service.delete_genre(genre_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{genre_id}/albums", response_model=List[AlbumResponse])
async def get_genre_albums(
    genre_id: int,
    db: AsyncSession = Depends(get_db)
) -> List[AlbumResponse]:
    """Get all albums in a genre."""
    service = GenreService(db)
    albums = await service.get_albums_for_genre(genre_id)
    return [AlbumResponse.model_validate(album) for album in albums]


@router.post("/{genre_id}/albums/{album_id}", response_model=GenreAlbumsResponse)
async def link_album(
    genre_id: int,
    album_id: int,
    db: AsyncSession = Depends(get_db)
) -> GenreAlbumsResponse:
    """Link an album to a genre."""
    service = GenreService(db)
    genre = await service.add_album(genre_id, album_id)
    return GenreAlbumsResponse.model_validate(genre)


@router.delete("/{genre_id}/albums/{album_id}", response_model=GenreAlbumsResponse)
async def unlink_album(
    genre_id: int,
    album_id: int,
    db: AsyncSession = Depends(get_db)
) -> GenreAlbumsResponse:
    """Unlink an album from a genre."""
    service = GenreService(db)
    genre = await service.remove_album(genre_id, album_id)
    return GenreAlbumsResponse.model_validate(genre)
