"""Artist API endpoints."""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.db import get_db
from ..core.logging import get_logger
from ..services.artist_service import ARTIST_DEFAULT_SORT, ArtistService
from ..services.pagination import PageRequest
from .albums import AlbumResponse
from .params import PageParams, PageResponse, blank_to_none, not_blank

logger = get_logger(__name__)

router = APIRouter(prefix="/artists", tags=["artist"])


class ArtistRequest(BaseModel):
    """Artist create/update request; updates replace every field."""
    name: str = Field(..., max_length=255, description="Artist name, unique ignoring case")
    bio: Optional[str] = Field(None, max_length=1000, description="Artist biography")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return not_blank(value)

    @field_validator("bio")
    @classmethod
    def bio_blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)


class ArtistResponse(BaseModel):
    """Artist response model."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str = Field(..., description="Artist name")
    bio: Optional[str] = Field(None, description="Artist biography")
    created_at: datetime
    updated_at: datetime


@router.post("", response_model=ArtistResponse, status_code=status.HTTP_201_CREATED)
async def create_artist(
    request: ArtistRequest,
    db: AsyncSession = Depends(get_db)
) -> ArtistResponse:
    """Create a new artist."""
    logger.info("creating_artist", artist_name=request.name)

    service = ArtistService(db)
    artist = await service.create_artist(name=request.name, bio=request.bio)
    return ArtistResponse.model_validate(artist)


@router.get("", response_model=PageResponse[ArtistResponse])
async def list_artists(
    params: PageParams = Depends(),
    db: AsyncSession = Depends(get_db)
) -> PageResponse[ArtistResponse]:
    """List artists, sorted by name by default."""
    page_request = PageRequest.from_params(params.page, params.size, params.sort, ARTIST_DEFAULT_SORT)

    service = ArtistService(db)
    page = await service.list_artists(page_request)
    return PageResponse[ArtistResponse].from_page(page, ArtistResponse)


@router.get("/{artist_id}", response_model=ArtistResponse)
async def get_artist(
    artist_id: int,
    db: AsyncSession = Depends(get_db)
) -> ArtistResponse:
    """Get an artist by ID."""
    service = ArtistService(db)
    artist = await service.get_artist_by_id(artist_id)
    return ArtistResponse.model_validate(artist)


@router.put("/{artist_id}", response_model=ArtistResponse)
async def update_artist(
    artist_id: int,
    request: ArtistRequest,
    db: AsyncSession = Depends(get_db)
) -> ArtistResponse:
    """Replace an artist's fields."""
    logger.info("updating_artist", artist_id=artist_id)

    service = ArtistService(db)
    artist = await service.update_artist(artist_id, name=request.name, bio=request.bio)
    return ArtistResponse.model_validate(artist)


@router.delete("/{artist_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_artist(
    artist_id: int,
    db: AsyncSession = Depends(get_db)
) -> Response:
    """Delete an artist and all of their albums."""
    logger.info("deleting_artist", artist_id=artist_id)

    service = ArtistService(db)
    await service.delete_artist(artist_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{artist_id}/albums", response_model=List[AlbumResponse])
async def get_artist_albums(
    artist_id: int,
    db: AsyncSession = Depends(get_db)
) -> List[AlbumResponse]:
    """Get all albums by an artist."""
    service = ArtistService(db)
    albums = await service.get_albums_for_artist(artist_id)
    return [AlbumResponse.model_validate(album) for album in albums]
