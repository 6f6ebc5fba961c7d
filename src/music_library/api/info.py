"""API information and administrative endpoints."""
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.db import get_db
from ..core.exceptions import BadRequestError
from ..core.logging import get_logger
from ..core.settings import app_settings
from ..services.reset_service import DatabaseResetService

logger = get_logger(__name__)

router = APIRouter(tags=["info"])


class EndpointInfo(BaseModel):
    """One documented endpoint."""
    method: str
    path: str
    description: str
    response_code: str


class EndpointCategory(BaseModel):
    """A group of related endpoints."""
    category: str
    description: str
    operations: List[EndpointInfo]


class ApiInfoResponse(BaseModel):
    """API welcome and information payload."""
    title: str
    description: str
    version: str
    timestamp: datetime
    base_url: str
    documentation: dict
    endpoints: List[EndpointCategory]
    features: List[str]


class DatabaseResetResponse(BaseModel):
    """Database reset result."""
    message: str


RESET_WARNING = (
    "WARNING: This will delete ALL data from the database (artists, albums, genres). "
    "This action CANNOT be undone! To confirm, pass the query parameter: ?confirm=true"
)

FEATURES = [
    "RESTful API design with standard HTTP methods",
    "CRUD operations for artists, albums and genres",
    "Pagination and sorting on all list endpoints (page, size, sort parameters)",
    "Relationship queries (albums by artist, albums by genre)",
    "Album search by text, title, release year range and genre",
    "Album-genre linking kept consistent on both sides",
    "Input validation with field-level error messages",
    "Uniform JSON error responses",
    "Automatic timestamp tracking (created_at, updated_at)",
    "Database reset for development and testing",
]


def _endpoint_catalogue(prefix: str):
    def op(method: str, path: str, description: str, code: str) -> EndpointInfo:
        return EndpointInfo(method=method, path=prefix + path, description=description, response_code=code)

    return [
        EndpointCategory(
            category="Artists",
            description="Manage music artists in the library",
            operations=[
                op("POST", "/artists", "Create a new artist", "201"),
                op("GET", "/artists", "Get all artists (paginated)", "200"),
                op("GET", "/artists/{id}", "Get artist by ID", "200"),
                op("PUT", "/artists/{id}", "Update an artist", "200"),
                op("DELETE", "/artists/{id}", "Delete an artist and their albums", "204"),
                op("GET", "/artists/{id}/albums", "Get all albums by artist", "200"),
            ],
        ),
        EndpointCategory(
            category="Albums",
            description="Manage music albums in the library",
            operations=[
                op("POST", "/albums", "Create a new album", "201"),
                op("GET", "/albums", "Get all albums (paginated)", "200"),
                op("GET", "/albums/search", "Search albums (paginated)", "200"),
                op("GET", "/albums/{id}", "Get album by ID", "200"),
                op("PUT", "/albums/{id}", "Update an album", "200"),
                op("DELETE", "/albums/{id}", "Delete an album", "204"),
                op("POST", "/albums/{id}/genres/{genre_id}", "Add a genre to an album", "200"),
                op("DELETE", "/albums/{id}/genres/{genre_id}", "Remove a genre from an album", "200"),
            ],
        ),
        EndpointCategory(
            category="Genres",
            description="Manage music genres in the library",
            operations=[
                op("POST", "/genres", "Create a new genre", "201"),
                op("GET", "/genres", "Get all genres (paginated)", "200"),
                op("GET", "/genres/{id}", "Get genre by ID", "200"),
                op("PUT", "/genres/{id}", "Update a genre", "200"),
                op("DELETE", "/genres/{id}", "Delete a genre", "204"),
                op("GET", "/genres/{id}/albums", "Get all albums by genre", "200"),
                op("POST", "/genres/{id}/albums/{album_id}", "Link an album to a genre", "200"),
                op("DELETE", "/genres/{id}/albums/{album_id}", "Unlink an album from a genre", "200"),
            ],
        ),
        EndpointCategory(
            category="Database Management",
            description="Administrative operations for database management",
            operations=[
                op("DELETE", "/reset?confirm=true", "Reset database (requires confirmation)", "200"),
            ],
        ),
    ]


@router.get("", response_model=ApiInfoResponse)
async def get_api_info() -> ApiInfoResponse:
    """API welcome and information."""
    prefix = app_settings.api_prefix
    return ApiInfoResponse(
        title=app_settings.app_name,
        description=(
            "RESTful API for managing a music library with artists, albums and genres: "
            "CRUD operations, pagination, relationship queries and album search."
        ),
        version=app_settings.app_version,
        timestamp=datetime.now(timezone.utc),
        base_url=prefix,
        documentation={
            "swagger-ui": "/docs",
            "redoc": "/redoc",
            "openapi-json": "/openapi.json",
        },
        endpoints=_endpoint_catalogue(prefix),
        features=FEATURES,
    )


@router.delete("/reset", response_model=DatabaseResetResponse)
async def reset_database(
    confirm: bool = Query(False, description="Must be true to execute the reset"),
    db: AsyncSession = Depends(get_db)
) -> DatabaseResetResponse:
    """Delete every artist, album and genre and restart ids at 1."""
    if not confirm:
        logger.warning("database_reset_not_confirmed")
        raise BadRequestError(RESET_WARNING, details={"confirm": confirm})

    service = DatabaseResetService(db)
    await service.reset()
    return DatabaseResetResponse(
        message="Database reset successfully. All data has been deleted and id sequences restart at 1."
    )
