"""Router for the item catalog endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, Response

from catalog.config import CatalogSettings, get_settings
from catalog.exceptions import MethodNotAllowed
from catalog.models.schemas import CatalogResponse, ErrorResponse
from catalog.services.catalog import CatalogBuilder
from catalog.services.storage import StorageService

router = APIRouter(prefix="/items", tags=["items"])


@router.get(
    "",
    response_model=CatalogResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def get_items(
    folderId: Optional[str] = None,
    settings: CatalogSettings = Depends(get_settings),
):
    """
    Build the catalog of items under the root folder.

    Each subfolder of the root becomes one item holding the fields of its
    metadata file and the URLs of its images (and videos, when enabled).
    The ``folderId`` query parameter overrides the configured root folder.
    """
    request_settings = settings.for_request(folderId)
    storage_service = StorageService(request_settings)
    builder = CatalogBuilder(storage_service, request_settings)
    return CatalogResponse(items=builder.build_items(request_settings.root_folder_id))


@router.options("")
def preflight():
    """CORS preflight: empty body, headers are added by the app middleware."""
    return Response(status_code=200, media_type="application/json")


@router.api_route(
    "", methods=["POST", "PUT", "PATCH", "DELETE"], include_in_schema=False
)
def method_not_allowed():
    raise MethodNotAllowed()
