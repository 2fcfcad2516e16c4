"""Handlers for the app's root, ``/``."""

from fastapi import APIRouter
from safir.metadata import Metadata, get_metadata

router = APIRouter()

__all__ = ["get_index", "router"]


@router.get(
    "/",
    description=(
        "Return metadata about the running application. Can also be used as"
        " a health check."
    ),
    response_model=Metadata,
    response_model_exclude_none=True,
    summary="Application metadata",
    tags=["internal"],
)
async def get_index() -> Metadata:
    """GET ``/`` (the app's internal root).

    By convention, this endpoint returns only the application's metadata.
    """
    return get_metadata(
        package_name="adstrategy", application_name="adstrategy"
    )
