"""Routes for authenticating users."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder

from ..dependencies.strategy import authenticated_user

router = APIRouter()

__all__ = ["get_login", "post_login", "router"]


@router.get(
    "/login",
    description=(
        "Authenticate the user from the identity header set by the web"
        " server and return the verified user."
    ),
    responses={401: {"description": "Authentication rejected"}},
    summary="Log in with integrated authentication",
    tags=["authentication"],
)
async def get_login(
    user: Annotated[Any, Depends(authenticated_user)],
) -> Any:
    return jsonable_encoder(user, by_alias=True, exclude_none=True)


@router.post(
    "/login",
    description=(
        "Authenticate the user with the username and password in the request"
        " body and return the verified user."
    ),
    responses={401: {"description": "Authentication rejected"}},
    summary="Log in with a password",
    tags=["authentication"],
)
async def post_login(
    user: Annotated[Any, Depends(authenticated_user)],
) -> Any:
    return jsonable_encoder(user, by_alias=True, exclude_none=True)
