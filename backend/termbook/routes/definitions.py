"""
Termbook Backend: Definitions Route Handlers
==============================================

What:  The public definitions API.
How:   Extracts query/path/body input, resolves the caller, delegates to
       DefinitionService and wraps the result in the response envelope.

    GET    /definitions?term=|categoryId=   anonymous
    GET    /definitions/{id}                anonymous
    POST   /definitions                     authenticated
    PUT    /definitions/{id}                authenticated
    DELETE /definitions/{id}                authenticated unless
                                            DELETE_REQUIRES_AUTH=false

Errors are raised as exceptions and rendered by the global handlers in
main.py, so handlers only build the success envelope.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from termbook.config import settings
from termbook.database import get_db_session
from termbook.exceptions import AuthenticationError
from termbook.models import User
from termbook.schemas.definition import (
    DefinitionDetailResponse,
    DefinitionListResponse,
    DefinitionPayload,
    ErrorResponse,
    ResponseEnvelope,
)
from termbook.security import get_current_user, get_optional_user
from termbook.services.definition_service import definition_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/definitions", tags=["Definitions"])


@router.get(
    "",
    response_model=DefinitionListResponse,
    response_model_exclude_none=True,
    responses={
        404: {"description": "No approved definition matched", "model": ErrorResponse},
        422: {"description": "Neither term nor categoryId given", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Search approved definitions",
)
async def list_definitions(
    term: Optional[str] = Query(
        default=None,
        description="Substring of the term to search for (percent-encoding allowed)",
    ),
    category_id: Optional[int] = Query(
        default=None,
        alias="categoryId",
        description="List every approved definition in this category",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> DefinitionListResponse:
    definitions = await definition_service.list_definitions(
        db=db, term=term, category_id=category_id
    )
    return DefinitionListResponse(
        code=200,
        status="Success",
        message="Definitions found",
        data=definitions,
    )


@router.get(
    "/{definition_id}",
    response_model=DefinitionDetailResponse,
    response_model_exclude_none=True,
    responses={
        404: {"description": "Definition not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single definition",
)
async def get_definition(
    definition_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> DefinitionDetailResponse:
    definition = await definition_service.get_definition(db=db, definition_id=definition_id)
    return DefinitionDetailResponse(
        code=200,
        status="Success",
        message="Definition found",
        data=definition,
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ResponseEnvelope,
    response_model_exclude_none=True,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        422: {"description": "Invalid payload", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Submit a definition for moderation",
)
async def create_definition(
    payload: DefinitionPayload,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ResponseEnvelope:
    """
    New definitions always start as PENDING, whatever the body says.
    """
    await definition_service.create_definition(db=db, user=user, payload=payload)
    return ResponseEnvelope(code=201, status="Success", message="Definition created")


@router.put(
    "/{definition_id}",
    response_model=ResponseEnvelope,
    response_model_exclude_none=True,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Edit policy forbids this change", "model": ErrorResponse},
        404: {"description": "Definition not found", "model": ErrorResponse},
        422: {"description": "Invalid payload", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Edit a definition (sends it back to moderation)",
)
async def update_definition(
    definition_id: int,
    payload: DefinitionPayload,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ResponseEnvelope:
    await definition_service.update_definition(
        db=db, user=user, definition_id=definition_id, payload=payload
    )
    return ResponseEnvelope(code=200, status="Success", message="Definition updated")


@router.delete(
    "/{definition_id}",
    response_model=ResponseEnvelope,
    response_model_exclude_none=True,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Edit policy forbids this change", "model": ErrorResponse},
        404: {"description": "Definition not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Soft-delete a definition",
)
async def delete_definition(
    definition_id: int,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> ResponseEnvelope:
    """
    With DELETE_REQUIRES_AUTH=false anonymous callers may delete and no
    ownership check is made.
    """
    if settings.delete_requires_auth and user is None:
        raise AuthenticationError()

    await definition_service.delete_definition(
        db=db,
        definition_id=definition_id,
        user=user if settings.delete_requires_auth else None,
    )
    return ResponseEnvelope(code=200, status="Success", message="Definition deleted")
