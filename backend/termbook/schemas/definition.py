"""
Termbook Backend: Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract for definitions and the
       dashboard.
How:   FastAPI validates request bodies against these models, serializes
       responses through them and generates the OpenAPI docs from them.

Response Envelope:
    Every response is wrapped the same way:

        {"code": 200, "status": "Success", "message": "...", "data": ...}

    `message` and `data` are omitted when not set. Field-level validation
    failures use `messages` instead of `message`:

        {"code": 422, "status": "Error",
         "messages": {"errors": [{"field": "term", "rule": "required",
                                  "message": "Field required"}]}}

Key Casing:
    The wire format predates this backend, so a few keys are camelCase
    (`categoryId`, `statusDefinition`, `createdAt`, `userId`) while others
    are snake_case (`created_at`, `total_approved`). Python attributes are
    snake_case throughout; aliases produce the wire names.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class DefinitionPayload(BaseModel):
    """
    Body of POST /definitions and PUT /definitions/{id}.

    Unknown keys (a client-supplied `statusDefinitionId`, for example) are
    ignored; status is always decided server-side.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    term: str = Field(min_length=1, max_length=255, description="The term being defined")
    definition: str = Field(min_length=1, description="Explanation of the term")
    category_id: int = Field(alias="categoryId", gt=0, description="Existing category id")


# ══════════════════════════════════════════════════════════════════════════
# Data Models: what goes inside `data`
# ══════════════════════════════════════════════════════════════════════════


class CategoryOut(BaseModel):
    id: int
    category: str


class DefinitionListItem(BaseModel):
    """One search result of GET /definitions."""

    id: int
    term: str
    definition: str
    category: str = Field(description="Category label")
    username: str = Field(description="Owner's username")
    created_at: int = Field(description="Creation time, unix seconds")


class DefinitionDetail(BaseModel):
    """
    GET /definitions/{id}.

    Unlike the list item, `category` is the full category object.
    """

    id: int
    term: str
    definition: str
    category: CategoryOut
    username: str
    created_at: int = Field(description="Creation time, unix seconds")


class DashboardDefinitionItem(BaseModel):
    """One of the caller's own definitions on the dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    term: str
    definition: str
    category: str
    status_definition: str = Field(alias="statusDefinition")
    created_at: int = Field(alias="createdAt")
    updated_at: int = Field(alias="updatedAt")


class DashboardSummary(BaseModel):
    """
    GET /dashboard/definitions.

    `total_review` counts PENDING definitions (REVIEW is the legacy name of
    the same status).
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    username: str
    email: str
    total_approved: int = 0
    total_review: int = 0
    total_reject: int = 0
    definitions: List[DashboardDefinitionItem] = Field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════
# Envelopes
# ══════════════════════════════════════════════════════════════════════════


class ResponseEnvelope(BaseModel):
    code: int = Field(description="Mirrors the HTTP status code")
    status: str = Field(description="Success, Error, Not Found, Unauthorized, Forbidden")
    message: Optional[str] = Field(default=None, description="Human-readable outcome")


class DefinitionListResponse(ResponseEnvelope):
    data: List[DefinitionListItem]


class DefinitionDetailResponse(ResponseEnvelope):
    data: DefinitionDetail


class DashboardResponse(ResponseEnvelope):
    data: DashboardSummary


class ErrorResponse(ResponseEnvelope):
    """Error envelope; `messages` carries field-level validation failures."""

    messages: Optional[Dict[str, List[Dict[str, str]]]] = None


class HealthResponse(BaseModel):
    """GET /health for monitoring and load balancer probes."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
