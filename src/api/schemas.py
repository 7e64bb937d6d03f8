"""Pydantic schemas for API request/response validation."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from db.models import UserRole


# =============================================================================
# Request Schemas (what clients send to us)
# =============================================================================


class AnalysisCreateRequest(BaseModel):
    """Request body for analyzing a website."""

    url: str = Field(
        ...,
        min_length=1,
        max_length=2048,
        description="Website to analyze; https:// is assumed when no scheme is given",
        examples=["https://example.com", "example.com"],
    )


class LeadCreateRequest(BaseModel):
    """Request body for leaving an email on a result page."""

    email: EmailStr
    analysis_id: uuid.UUID


# =============================================================================
# Response Schemas (what we send back to clients)
# =============================================================================


class McpServerInfoResponse(BaseModel):
    """Discovered MCP manifest."""

    endpoint: str
    name: str | None = None


class AnalysisDetailsResponse(BaseModel):
    """Supporting evidence for an analysis."""

    api_endpoints: list[str] = []
    feeds: list[str] = []
    llms_txt_content: str | None = None
    json_ld_data: list[Any] = []
    semantic_tags: list[str] = []
    meta_tags: dict[str, str] = {}
    sitemap_url: str | None = None
    mcp_server_info: McpServerInfoResponse | None = None
    recommendations: list[str] = []


class AnalysisResponse(BaseModel):
    """Response schema for a stored analysis."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID | None
    url: str
    score: int

    has_json_api: bool
    has_text_api: bool
    has_markdown_api: bool
    has_rss_feed: bool
    has_atom_feed: bool
    has_json_feed: bool
    has_llms_txt: bool
    has_json_ld: bool
    has_semantic_html: bool
    has_server_side_rendering: bool
    has_meta_tags: bool
    has_sitemap: bool
    has_mcp_server: bool

    details: AnalysisDetailsResponse | None
    created_at: datetime


class UserResponse(BaseModel):
    """Response schema for the signed-in user."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str | None
    email: str | None
    role: UserRole


class LeadCreatedResponse(BaseModel):
    """Response when a lead is recorded."""

    success: bool = True


# =============================================================================
# List Response Wrappers
# =============================================================================


class AnalysisListResponse(BaseModel):
    """Response for listing a user's analyses."""

    analyses: list[AnalysisResponse]
    count: int


# =============================================================================
# Health Check
# =============================================================================


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = "healthy"
    service: str
    version: str = "0.1.0"
