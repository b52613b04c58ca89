"""
API Request and Response Schemas

The URL is a plain string on purpose: HttpUrl would normalize it (e.g. add a
trailing slash) and the stored URL must equal the submitted one.
"""

from pydantic import BaseModel, Field, StrictStr


class ShortenRequest(BaseModel):
    """Request model for URL shortening endpoint."""
    url: StrictStr = Field(..., min_length=1, description="The long URL to shorten")


class ShortenResponse(BaseModel):
    """Response model for URL shortening endpoint."""
    short_url: str = Field(..., description="The complete short URL")


class StatsResponse(BaseModel):
    """Response model for statistics endpoint."""
    original_url: str
    short_code: str
    clicks: int


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str
