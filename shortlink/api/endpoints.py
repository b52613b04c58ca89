"""
FastAPI Endpoints for the link shortener

Endpoints only handle request binding, response shaping and delegating to
the LinkStore. Errors raised by the store propagate to the handlers in
shortlink.api.errors, which render them as JSON bodies.
"""

import logging
import re
from urllib.parse import quote

from fastapi import APIRouter, Request, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.api.schemas import ErrorResponse, ShortenRequest, ShortenResponse, StatsResponse
from shortlink.core.setting import Settings
from shortlink.db.session import get_session
from shortlink.services.link_store import LinkStore

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}

# Control characters (CR/LF included) cannot appear in a header value
_HEADER_UNSAFE = re.compile(r"[\x00-\x1f\x7f]")


def location_header(url: str) -> bytes:
    """
    Encode a stored URL for the Location header.

    The URL is sent as UTF-8 bytes exactly as it was submitted; only control
    characters are percent-escaped.
    """
    return _HEADER_UNSAFE.sub(lambda match: quote(match.group()), url).encode("utf-8")


def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the application was built with."""
    return request.app.state.settings


def get_link_store(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> LinkStore:
    """Dependency building a LinkStore bound to the request session."""
    return LinkStore(
        session,
        code_length=settings.SHORT_CODE_LENGTH,
        max_attempts=settings.SHORT_CODE_MAX_ATTEMPTS,
    )


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
    summary="Create a short URL",
    description="Takes a long URL and returns a shortened version"
)
async def create_short_url(
    body: ShortenRequest,
    store: LinkStore = Depends(get_link_store),
    settings: Settings = Depends(get_app_settings),
) -> ShortenResponse:
    link = await store.create(body.url)
    return ShortenResponse(short_url=f"{settings.BASE_URL}/{link.short_code}")


@router.get(
    "/stats/{short_code}",
    response_model=StatsResponse,
    responses=NOT_FOUND,
    summary="Get URL statistics",
    description="Returns the original URL and the click count of a short code"
)
async def get_url_stats(
    short_code: str,
    store: LinkStore = Depends(get_link_store),
) -> StatsResponse:
    link = await store.lookup(short_code)
    return StatsResponse(
        original_url=link.original_url,
        short_code=link.short_code,
        clicks=link.clicks,
    )


@router.get(
    "/{short_code}",
    status_code=status.HTTP_301_MOVED_PERMANENTLY,
    responses=NOT_FOUND,
    summary="Redirect to original URL",
    description="Takes a short code, counts the click and redirects to the original URL"
)
async def redirect_to_url(
    short_code: str,
    store: LinkStore = Depends(get_link_store),
) -> Response:
    link = await store.lookup(short_code)
    await store.record_click(link.short_code)

    logger.debug(f"Redirecting {short_code} -> {link.original_url[:50]}")
    # RedirectResponse would re-quote the URL; the stored value goes out as is
    response = Response(status_code=status.HTTP_301_MOVED_PERMANENTLY)
    response.raw_headers.append((b"location", location_header(link.original_url)))
    return response
