"""
Link Store

Persistent mapping from short code to original URL and click count.

Operations:
- create: generate a code, insert the link with zero clicks
- lookup: point lookup by short code
- record_click: add one to the click counter

Design Decisions:
- The unique index on short_code catches the rare random collision; the
  insert is retried with a fresh code a bounded number of times
- Codes equal to a fixed route segment are never handed out
- record_click is a single UPDATE (clicks = clicks + 1) so concurrent
  redirects on the same code cannot lose increments
"""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.exceptions import LinkNotFoundError, PersistenceError
from shortlink.core.validators import sanitize_short_code
from shortlink.db.models import Link
from shortlink.services.code_generator import generate_short_code

logger = logging.getLogger(__name__)

# Path segments served by other routes; a link with one of these codes
# could never be reached.
RESERVED_CODES = frozenset({"health", "stats", "docs", "redoc"})


class LinkStore:
    """
    Create, look up and count visits of links.

    Each public method is its own transaction and commits before returning.
    """

    def __init__(self, session: AsyncSession, code_length: int = 6, max_attempts: int = 5):
        """
        Args:
            session: Database session
            code_length: Length of generated short codes
            max_attempts: Codes to try before giving up on a conflicting insert
        """
        self.session = session
        self.code_length = code_length
        self.max_attempts = max_attempts

    async def create(self, original_url: str) -> Link:
        """
        Store a new link for ``original_url`` under a freshly generated code.

        The URL is stored as given; no normalization or validation.

        Raises:
            RandomSourceUnavailable: If no code could be generated
            PersistenceError: If the insert fails for any reason other than a
                code collision, or every attempt collided
        """
        for attempt in range(1, self.max_attempts + 1):
            short_code = self._new_code()
            link = Link(original_url=original_url, short_code=short_code, clicks=0)

            try:
                self.session.add(link)
                await self.session.commit()
                await self.session.refresh(link)
            except IntegrityError as e:
                await self.session.rollback()
                if await self._code_taken(short_code):
                    logger.info(
                        f"Short code collision on attempt {attempt}/{self.max_attempts}"
                    )
                    continue
                raise PersistenceError(
                    "failed to create link: database constraint violation",
                    original_error=e
                ) from e
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(f"Failed to create link: {e}")
                raise PersistenceError(
                    f"failed to create link: {e}",
                    original_error=e
                ) from e

            logger.info(f"Created link {link.short_code} -> {original_url[:50]}")
            return link

        raise PersistenceError(
            f"no free short code after {self.max_attempts} attempts"
        )

    async def lookup(self, short_code: str) -> Link:
        """
        Return the link stored under ``short_code``.

        Raises:
            LinkNotFoundError: If no link has this code
            PersistenceError: If the database cannot be queried
        """
        link = await self._find(short_code)
        if link is None:
            raise LinkNotFoundError(short_code)
        return link

    async def record_click(self, short_code: str) -> None:
        """
        Increment the click counter of ``short_code`` by exactly one.

        Raises:
            LinkNotFoundError: If no link has this code
            PersistenceError: If the update fails
        """
        if sanitize_short_code(short_code) is None:
            raise LinkNotFoundError(short_code)

        statement = (
            update(Link)
            .where(Link.short_code == short_code)
            .values(clicks=Link.clicks + 1)
        )

        try:
            result = await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to record click for {short_code}: {e}")
            raise PersistenceError(
                f"failed to record click: {e}",
                original_error=e,
                public_message="Could not record click"
            ) from e

        if result.rowcount == 0:
            raise LinkNotFoundError(short_code)

    def _new_code(self) -> str:
        while True:
            short_code = generate_short_code(self.code_length)
            if short_code not in RESERVED_CODES:
                return short_code

    async def _code_taken(self, short_code: str) -> bool:
        return await self._find(short_code) is not None

    async def _find(self, short_code: str) -> Optional[Link]:
        if sanitize_short_code(short_code) is None:
            return None

        statement = select(Link).where(Link.short_code == short_code)
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up {short_code}: {e}")
            raise PersistenceError(
                f"failed to look up link: {e}",
                original_error=e,
                public_message="Storage unavailable"
            ) from e
        return result.scalar_one_or_none()
