"""Profile lookup backed by the database."""

from smartlink.domain.entities import ListenProfile
from smartlink.domain.ports import IProfileLookup

from .database import Database
from .repositories import ProfileRepository


class DatabaseProfileLookup(IProfileLookup):
    """Look up public profiles in a short read transaction."""

    def __init__(self, database: Database) -> None:
        """Initialize with the database manager."""
        self._database = database

    async def get_public_by_handle(self, handle: str) -> ListenProfile | None:
        """Get a public profile by lower-cased handle."""
        async with self._database.session_scope() as session:
            return await ProfileRepository(session).get_public_by_handle(handle)
