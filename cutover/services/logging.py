import logging
from typing import Optional

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError

from cutover.core.errors import BackendUnavailable
from cutover.models import Log
from cutover.models.user import utcnow

logger = logging.getLogger(__name__)


class EventLog:
    """Writes major data-access events to the legacy logs table."""

    def __init__(self, session_factory=None):
        if session_factory is None:
            from cutover.db.database import AsyncSessionLocal
            session_factory = AsyncSessionLocal
        self.session_factory = session_factory

    async def log_major_event(self, action: str, status: str, user: Optional[str] = None,
                              details: Optional[str] = None, entity: Optional[str] = None,
                              source: Optional[str] = None, family: Optional[str] = None):
        """
        Record one event. Use 'await event_log.log_major_event(...)' in async code.
        Raises BackendUnavailable if the row cannot be written.
        """
        logger.debug(f"Event: action={action}, status={status}, user={user}, entity={entity}, family={family}")
        log_entry = {
            "timestamp": utcnow(),
            "action": action,
            "status": status,
            "family": family,
            "details": details,
            "user": user,
            "entity": entity,
            "source": source,
        }
        async with self.session_factory() as session:
            try:
                result = await session.execute(insert(Log), [log_entry])
                await session.commit()
                return result
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Logging error: {e}")
                raise BackendUnavailable("legacy", f"audit log write failed: {e}") from e
