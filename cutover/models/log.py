from sqlalchemy import Column, DateTime, Integer, String, Text

from cutover.db.base import Base
from cutover.models.user import utcnow


class Log(Base):
    """Audit trail of major data-access events (transitions, backfill needs, runs)."""
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    action = Column(String(255), nullable=False)
    status = Column(String(50), nullable=False)
    family = Column(String(50), nullable=True)
    details = Column(Text, nullable=True)
    user = Column(String(255), nullable=True)
    entity = Column(String(255), nullable=True)
    source = Column(String(255), nullable=True)
