# app/models/status_history.py
from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.db.types import UTCDateTime


class StatusHistoryEntry(Base):
    """
    Last-known status of a single user on a specific calendar day.

    Recomputing a user's status on the same day amends this row in place
    instead of inserting a new one.
    """

    __tablename__ = "status_history"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status = Column(String(64), nullable=False)

    status_date = Column(Date, nullable=False, index=True)
    timestamp = Column(UTCDateTime(), nullable=False, index=True)

    user = relationship("User", backref="status_history")

    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "status_date",
            name="uq_status_history_user_date",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<StatusHistoryEntry id={self.id} user_id={self.user_id} "
            f"date={self.status_date} status={self.status}>"
        )
