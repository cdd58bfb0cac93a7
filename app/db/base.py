# app/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models in the Staffing Status service.
    """
    pass


# Import ORM models so that Base.metadata is aware of them
# This import should stay at the bottom to avoid circular dependencies.
from app.models.user import User  # noqa: E402,F401
from app.models.client import Client  # noqa: E402,F401
from app.models.project import Project, ProjectAssignment  # noqa: E402,F401
from app.models.status_history import StatusHistoryEntry  # noqa: E402,F401
