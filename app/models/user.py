# app/models/user.py
from sqlalchemy import Boolean, Column, Integer, String

from app.db.base import Base


class User(Base):
    """
    Employee record. Identity fields are owned by the accounts subsystem;
    the status engine only ever writes `status`.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    username = Column(String(128), nullable=False, unique=True, index=True)
    first_name = Column(String(128), nullable=True)
    last_name = Column(String(128), nullable=True)
    email = Column(String(255), nullable=True)
    roles = Column(String(255), nullable=False, default="Employee")
    active = Column(Boolean, nullable=False, default=True)

    status = Column(
        String(64),
        nullable=False,
        default="Available",
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username} status={self.status}>"
