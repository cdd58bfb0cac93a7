# app/models/project.py
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.db.types import UTCDateTime


class ProjectAssignment(Base):
    """
    Membership of a user in a project's assigned team.

    `position` keeps the order in which users were supplied so that the
    assigned-user list round-trips exactly.
    """

    __tablename__ = "project_assignments"

    project_id = Column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"<ProjectAssignment project_id={self.project_id} "
            f"user_id={self.user_id} position={self.position}>"
        )


class Project(Base):
    """
    A client engagement staffed by a set of users.

    A user counts as occupied by the project once `start_date` has arrived
    and until `completed` is set.
    """

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    service_type = Column(String(128), nullable=False)

    deadline = Column(Date, nullable=True)
    start_date = Column(Date, nullable=False, index=True)

    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(UTCDateTime(), nullable=True)
    confirmed = Column(Boolean, nullable=False, default=False)

    client_id = Column(
        Integer,
        ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    team_leader_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )

    created_at = Column(UTCDateTime(), server_default=func.now())
    updated_at = Column(
        UTCDateTime(),
        server_default=func.now(),
        onupdate=func.now(),
    )

    assignments = relationship(
        "ProjectAssignment",
        order_by="ProjectAssignment.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint(
            "client_id",
            "start_date",
            name="uq_projects_client_start_date",
        ),
    )

    __mapper_args__ = {"eager_defaults": True}

    @property
    def assigned_user_ids(self) -> list[int]:
        return [assignment.user_id for assignment in self.assignments]

    def assign_users(self, user_ids: list[int]) -> None:
        """Replace the assigned team, keeping the given order."""
        existing = {assignment.user_id: assignment for assignment in self.assignments}
        assignments = []
        for position, user_id in enumerate(user_ids):
            assignment = existing.get(user_id) or ProjectAssignment(user_id=user_id)
            assignment.position = position
            assignments.append(assignment)
        self.assignments = assignments

    def __repr__(self) -> str:
        return (
            f"<Project id={self.id} name={self.name} client_id={self.client_id} "
            f"start_date={self.start_date} completed={self.completed}>"
        )
