# app/services/project_diff.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from app.models.project import Project

EDITABLE_FIELDS = (
    "name",
    "description",
    "service_type",
    "deadline",
    "start_date",
    "completed",
    "confirmed",
    "client_id",
    "team_leader_id",
)


@dataclass(frozen=True)
class ProjectFields:
    """
    Validated, storage-shaped values of a full project replacement.

    `confirmed=None` means the caller did not send the flag; the stored
    value is kept and not compared.
    """

    name: str
    description: str | None
    service_type: str
    deadline: date | None
    start_date: date
    completed: bool
    client_id: int
    team_leader_id: int
    assigned_user_ids: tuple[int, ...]
    confirmed: bool | None = None


@dataclass(frozen=True)
class ChangeSet:
    changed_fields: tuple[str, ...] = ()
    added_user_ids: tuple[int, ...] = ()
    removed_user_ids: tuple[int, ...] = ()
    retained_user_ids: tuple[int, ...] = ()

    @property
    def has_changes(self) -> bool:
        return bool(self.changed_fields)


def diff_project(project: Project, proposed: ProjectFields) -> ChangeSet:
    """
    Compare a stored project against a proposed full replacement.

    The assigned-user list compares order-sensitively, so reordering the
    same team counts as a change. The added / removed / retained tuples are
    the set delta, in request order (added, retained) or stored order
    (removed).
    """
    changed: list[str] = []

    for name in EDITABLE_FIELDS:
        new_value = getattr(proposed, name)
        if name == "confirmed" and new_value is None:
            continue
        if getattr(project, name) != new_value:
            changed.append(name)

    current_ids = tuple(project.assigned_user_ids)
    new_ids = tuple(proposed.assigned_user_ids)
    if current_ids != new_ids:
        changed.append("assigned_user_ids")

    current_set = set(current_ids)
    new_set = set(new_ids)

    return ChangeSet(
        changed_fields=tuple(changed),
        added_user_ids=tuple(uid for uid in new_ids if uid not in current_set),
        removed_user_ids=tuple(uid for uid in current_ids if uid not in new_set),
        retained_user_ids=tuple(uid for uid in new_ids if uid in current_set),
    )
