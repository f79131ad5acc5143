"""Complaint status/priority workflow.

ComplaintWorkflow is stateless apart from the store it is handed: every
operation takes the actor explicitly and every read goes back to the store.
Status changes are free-form relabelings with an audit trail. Any status may
follow any other (including itself, to record a note), so no transition
table exists here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from cleantrack_core.errors import NotFound, PartialUpdateError
from cleantrack_core.models import (
    MAX_IMAGES,
    SUBMITTED_NOTE,
    SYSTEM_ACTOR,
    Category,
    Complaint,
    ComplaintInput,
    Priority,
    Status,
    StatusEvent,
)

if TYPE_CHECKING:
    from cleantrack_store.base import BaseStore

logger = logging.getLogger(__name__)

COLLECTION = "complaints"


@dataclass
class ComplaintSummary:
    """Dashboard counts over a list of complaints."""

    total: int = 0
    pending: int = 0
    in_progress: int = 0
    resolved: int = 0
    rejected: int = 0
    by_category: dict[Category, int] = field(default_factory=dict)  # enum order, zero counts omitted


@dataclass
class ManageResult:
    """What an admin update actually changed."""

    status_changed: bool = False
    priority_changed: bool = False

    @property
    def changed(self) -> bool:
        return self.status_changed or self.priority_changed


class ComplaintWorkflow:
    def __init__(self, store: BaseStore):
        self._store = store

    # ------------------------------------------------------------------ #
    # Mutations                                                            #
    # ------------------------------------------------------------------ #

    def create(self, complaint: ComplaintInput) -> str:
        """Persist a new complaint as pending/medium with one seeded history event.

        Text fields are stored as given; validating them is the caller's job.
        """
        if len(complaint.images) > MAX_IMAGES:
            raise ValueError(f"A complaint holds at most {MAX_IMAGES} images, got {len(complaint.images)}")

        seed = StatusEvent(status=Status.PENDING, note=SUBMITTED_NOTE, updated_by=SYSTEM_ACTOR)
        document = {
            **complaint.to_document(),
            "status": Status.PENDING.value,
            "priority": Priority.MEDIUM.value,
            "statusHistory": [seed.to_document()],
        }
        complaint_id = self._store.insert(COLLECTION, document)
        logger.debug("Created complaint %s for user %s", complaint_id, complaint.user_id)
        return complaint_id

    def transition_status(
        self,
        complaint_id: str,
        new_status: Status | str,
        note: str | None = None,
        *,
        updated_by: str,
    ) -> None:
        """Set the status and append the matching event in a single store update.

        Raises NotFound (from the store, before anything is written) when the
        complaint does not exist.
        """
        status = Status(new_status)
        event = StatusEvent(
            status=status,
            note=note or f"Status changed to {status.value}",
            updated_by=updated_by,
        )
        self._store.update(
            COLLECTION,
            complaint_id,
            {"status": status.value},
            append={"statusHistory": event.to_document()},
        )
        logger.debug("Complaint %s -> %s by %s", complaint_id, status.value, updated_by)

    def set_priority(self, complaint_id: str, new_priority: Priority | str) -> None:
        """Change the priority. Never touches the status history."""
        priority = Priority(new_priority)
        self._store.update(COLLECTION, complaint_id, {"priority": priority.value})
        logger.debug("Complaint %s priority -> %s", complaint_id, priority.value)

    def manage(
        self,
        complaint_id: str,
        actor: str,
        status: Status | str | None = None,
        priority: Priority | str | None = None,
        note: str | None = None,
    ) -> ManageResult:
        """Apply an administrator's edit as two independent updates.

        A status event is appended when the status changes or a non-blank note
        is given; the priority is written only when it differs. If the second
        write fails the first stays applied and PartialUpdateError says so.
        """
        current = self.get(complaint_id)
        new_status = Status(status) if status is not None else current.status
        new_priority = Priority(priority) if priority is not None else current.priority
        note = note.strip() if note else None

        result = ManageResult()
        applied: list[str] = []

        if new_status != current.status or note:
            self.transition_status(complaint_id, new_status, note, updated_by=actor)
            result.status_changed = True
            applied.append("status")

        if new_priority != current.priority:
            try:
                self.set_priority(complaint_id, new_priority)
            except Exception as e:
                if not applied:
                    raise
                logger.warning("Complaint %s: priority update failed after status update: %s", complaint_id, e)
                raise PartialUpdateError(applied, "priority", e) from e
            result.priority_changed = True

        return result

    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #

    def get(self, complaint_id: str) -> Complaint:
        document = self._store.get_by_id(COLLECTION, complaint_id)
        if document is None:
            raise NotFound(COLLECTION, complaint_id)
        return Complaint.from_document(document)

    def list_by_owner(self, user_id: str) -> list[Complaint]:
        """Complaints submitted by ``user_id``, newest first."""
        return self._query({"userId": user_id})

    def list_all(self) -> list[Complaint]:
        """Every complaint, newest first. Callers decide who may see this."""
        return self._query(None)

    def list_by_status(self, status: Status | str) -> list[Complaint]:
        return self._query({"status": Status(status).value})

    def list_by_category(self, category: Category | str) -> list[Complaint]:
        return self._query({"category": Category(category).value})

    def _query(self, where: dict | None) -> list[Complaint]:
        documents = self._store.query(COLLECTION, where=where, order_by="createdAt", descending=True)
        return [Complaint.from_document(d) for d in documents]


def filter_complaints(
    complaints: Iterable[Complaint],
    status: Status | str | None = None,
    category: Category | str | None = None,
    search_text: str | None = None,
) -> list[Complaint]:
    """AND-combine the given filters over already-fetched complaints.

    A filter left as None (or blank search text) matches everything. Search is
    a case-insensitive substring match on the title.
    """
    wanted_status = Status(status) if status is not None else None
    wanted_category = Category(category) if category is not None else None
    needle = search_text.lower() if search_text and search_text.strip() else None

    results = []
    for c in complaints:
        if wanted_status is not None and c.status != wanted_status:
            continue
        if wanted_category is not None and c.category != wanted_category:
            continue
        if needle is not None and needle not in (c.title or "").lower():
            continue
        results.append(c)
    return results


def summarize(complaints: Iterable[Complaint]) -> ComplaintSummary:
    summary = ComplaintSummary()
    category_counts = {category: 0 for category in Category}

    for c in complaints:
        summary.total += 1
        if c.status == Status.PENDING:
            summary.pending += 1
        elif c.status == Status.IN_PROGRESS:
            summary.in_progress += 1
        elif c.status == Status.RESOLVED:
            summary.resolved += 1
        elif c.status == Status.REJECTED:
            summary.rejected += 1
        category_counts[c.category] += 1

    summary.by_category = {category: count for category, count in category_counts.items() if count > 0}
    return summary


def recent(complaints: list[Complaint], limit: int = 5) -> list[Complaint]:
    """First ``limit`` complaints of an already newest-first list."""
    return complaints[:limit]
