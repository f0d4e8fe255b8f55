"""Orphaned photo cleanup.

Creating a record uploads photos before the insert, and deleting a record
leaves its photos behind. Neither path cleans up after itself; this sweep is the
explicit, admin-triggered way to find and remove photo folders whose record no
longer exists.

A folder with no record may also belong to a create that is still in flight:
its uploads have finished but the insert has not. Folders holding any object
written within `min_age` are therefore left alone until a later sweep.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID

from school_portal.domain.identity import parse_id
from school_portal.domain.models import EntityKind
from school_portal.services.images import ImageStore, StoredObject
from school_portal.services.students import StudentService
from school_portal.services.teachers import TeacherService

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class SweepReport:
    """Outcome of one sweep over a bucket."""

    kind: EntityKind
    dry_run: bool
    orphaned_ids: list[UUID] = field(default_factory=list)
    removed_paths: list[str] = field(default_factory=list)
    recent_ids: list[UUID] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Serialize the report for the admin API."""
        return {
            "kind": self.kind.value,
            "dry_run": self.dry_run,
            "orphaned_ids": [str(orphan) for orphan in self.orphaned_ids],
            "removed_paths": self.removed_paths,
            "recent_ids": [str(recent) for recent in self.recent_ids],
        }


@dataclass
class OrphanSweeper:
    """Finds photo folders with no matching record."""

    store: ImageStore
    student_service: StudentService
    teacher_service: TeacherService
    student_bucket: str
    teacher_bucket: str
    min_age: timedelta = timedelta(hours=1)
    clock: Callable[[], datetime] = _utcnow

    def sweep(self, kind: EntityKind, dry_run: bool = True) -> SweepReport:
        """Report (and unless dry_run, delete) orphaned photo folders."""
        if kind is EntityKind.STUDENT:
            bucket = self.student_bucket
            known = {student.id for student in self.student_service.search()}
        else:
            bucket = self.teacher_bucket
            known = {teacher.id for teacher in self.teacher_service.search()}

        cutoff = self.clock() - self.min_age
        orphaned: list[UUID] = []
        recent: list[UUID] = []
        removed: list[str] = []
        for prefix in self.store.list_prefixes(bucket):
            entity_id = parse_id(prefix)
            # Folders not named after an identifier were not written by us.
            if entity_id is None or entity_id in known:
                continue
            objects = self.store.list_objects(bucket, prefix)
            if any(_written_after(stored, cutoff) for stored in objects):
                recent.append(entity_id)
                continue
            orphaned.append(entity_id)
            paths = [stored.path for stored in objects]
            if not dry_run and paths:
                self.store.remove(bucket, paths)
                removed.extend(paths)
        _logger.info(
            "Orphan sweep of %s: %s orphaned folder(s), %s object(s) removed, "
            "%s recent folder(s) skipped",
            bucket,
            len(orphaned),
            len(removed),
            len(recent),
        )
        return SweepReport(
            kind=kind,
            dry_run=dry_run,
            orphaned_ids=orphaned,
            removed_paths=removed,
            recent_ids=recent,
        )


def _written_after(stored: StoredObject, cutoff: datetime) -> bool:
    # An object without a timestamp cannot be shown to be old.
    return stored.updated_at is None or stored.updated_at > cutoff
