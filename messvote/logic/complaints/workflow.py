"""Complaint triage: residents file, admins resolve (pending -> resolved)."""
import csv
import io
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

from messvote.domain.Complaint import Complaint
from messvote.infra.Blob_Store import LocalBlobStore
from messvote.infra.Complaint_Repository import ComplaintRepository
from messvote.utilities.clock import to_iso
from messvote.utilities.constants import (
    BULK_RESOLVE_RESPONSE, COMPLAINT_FILTERS, COMPLAINT_PENDING, COMPLAINT_PHOTO_FOLDER,
    COMPLAINT_RESOLVED, COMPLAINT_STATUSES, ROOM_NUMBER_MAX, ROOM_NUMBER_MIN, STUDENT_COMPLAINT_LIMIT,
)
from messvote.utilities.errors import NonFatalCleanupError, NotFound, ValidationError
from messvote.utilities.validators import sanitize_input

logger = logging.getLogger(__name__)

CSV_HEADERS = ['Name', 'Room', 'Category', 'Urgency', 'Status', 'Complaint', 'Date', 'Response']


class ComplaintDesk:
    def __init__(self, repo: ComplaintRepository, blobs: LocalBlobStore, clock: Callable[[], datetime]):
        self.repo = repo
        self.blobs = blobs
        self.clock = clock

    def submit(self, name: str, room_number, category: str, text: str, urgency: str,
               photo: Optional[Tuple[str, bytes]] = None) -> Complaint:
        """Validate and store a new pending complaint. Nothing is written on a validation error."""
        required = (name, category, urgency, text)
        if any(not (v or "").strip() for v in required) or room_number in (None, ""):
            raise ValidationError("Please fill in all required fields")
        try:
            room = int(room_number)
        except (TypeError, ValueError):
            raise ValidationError("Room number must be a number")
        if not (ROOM_NUMBER_MIN <= room <= ROOM_NUMBER_MAX):
            raise ValidationError(f"Room number must be between {ROOM_NUMBER_MIN} and {ROOM_NUMBER_MAX}")

        now = self.clock()
        complaint = Complaint(
            name=sanitize_input(name.strip()),
            room_number=room,
            category=sanitize_input((category or "").strip()),
            text=sanitize_input(text.strip()),
            urgency=sanitize_input((urgency or "").strip()),
            status=COMPLAINT_PENDING,
            created_at=now,
            updated_at=now,
        )
        if photo is not None:
            complaint.photo_url = self.blobs.upload(COMPLAINT_PHOTO_FOLDER, photo[0], photo[1])
        self.repo.save(complaint)
        logger.info(f"Complaint submitted: {complaint.complaint_id} (room {room})")
        return complaint

    def get(self, complaint_id: str) -> Complaint:
        complaint = self.repo.get(complaint_id)
        if complaint is None:
            raise NotFound(f"Complaint '{complaint_id}' not found")
        return complaint

    def list_complaints(self, filter_name: str = "all") -> List[Complaint]:
        """Newest first. Filters: all, pending, resolved, today, yesterday, week."""
        if filter_name not in COMPLAINT_FILTERS:
            raise ValidationError(f"Unknown filter '{filter_name}'", details={"allowed": list(COMPLAINT_FILTERS)})
        if filter_name in COMPLAINT_STATUSES:
            return self.repo.list_complaints(status=filter_name)
        complaints = self.repo.list_complaints()
        if filter_name == "all":
            return complaints
        now = self.clock()
        today = now.date()
        if filter_name == "today":
            return [c for c in complaints if c.created_at and c.created_at.date() == today]
        if filter_name == "yesterday":
            yesterday = today - timedelta(days=1)
            return [c for c in complaints if c.created_at and c.created_at.date() == yesterday]
        week_ago = now - timedelta(days=7)
        return [c for c in complaints if c.created_at and c.created_at >= week_ago]

    def complaints_for_student(self, name: str) -> List[Complaint]:
        """Latest complaints filed under `name` (exact match, else case-insensitive)."""
        if not (name or "").strip():
            return []
        wanted = sanitize_input(name.strip())
        complaints = self.repo.list_complaints()
        mine = [c for c in complaints if c.name == wanted]
        if not mine:
            mine = [c for c in complaints if c.name.lower() == wanted.lower()]
        return mine[:STUDENT_COMPLAINT_LIMIT]

    def update_status(self, complaint_id: str, status: str, response: Optional[str] = None) -> Complaint:
        if status not in COMPLAINT_STATUSES:
            raise ValidationError(f"Unknown status '{status}'")
        self.get(complaint_id)
        changes = {"status": status, "updated_at": to_iso(self.clock())}
        if response:
            changes["response"] = sanitize_input(response.strip())
        complaint = self.repo.update(complaint_id, changes)
        logger.info(f"Complaint {complaint_id} -> {status}")
        return complaint

    def bulk_resolve(self) -> int:
        """Resolve every pending complaint; returns how many were changed."""
        pending = self.repo.list_complaints(status=COMPLAINT_PENDING)
        with self.repo.store.batch():
            for complaint in pending:
                self.update_status(complaint.complaint_id, COMPLAINT_RESOLVED, BULK_RESOLVE_RESPONSE)
        logger.info(f"Bulk resolved {len(pending)} complaints")
        return len(pending)

    def delete(self, complaint_id: str) -> None:
        complaint = self.get(complaint_id)
        self.repo.delete(complaint_id)
        if complaint.photo_url:
            try:
                self.blobs.delete(complaint.photo_url)
            except NonFatalCleanupError as e:
                logger.warning(f"Photo cleanup failed: {e.message}")

    def stats(self) -> dict:
        complaints = self.repo.list_complaints()
        today = self.clock().date()
        return {
            "total": len(complaints),
            "pending": sum(1 for c in complaints if c.is_pending),
            "resolved": sum(1 for c in complaints if c.is_resolved),
            "today": sum(1 for c in complaints if c.created_at and c.created_at.date() == today),
        }

    def export_csv(self, filter_name: str = "all") -> Tuple[str, str]:
        """CSV text of the filtered complaints plus a suggested filename."""
        complaints = self.list_complaints(filter_name)
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for c in complaints:
            writer.writerow([
                c.name, c.room_number, c.category, c.urgency, c.status, c.text,
                c.created_at.strftime("%Y-%m-%d %H:%M") if c.created_at else "",
                c.response or "",
            ])
        filename = f"complaints_{filter_name}_{self.clock().date().isoformat()}.csv"
        logger.info(f"Exported {len(complaints)} complaints ({filter_name})")
        return buffer.getvalue(), filename
