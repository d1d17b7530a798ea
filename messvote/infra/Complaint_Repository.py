import uuid
from typing import List, Optional

from messvote.domain.Complaint import Complaint
from messvote.infra.Document_Store import JsonDocumentStore
from messvote.utilities.constants import COMPLAINTS


class ComplaintRepository:
    def __init__(self, store: JsonDocumentStore):
        self.store = store

    def get(self, complaint_id: str) -> Optional[Complaint]:
        doc = self.store.get(COMPLAINTS, complaint_id)
        return Complaint.from_dict(doc, complaint_id) if doc is not None else None

    def save(self, complaint: Complaint) -> Complaint:
        if not complaint.complaint_id:
            complaint.complaint_id = uuid.uuid4().hex
        self.store.set(COMPLAINTS, complaint.complaint_id, complaint.to_dict())
        return complaint

    def update(self, complaint_id: str, changes: dict) -> Complaint:
        return Complaint.from_dict(self.store.update(COMPLAINTS, complaint_id, changes), complaint_id)

    def delete(self, complaint_id: str) -> bool:
        return self.store.delete(COMPLAINTS, complaint_id)

    def list_complaints(self, status: Optional[str] = None) -> List[Complaint]:
        """Newest first."""
        where = {"status": status} if status else None
        rows = self.store.query(COMPLAINTS, where=where, order_by="created_at", descending=True)
        return [Complaint.from_dict(doc, key[0]) for key, doc in rows]
