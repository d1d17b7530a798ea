"""Complaint domain entity: a facility issue filed by a resident."""
from datetime import datetime
from typing import Optional

from messvote.utilities.clock import from_iso, to_iso
from messvote.utilities.constants import COMPLAINT_PENDING, COMPLAINT_RESOLVED


class Complaint:
    def __init__(self, complaint_id: str = "", name: str = "", room_number: int = 0, category: str = "",
                 text: str = "", urgency: str = "", status: str = COMPLAINT_PENDING,
                 response: Optional[str] = None, photo_url: Optional[str] = None,
                 created_at: Optional[datetime] = None, updated_at: Optional[datetime] = None):
        self.complaint_id = complaint_id
        self.name = name
        self.room_number = room_number
        self.category = category
        self.text = text
        self.urgency = urgency
        self.status = status
        self.response = response
        self.photo_url = photo_url
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def is_pending(self) -> bool:
        return self.status == COMPLAINT_PENDING

    @property
    def is_resolved(self) -> bool:
        return self.status == COMPLAINT_RESOLVED

    def __repr__(self) -> str:
        return f"Complaint({self.complaint_id}, room {self.room_number}, {self.status})"

    @staticmethod
    def from_dict(data, complaint_id: str = ""):
        d = dict(data) if isinstance(data, dict) else {}
        return Complaint(
            complaint_id=complaint_id or d.get("id", ""),
            name=d.get("name", ""),
            room_number=int(d.get("room_number") or 0),
            category=d.get("category", ""),
            text=d.get("text", ""),
            urgency=d.get("urgency", ""),
            status=d.get("status", COMPLAINT_PENDING),
            response=d.get("response"),
            photo_url=d.get("photo_url"),
            created_at=from_iso(d.get("created_at")),
            updated_at=from_iso(d.get("updated_at")),
        )

    def to_dict(self):
        return {
            "name": self.name,
            "room_number": self.room_number,
            "category": self.category,
            "text": self.text,
            "urgency": self.urgency,
            "status": self.status,
            "response": self.response,
            "photo_url": self.photo_url,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }

    def to_public(self):
        return {"id": self.complaint_id, **self.to_dict()}
