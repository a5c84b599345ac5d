from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tradedesk.errors import ValidationError

REQUIRED_FIELDS = ("name", "address", "nic", "phone", "whatsapp")
OPTIONAL_DEFAULTS: dict[str, str] = {
    "email": "",
    "currentlyWorking": "no",
    "employmentType": "full-time",
    "yearsExperience": "",
    "preferredRole": "",
    "availableFrom": "",
    "notes": "",
}


class StoreCareersMixin:
    def create_career_application(self, *, payload: Mapping[str, Any]) -> dict[str, Any]:
        if any(self._is_blank(payload.get(field)) for field in REQUIRED_FIELDS):
            raise ValidationError("Required fields missing")
        with self._mutate() as session:
            application: dict[str, Any] = {"id": session.careers.next_id()}
            for field in REQUIRED_FIELDS:
                application[field] = payload[field]
            for field, fallback in OPTIONAL_DEFAULTS.items():
                application[field] = payload.get(field) or fallback
            application["createdAt"] = self._utcnow_iso()
            return session.careers.insert(application)

    def list_career_applications(self) -> list[dict[str, Any]]:
        with self._read() as session:
            return session.careers.list_newest_first()
