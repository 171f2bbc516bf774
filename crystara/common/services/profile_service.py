from typing import Dict, Optional

from ..db.session import get_session
from ..models.base import utcnow
from ..models.user_profile import CUSTOMER_ROLE, UserProfile
from ..utils.dto import to_profile_dto
from .errors import NotFoundError
from .logging import log_event


ADDRESS_COLUMNS = ("address_street", "address_city", "address_state", "address_pincode")
PATCHABLE_FIELDS = ("name", "phone") + ADDRESS_COLUMNS + ("saved_addresses",)


class ProfileService:
    """Commerce profile rows keyed by identity-provider user id."""

    def __init__(self, session_factory=get_session):
        self._session_factory = session_factory

    def save_profile(self, *, user_id: str, email: Optional[str], payload: Dict) -> Dict:
        """Onboarding upsert; name and phone are required."""
        name = payload.get("name")
        phone = payload.get("phone")
        if not name or not phone:
            raise ValueError("Name and phone are required")
        with self._session_factory() as session:
            row = session.get(UserProfile, user_id)
            if row is None:
                row = UserProfile(id=user_id, role=CUSTOMER_ROLE)
                session.add(row)
            row.email = email
            row.name = name
            row.phone = phone
            for column in ADDRESS_COLUMNS:
                setattr(row, column, payload.get(column) or None)
            row.updated_at = utcnow()
            session.flush()
            log_event("info", "profile.saved", user_id=user_id)
            return to_profile_dto(row)

    def is_onboarded(self, user_id: str) -> bool:
        try:
            with self._session_factory() as session:
                row = session.get(UserProfile, user_id)
                return bool(row is not None and row.is_onboarded)
        except Exception as exc:
            # a lookup failure reads as "not onboarded" so the client shows the form
            log_event("warning", "profile.onboarding_check_failed", user_id=user_id, error=str(exc))
            return False

    def get_profile(self, user_id: str) -> Dict:
        with self._session_factory() as session:
            row = session.get(UserProfile, user_id)
            if row is None:
                raise NotFoundError("Profile not found")
            return to_profile_dto(row)

    def update_profile(self, user_id: str, patch: Dict) -> Dict:
        """Write only the keys present in `patch`; explicit nulls clear the column."""
        saved = patch.get("saved_addresses")
        if "saved_addresses" in patch and saved is not None and not isinstance(saved, list):
            raise ValueError("saved_addresses must be a list")
        with self._session_factory() as session:
            row = session.get(UserProfile, user_id)
            if row is None:
                raise NotFoundError("Profile not found")
            changed = [f for f in PATCHABLE_FIELDS if f in patch]
            for field in changed:
                setattr(row, field, patch[field])
            row.updated_at = utcnow()
            session.flush()
            log_event("info", "profile.updated", user_id=user_id, fields=changed)
            return to_profile_dto(row)

    def get_role(self, user_id: str) -> Optional[str]:
        with self._session_factory() as session:
            row = session.get(UserProfile, user_id)
            return row.role if row is not None else None

    def set_role(self, user_id: str, role: str) -> Dict:
        with self._session_factory() as session:
            row = session.get(UserProfile, user_id)
            if row is None:
                raise NotFoundError("Profile not found")
            row.role = role
            row.updated_at = utcnow()
            session.flush()
            log_event("info", "profile.role_changed", user_id=user_id, role=role)
            return to_profile_dto(row)
