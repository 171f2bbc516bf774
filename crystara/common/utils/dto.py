from typing import Any, Dict, List, Optional


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def to_order_dto(row: Any, *, with_profile: bool = False) -> Dict:
    data = {
        "id": getattr(row, "id", None),
        "user_id": getattr(row, "user_id", None),
        "order_id": getattr(row, "order_id", None),
        "payment_id": getattr(row, "payment_id", None),
        "amount": int(getattr(row, "amount", 0) or 0),
        "currency": getattr(row, "currency", None),
        "items": getattr(row, "items", None) or [],
        "shipping_address": getattr(row, "shipping_address", None),
        "status": getattr(row, "status", None),
        "created_at": _iso(getattr(row, "created_at", None)),
        "updated_at": _iso(getattr(row, "updated_at", None)),
    }
    if with_profile:
        profile = getattr(row, "profile", None)
        data["user_profiles"] = (
            {"email": profile.email, "name": profile.name} if profile is not None else None
        )
    return data


def to_profile_dto(row: Any) -> Dict:
    return {
        "id": getattr(row, "id", None),
        "email": getattr(row, "email", None),
        "name": getattr(row, "name", None),
        "phone": getattr(row, "phone", None),
        "address_street": getattr(row, "address_street", None),
        "address_city": getattr(row, "address_city", None),
        "address_state": getattr(row, "address_state", None),
        "address_pincode": getattr(row, "address_pincode", None),
        "saved_addresses": getattr(row, "saved_addresses", None) or [],
        "role": getattr(row, "role", None),
        "created_at": _iso(getattr(row, "created_at", None)),
        "updated_at": _iso(getattr(row, "updated_at", None)),
    }


def address_book(profile: Dict) -> List[Dict]:
    """Primary address (flagged default) followed by the saved addresses in stored order."""
    book: List[Dict] = []
    if profile.get("address_street") or profile.get("address_city"):
        book.append(
            {
                "id": "primary",
                "label": "Primary Address",
                "type": "home",
                "street": profile.get("address_street") or "",
                "city": profile.get("address_city") or "",
                "state": profile.get("address_state") or "",
                "pincode": profile.get("address_pincode") or "",
                "isDefault": True,
            }
        )
    for entry in profile.get("saved_addresses") or []:
        if isinstance(entry, dict):
            book.append(entry)
    return book


def default_address(profile: Dict) -> Optional[Dict]:
    book = address_book(profile)
    for entry in book:
        if entry.get("isDefault"):
            return entry
    return book[0] if book else None
