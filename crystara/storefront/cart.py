"""Cart and wishlist state containers.

Both containers keep their line items in memory and hand the full list to a
`Storage` after every mutation, so the state survives a restart of whatever
hosts them. `JsonFileStorage` keeps one JSON document per key in a directory.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from ..common.services.logging import log_event


CART_KEY = "crystara-cart"
WISHLIST_KEY = "crystara-wishlist"


class Storage(Protocol):
    def load(self, key: str) -> Optional[list]:
        ...

    def save(self, key: str, value: list) -> None:
        ...


class MemoryStorage:
    def __init__(self) -> None:
        self.data: Dict[str, str] = {}

    def load(self, key: str) -> Optional[list]:
        raw = self.data.get(key)
        return json.loads(raw) if raw else None

    def save(self, key: str, value: list) -> None:
        self.data[key] = json.dumps(value, ensure_ascii=False)


class JsonFileStorage:
    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def load(self, key: str) -> Optional[list]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            log_event("warning", "storefront.storage_unreadable", key=key, error=str(exc))
            return None
        return data if isinstance(data, list) else None

    def save(self, key: str, value: list) -> None:
        self._path(key).write_text(json.dumps(value, indent=2, ensure_ascii=False), encoding="utf-8")


@dataclass
class CartItem:
    id: str
    name: str
    price: float
    image: str = ""
    category: str = ""
    quantity: int = 1
    original_price: Optional[float] = None
    sub_category: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            price=data.get("price", 0),
            image=data.get("image", ""),
            category=data.get("category", ""),
            quantity=int(data.get("quantity", 1)),
            original_price=data.get("original_price"),
            sub_category=data.get("sub_category"),
        )


def _restore(storage: Storage, key: str) -> List[CartItem]:
    try:
        raw = storage.load(key) or []
        return [CartItem.from_dict(entry) for entry in raw]
    except (KeyError, TypeError, ValueError) as exc:
        log_event("warning", "storefront.state_discarded", key=key, error=str(exc))
        return []


@dataclass
class CartState:
    """Line items keyed by product id; quantities below 1 remove the line."""

    storage: Storage
    items: List[CartItem] = field(default_factory=list)

    @classmethod
    def restore(cls, storage: Storage) -> "CartState":
        return cls(storage=storage, items=_restore(storage, CART_KEY))

    def _persist(self) -> None:
        self.storage.save(CART_KEY, [it.to_dict() for it in self.items])

    def find(self, product_id: str) -> Optional[CartItem]:
        return next((it for it in self.items if it.id == product_id), None)

    def add(self, item: CartItem, quantity: int = 1) -> CartItem:
        existing = self.find(item.id)
        if existing:
            existing.quantity += quantity
            line = existing
        else:
            line = CartItem(**{**item.to_dict(), "quantity": quantity})
            self.items.append(line)
        self._persist()
        return line

    def remove(self, product_id: str) -> None:
        self.items = [it for it in self.items if it.id != product_id]
        self._persist()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity < 1:
            self.remove(product_id)
            return
        line = self.find(product_id)
        if line:
            line.quantity = quantity
            self._persist()

    def clear(self) -> None:
        self.items = []
        self._persist()

    @property
    def total_items(self) -> int:
        return sum(it.quantity for it in self.items)

    @property
    def total_price(self) -> Decimal:
        return sum((Decimal(str(it.price)) * it.quantity for it in self.items), Decimal("0"))


@dataclass
class WishlistState:
    storage: Storage
    items: List[CartItem] = field(default_factory=list)

    @classmethod
    def restore(cls, storage: Storage) -> "WishlistState":
        return cls(storage=storage, items=_restore(storage, WISHLIST_KEY))

    def _persist(self) -> None:
        self.storage.save(WISHLIST_KEY, [it.to_dict() for it in self.items])

    def contains(self, product_id: str) -> bool:
        return any(it.id == product_id for it in self.items)

    def add(self, item: CartItem) -> bool:
        if self.contains(item.id):
            return False
        self.items.append(CartItem(**{**item.to_dict(), "quantity": 1}))
        self._persist()
        return True

    def remove(self, product_id: str) -> None:
        self.items = [it for it in self.items if it.id != product_id]
        self._persist()

    def toggle(self, item: CartItem) -> bool:
        """Add or remove `item`; returns True when it ends up in the wishlist."""
        if self.contains(item.id):
            self.remove(item.id)
            return False
        return self.add(item)

    def clear(self) -> None:
        self.items = []
        self._persist()
