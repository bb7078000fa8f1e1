import logging
from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

from pydantic import ValidationError

from . import models
from .storage import JsonDocumentStore

logger = logging.getLogger("document_store")

M = TypeVar("M", bound=models.Record)


class JsonRepository(Generic[M]):
    """
    CRUD over one collection of the document store.

    Every mutation is a full load -> change -> save cycle held under the
    collection lock. Records other than the one being changed are written back
    exactly as they were read.
    """
    collection: str
    model: Type[M]
    key: str

    def __init__(self, store: JsonDocumentStore):
        self.store = store

    def locked(self):
        return self.store.locked(self.collection)

    def _parse(self, raw: Any) -> Optional[M]:
        try:
            return self.model.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Skipping malformed record in {self.collection}: {e.error_count()} error(s)")
            return None

    def _apply(self, records: List[dict], index: int, changes: Callable[[M], None]) -> Optional[M]:
        """
        Runs `changes` on a parsed copy of records[index] and merges back only
        the fields it touched. Every other stored key keeps its raw value.
        """
        raw = records[index]
        item = self._parse(raw)
        if item is None:
            return None

        before = item.model_dump(mode="json")
        set_before = set(item.model_fields_set)
        changes(item)
        after = item.model_dump(mode="json")

        touched = {name for name, value in after.items() if name not in before or before[name] != value}
        touched |= item.model_fields_set - set_before

        merged = dict(raw)
        for name in touched:
            field = self.model.model_fields.get(name)
            key = field.alias if field is not None and field.alias else name
            merged[key] = after.get(name)
        records[index] = merged
        return item

    def _index_of(self, records: List[dict], value: Any) -> Optional[int]:
        for i, raw in enumerate(records):
            if isinstance(raw, dict) and raw.get(self.key) == value:
                return i
        return None

    def list(self) -> List[M]:
        parsed = (self._parse(raw) for raw in self.store.load(self.collection))
        return [item for item in parsed if item is not None]

    def raw(self) -> List[dict]:
        return self.store.load(self.collection)

    def get(self, value: Any) -> Optional[M]:
        records = self.store.load(self.collection)
        index = self._index_of(records, value)
        if index is None:
            return None
        return self._parse(records[index])

    def find(self, predicate: Callable[[M], bool]) -> Optional[M]:
        for item in self.list():
            if predicate(item):
                return item
        return None

    def last_raw(self) -> Optional[Any]:
        """The last stored entry as read, whatever its shape. None only when empty."""
        records = self.store.load(self.collection)
        if not records:
            return None
        return records[-1]

    def add(self, item: M) -> M:
        with self.locked():
            records = self.store.load(self.collection)
            records.append(item.to_record())
            self.store.save(self.collection, records)
        return item

    def update(self, value: Any, changes: Callable[[M], None]) -> Optional[M]:
        """Applies `changes` to the matching record and persists it. None if no match."""
        with self.locked():
            records = self.store.load(self.collection)
            index = self._index_of(records, value)
            if index is None:
                return None
            item = self._apply(records, index, changes)
            if item is not None:
                self.store.save(self.collection, records)
            return item

    def delete(self, value: Any) -> bool:
        with self.locked():
            records = self.store.load(self.collection)
            remaining = [raw for raw in records if not (isinstance(raw, dict) and raw.get(self.key) == value)]
            if len(remaining) == len(records):
                return False
            self.store.save(self.collection, remaining)
            return True


class BookingRepository(JsonRepository[models.Booking]):
    collection = "bookings"
    model = models.Booking
    key = "id_booking"


class TransactionRepository(JsonRepository[models.Transaction]):
    collection = "transactions"
    model = models.Transaction
    key = "id_transaksi"

    def delete_for_booking(self, id_booking: str) -> int:
        with self.locked():
            records = self.store.load(self.collection)
            remaining = [
                raw for raw in records
                if not (isinstance(raw, dict) and raw.get("id_booking") == id_booking)
            ]
            removed = len(records) - len(remaining)
            if removed:
                self.store.save(self.collection, remaining)
            return removed


class UserRepository(JsonRepository[models.User]):
    collection = "users"
    model = models.User
    key = "id_user"

    def get_by_email(self, email: str) -> Optional[models.User]:
        return self.find(lambda u: u.email == email)

    def get_by_username(self, username: str) -> Optional[models.User]:
        return self.find(lambda u: u.username == username)

    def update_by_email(self, email: str, changes: Callable[[models.User], None]) -> Optional[models.User]:
        with self.locked():
            records = self.store.load(self.collection)
            for i, raw in enumerate(records):
                if isinstance(raw, dict) and raw.get("email") == email:
                    user = self._apply(records, i, changes)
                    if user is not None:
                        self.store.save(self.collection, records)
                    return user
            return None


class AdminRepository(JsonRepository[models.Admin]):
    collection = "admins"
    model = models.Admin
    key = "username"


class CatalogItem(models.Record):
    """Free-form catalog entry; every key is kept as sent by the admin panel."""


class CatalogRepository(JsonRepository[CatalogItem]):
    model = CatalogItem
    key = "id"

    def __init__(self, store: JsonDocumentStore, collection: str, key: str = "id"):
        super().__init__(store)
        self.collection = collection
        self.key = key

    def add_raw(self, record: dict) -> dict:
        with self.locked():
            records = self.store.load(self.collection)
            records.append(record)
            self.store.save(self.collection, records)
        return record

    def merge(self, value: Any, changes: dict) -> Optional[dict]:
        """Shallow-merges `changes` into the matching entry."""
        with self.locked():
            records = self.store.load(self.collection)
            index = self._index_of(records, value)
            if index is None:
                return None
            records[index] = {**records[index], **changes}
            self.store.save(self.collection, records)
            return records[index]

    def delete_at(self, index: int) -> bool:
        with self.locked():
            records = self.store.load(self.collection)
            if index < 0 or index >= len(records):
                return False
            records.pop(index)
            self.store.save(self.collection, records)
            return True
