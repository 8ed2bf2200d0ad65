"""
Record store for saved calculator projects.

Three independent stores exist, one per calculator, each serialized as a
single JSON blob:

    rehabProjects_v1     mapping  address -> rehab record
    maxOfferProjects_v1  list     max offer records (matched by scanning)
    profitProjects_v1    list     profit records (id-keyed)

Every write is a full read-modify-write of one store. Read failures are
treated as an empty store; write failures raise StoreUnavailableError.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flipcalc.db.models import RecordBlob
from flipcalc.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

REHAB_STORE = "rehabProjects_v1"
MAX_OFFER_STORE = "maxOfferProjects_v1"
PROFIT_STORE = "profitProjects_v1"

STORE_SHAPES = {
    REHAB_STORE: dict,
    MAX_OFFER_STORE: list,
    PROFIT_STORE: list,
}

StoreData = Union[Dict[str, Any], List[Dict[str, Any]]]


def serialize(data: StoreData) -> str:
    """Canonical JSON text for a store; re-serializing a loaded blob is byte-identical."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def deserialize(payload: str) -> Any:
    return json.loads(payload)


def next_id(records: List[Dict[str, Any]]) -> int:
    """
    Generate a record id.

    Ids are millisecond timestamps bumped past every existing id, so they
    stay unique and increase in creation order even within one millisecond.
    """
    existing = [r.get("id") for r in records if isinstance(r.get("id"), int)]
    candidate = int(time.time() * 1000)
    if existing:
        candidate = max(candidate, max(existing) + 1)
    return candidate


class RecordStore:
    """Named, string-keyed project stores backed by the record_blobs table."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _shape(store_name: str) -> type:
        try:
            return STORE_SHAPES[store_name]
        except KeyError:
            raise ValueError(f"Unknown store: {store_name}")

    def dump(self, store_name: str) -> Optional[str]:
        """Raw serialized blob for a store, or None if it was never written."""
        self._shape(store_name)
        blob = self.db.get(RecordBlob, store_name)
        return blob.payload if blob else None

    def get_all(self, store_name: str) -> StoreData:
        """
        Read an entire store.

        Args:
            store_name: One of the store names above

        Returns:
            Mapping or list depending on the store; empty when the store is
            missing, unreadable, or holds the wrong shape
        """
        shape = self._shape(store_name)
        try:
            payload = self.dump(store_name)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Failed to read store {store_name}: {e}")
            return shape()

        if not payload:
            return shape()

        try:
            data = deserialize(payload)
        except ValueError as e:
            logger.warning(f"Store {store_name} is corrupted, treating as empty: {e}")
            return shape()

        if not isinstance(data, shape):
            logger.warning(
                f"Store {store_name} holds {type(data).__name__}, expected {shape.__name__}"
            )
            return shape()

        if shape is list:
            data = [record for record in data if isinstance(record, dict)]
        else:
            data = {key: record for key, record in data.items() if isinstance(record, dict)}
        return data

    def replace_all(self, store_name: str, data: StoreData) -> None:
        """
        Write an entire store back.

        Raises:
            StoreUnavailableError: If the database write fails
        """
        self._shape(store_name)
        payload = serialize(data)
        try:
            blob = self.db.get(RecordBlob, store_name)
            if blob is None:
                self.db.add(RecordBlob(store_name=store_name, payload=payload))
            else:
                blob.payload = payload
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to write store {store_name}: {e}")
            raise StoreUnavailableError("Couldn't save: the project store is unavailable.")

    def put(
        self,
        store_name: str,
        key_or_record: Union[str, Dict[str, Any]],
        record: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Insert or replace one record.

        Mapping stores take (key, record). List stores take the record itself
        and replace the entry with the same id, appending when there is none.
        """
        data = self.get_all(store_name)
        if isinstance(data, dict):
            if record is None:
                raise ValueError(f"{store_name} is keyed by address; pass key and record")
            data[key_or_record] = record
        else:
            item = key_or_record
            for idx, existing in enumerate(data):
                if existing.get("id") == item.get("id"):
                    data[idx] = item
                    break
            else:
                data.append(item)
        self.replace_all(store_name, data)

    def remove(self, store_name: str, key_or_id: Union[str, int]) -> bool:
        """
        Remove one record by address key (mapping) or id (list).

        Returns:
            True if a record was removed; the store is not written otherwise
        """
        data = self.get_all(store_name)
        if isinstance(data, dict):
            if key_or_id not in data:
                return False
            del data[key_or_id]
        else:
            remaining = [r for r in data if str(r.get("id")) != str(key_or_id)]
            if len(remaining) == len(data):
                return False
            data = remaining
        self.replace_all(store_name, data)
        return True
