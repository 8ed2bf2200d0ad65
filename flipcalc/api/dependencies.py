"""
Shared API dependencies and result handling.
"""

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from flipcalc.config import get_settings
from flipcalc.db.database import get_db
from flipcalc.engines.base import ActionResult
from flipcalc.services.record_store import RecordStore

# Notice kind -> HTTP status for failed actions
STATUS_BY_KIND = {
    "validation": 400,
    "not_found": 404,
    "no_match": 404,
    "confirm": 409,
    "store": 503,
}


def get_record_store(db: Session = Depends(get_db)) -> RecordStore:
    """Record store bound to the request's database session."""
    return RecordStore(db)


def get_require_confirmation() -> bool:
    return get_settings().require_delete_confirmation


def raise_for_result(result: ActionResult) -> None:
    """Turn a failed engine action into an HTTP error."""
    if result.ok:
        return
    status_code = STATUS_BY_KIND.get(result.notice.kind, 400)
    raise HTTPException(status_code=status_code, detail=result.notice.message)
