"""
Application services module.
"""

from flipcalc.services.record_store import (
    RecordStore,
    REHAB_STORE,
    MAX_OFFER_STORE,
    PROFIT_STORE,
)
from flipcalc.services import lookup

__all__ = ["RecordStore", "REHAB_STORE", "MAX_OFFER_STORE", "PROFIT_STORE", "lookup"]
