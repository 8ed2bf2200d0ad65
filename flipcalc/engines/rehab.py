"""
Rehab calculator engine.

Live form state (square footage, scope, line item toggles) plus save, load
and delete against the address-keyed rehab store.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from flipcalc.calculations import rehab as formulas
from flipcalc.calculations.parsing import format_money, parse_amount
from flipcalc.engines.base import CalculatorEngine, user_action
from flipcalc.errors import (
    ConfirmationRequiredError,
    MissingAddressError,
    RecordNotFoundError,
)
from flipcalc.services import lookup
from flipcalc.services.record_store import REHAB_STORE

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("included", "rate", "cost")

_as_bool = TypeAdapter(bool)


class LineItem(BaseModel):
    """One toggleable rehab line item. HVAC uses 'cost', the rest use 'rate'."""

    id: int
    name: str
    included: bool = False
    rate: Optional[float] = None  # $/sf
    cost: Optional[float] = None  # flat $


def _default_line_items() -> List[LineItem]:
    return [LineItem(**item) for item in formulas.default_items()]


class RehabState(BaseModel):
    """Rehab calculator form."""

    address: str = ""
    items: List[LineItem] = Field(default_factory=_default_line_items)
    sf: float = 0.0
    scope: str = formulas.DEFAULT_SCOPE
    selected: str = ""

    @field_validator("sf", mode="before")
    @classmethod
    def parse_sf(cls, value: Any) -> float:
        return max(parse_amount(value), 0.0)


class RehabEngine(CalculatorEngine):
    """Rehab cost calculator."""

    state_class = RehabState

    # ---------------------------------------------------------------------
    # Derived values
    # ---------------------------------------------------------------------

    def _item_dicts(self) -> List[Dict[str, Any]]:
        return [item.model_dump(exclude_none=True) for item in self.state.items]

    @property
    def scope_rate(self) -> float:
        return formulas.rate_for_scope(self.state.scope)

    @property
    def base_rehab(self) -> float:
        return formulas.calculate_base_rehab(self.state.sf, self.state.scope)

    @property
    def toggles_total(self) -> float:
        return formulas.calculate_toggles_total(self._item_dicts(), self.state.sf)

    @property
    def total(self) -> float:
        return formulas.calculate_rehab_total(
            self._item_dicts(), self.state.sf, self.state.scope
        )

    def results(self) -> dict:
        return {
            "scope_rate": self.scope_rate,
            "scope_label": formulas.scope_label(self.state.scope),
            "base_rehab": self.base_rehab,
            "toggles_total": self.toggles_total,
            "total": self.total,
            "total_display": format_money(self.total),
            "breakdown": formulas.toggle_breakdown(self._item_dicts(), self.state.sf),
        }

    def to_record(self) -> Dict[str, Any]:
        """Stored shape of the current form."""
        return {
            "items": self._item_dicts(),
            "meta": {"sf": self.state.sf, "scope": self.state.scope},
        }

    # ---------------------------------------------------------------------
    # Form edits
    # ---------------------------------------------------------------------

    def set_item_field(self, item_id: int, field: str, value: Any) -> bool:
        """
        Update one line item's toggle, rate, or cost.

        HVAC takes a flat 'cost'; every other item takes a per-sf 'rate'.

        Returns:
            False if no item has that id
        """
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Line item field must be one of {EDITABLE_FIELDS}")

        for item in self.state.items:
            if item.id != item_id:
                continue
            if field == "included":
                try:
                    item.included = _as_bool.validate_python(value)
                except ValidationError:
                    raise ValueError(f"included must be true or false, got {value!r}")
                return True
            flat = item.name == formulas.HVAC
            if flat != (field == "cost"):
                active = "cost" if flat else "rate"
                raise ValueError(f"{item.name} is priced by '{active}', not '{field}'")
            setattr(item, field, parse_amount(value))
            return True
        return False

    def clear(self) -> None:
        """Untoggle every item and reset square footage and scope."""
        for item in self.state.items:
            item.included = False
            item.cost = 0.0
        self.state.sf = 0.0
        self.state.scope = formulas.DEFAULT_SCOPE

    # ---------------------------------------------------------------------
    # Saved projects
    # ---------------------------------------------------------------------

    def list_saved(self) -> List[str]:
        return sorted(self.store.get_all(REHAB_STORE).keys())

    def _find_key(self, projects: Dict[str, Any], address: str) -> Optional[str]:
        if address in projects:
            return address
        match = lookup.find_by_address(projects, address)
        return match[0] if match else None

    @user_action
    def save(self, address: Optional[str] = None) -> str:
        key = (address if address is not None else self.state.address).strip()
        if not key:
            raise MissingAddressError("Enter an address before saving.")

        projects = self.store.get_all(REHAB_STORE)
        # Addresses are unique regardless of case and spacing
        for existing in list(projects):
            if existing != key and lookup.normalize_address(existing) == lookup.normalize_address(key):
                del projects[existing]
        projects[key] = self.to_record()
        self.store.replace_all(REHAB_STORE, projects)

        self.state.address = key
        self.state.selected = key
        logger.info(f"Saved rehab project {key!r}")
        return f'Saved rehab project for "{key}".'

    @user_action
    def load(self, address: Optional[str] = None) -> str:
        wanted = (address if address is not None else self.state.selected).strip()
        if not wanted:
            raise RecordNotFoundError("Pick a saved project to load.")

        projects = self.store.get_all(REHAB_STORE)
        key = self._find_key(projects, wanted)
        record = projects.get(key) if key else None
        if not isinstance(record, dict):
            raise RecordNotFoundError("No saved project found for that address.")

        items = formulas.merge_catalog_items(record.get("items"))
        meta = record.get("meta")
        if not isinstance(meta, dict):
            meta = {}
        scope = meta.get("scope")

        self.state.address = key
        self.state.selected = key
        self.state.items = [LineItem(**item) for item in items]
        self.state.sf = max(parse_amount(meta.get("sf")), 0.0)
        if not isinstance(scope, str) or scope not in formulas.SCOPE_RATES:
            scope = formulas.DEFAULT_SCOPE
        self.state.scope = scope
        return f'Loaded rehab project for "{key}".'

    @user_action
    def delete(self, address: Optional[str] = None, confirm: bool = False) -> str:
        wanted = (address if address is not None else self.state.address).strip()
        if not wanted:
            raise RecordNotFoundError("Pick a saved project to delete.")

        projects = self.store.get_all(REHAB_STORE)
        key = self._find_key(projects, wanted)
        if key is None:
            raise RecordNotFoundError("No saved project found for that address.")
        if self.require_confirmation and not confirm:
            raise ConfirmationRequiredError(f'Delete saved project for "{key}"?')

        self.store.remove(REHAB_STORE, key)
        if self.state.selected == key:
            remaining = self.list_saved()
            self.state.selected = remaining[0] if remaining else ""
        logger.info(f"Deleted rehab project {key!r}")
        return f'Deleted saved project for "{key}".'
