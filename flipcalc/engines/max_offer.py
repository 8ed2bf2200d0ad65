"""
Max offer calculator engine.

ARV and rehab are kept exactly as typed; the offer table is derived from
their parsed values. Rehab can be pulled from a saved rehab project, which
tags the offer with that project's address (rehab_from).
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from flipcalc.calculations.max_offer import LTV_TIERS, calculate_offer_tiers
from flipcalc.calculations.parsing import parse_amount, to_input_text
from flipcalc.calculations.rehab import compute_total_from_record
from flipcalc.engines.base import CalculatorEngine, user_action
from flipcalc.errors import (
    ConfirmationRequiredError,
    MissingAddressError,
    NoMatchError,
    RecordNotFoundError,
)
from flipcalc.services import lookup
from flipcalc.services.record_store import MAX_OFFER_STORE, REHAB_STORE, next_id

logger = logging.getLogger(__name__)


class MaxOfferState(BaseModel):
    """Max offer calculator form."""

    arv: str = ""
    rehab: str = ""
    address: str = ""
    rehab_from: str = ""  # rehab project address the rehab figure came from
    selected_id: Optional[int] = None
    rehab_pick: str = ""


class MaxOfferEngine(CalculatorEngine):
    """Maximum allowable offer at each LTV tier."""

    state_class = MaxOfferState

    @property
    def arv_value(self) -> float:
        return parse_amount(self.state.arv)

    @property
    def rehab_value(self) -> float:
        return parse_amount(self.state.rehab)

    def tiers(self) -> List[Dict[str, Any]]:
        return calculate_offer_tiers(self.arv_value, self.rehab_value, LTV_TIERS)

    def results(self) -> dict:
        return {
            "arv": self.arv_value,
            "rehab": self.rehab_value,
            "tiers": self.tiers(),
        }

    # ---------------------------------------------------------------------
    # Form edits
    # ---------------------------------------------------------------------

    def clear_values(self) -> None:
        """Clear ARV and rehab; address and rehab source are kept."""
        self.state.arv = ""
        self.state.rehab = ""

    def reset_form(self) -> None:
        self.state = MaxOfferState()

    def clear_rehab_source(self) -> None:
        self.state.rehab_from = ""

    # ---------------------------------------------------------------------
    # Pull from rehab
    # ---------------------------------------------------------------------

    @user_action
    def pull_rehab(self, pick: Optional[str] = None) -> str:
        """
        Fill rehab with the total of a saved rehab project.

        An explicit pick (or the remembered rehab_pick) wins; otherwise the
        rehab project saved under this form's address is used.
        """
        projects = self.store.get_all(REHAB_STORE)
        if not projects:
            raise NoMatchError("No saved RehabCalc projects.")

        match = lookup.resolve(
            projects, address=self.state.address, pick=pick or self.state.rehab_pick
        )
        if match is None:
            raise NoMatchError("No RehabCalc project selected or matching address.")

        key, record = match
        total = compute_total_from_record(record)
        self.state.rehab = to_input_text(total)
        self.state.rehab_from = key
        return f'Pulled rehab {to_input_text(total)} from "{key}".'

    # ---------------------------------------------------------------------
    # Saved projects
    # ---------------------------------------------------------------------

    def list_projects(self) -> List[Dict[str, Any]]:
        """Saved offers in stored order, each with a display label."""
        rows = []
        for record in self.store.get_all(MAX_OFFER_STORE):
            label = str(record.get("address") or "(no address)")
            if record.get("rehabFrom"):
                label = f"{label} - uses: {record['rehabFrom']}"
            rows.append({"id": record.get("id"), "label": label, "record": record})
        return rows

    def _find(self, project_id: Any) -> Optional[Dict[str, Any]]:
        for record in self.store.get_all(MAX_OFFER_STORE):
            if str(record.get("id")) == str(project_id):
                return record
        return None

    @user_action
    def save(self) -> str:
        address = self.state.address.strip()
        if not address:
            raise MissingAddressError("Enter an address to save.")

        projects = self.store.get_all(MAX_OFFER_STORE)
        payload = {
            "id": None,
            "address": address,
            "arv": self.state.arv,
            "rehab": self.state.rehab,
            "rehabFrom": self.state.rehab_from,
            "updatedAt": datetime.utcnow().isoformat(),
        }

        wanted = lookup.normalize_address(address)
        for idx, existing in enumerate(projects):
            if lookup.normalize_address(existing.get("address")) == wanted:
                payload["id"] = existing.get("id") or next_id(projects)
                projects[idx] = {**existing, **payload}
                break
        else:
            payload["id"] = next_id(projects)
            projects.insert(0, payload)

        self.store.replace_all(MAX_OFFER_STORE, projects)
        self.state.address = address
        self.state.selected_id = payload["id"]
        logger.info(f"Saved max offer project {payload['id']} ({address!r})")
        return f'Saved offer for "{address}".'

    @user_action
    def load(self, project_id: Optional[int] = None) -> str:
        wanted = project_id if project_id is not None else self.state.selected_id
        if wanted is None:
            raise RecordNotFoundError("Pick a saved project to load.")

        record = self._find(wanted)
        if record is None:
            raise RecordNotFoundError("No saved offer with that id.")

        self.state.address = str(record.get("address") or "")
        self.state.arv = str(record.get("arv") or "")
        self.state.rehab = str(record.get("rehab") or "")
        self.state.rehab_from = str(record.get("rehabFrom") or "")
        if self.state.rehab_from:
            self.state.rehab_pick = self.state.rehab_from
        record_id = record.get("id")
        self.state.selected_id = record_id if isinstance(record_id, int) else None
        return f'Loaded offer for "{self.state.address}".'

    @user_action
    def delete(self, project_id: Optional[int] = None, confirm: bool = False) -> str:
        wanted = project_id if project_id is not None else self.state.selected_id
        if wanted is None:
            raise RecordNotFoundError("Pick a saved project to delete.")

        record = self._find(wanted)
        if record is None:
            raise RecordNotFoundError("No saved offer with that id.")
        if self.require_confirmation and not confirm:
            raise ConfirmationRequiredError(
                f'Delete saved offer for "{record.get("address") or wanted}"?'
            )

        self.store.remove(MAX_OFFER_STORE, wanted)
        self.state.selected_id = None
        logger.info(f"Deleted max offer project {wanted}")
        return "Deleted saved offer."
