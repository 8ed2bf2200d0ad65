"""
Flip profit calculator engine.

Every input is kept as typed text and parsed on each calculation. Saved
profit projects are id-keyed; ARV and rehab can be pulled from the max offer
and rehab calculators' saves.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from flipcalc.calculations.parsing import (
    format_money,
    format_percent,
    parse_amount,
    to_input_text,
)
from flipcalc.calculations.profit import ProfitBreakdown, calculate_profit
from flipcalc.calculations.rehab import compute_total_from_record
from flipcalc.engines.base import CalculatorEngine, user_action
from flipcalc.errors import (
    ConfirmationRequiredError,
    MissingAddressError,
    NoMatchError,
    RecordNotFoundError,
)
from flipcalc.services import lookup
from flipcalc.services.record_store import (
    MAX_OFFER_STORE,
    PROFIT_STORE,
    REHAB_STORE,
    next_id,
)

logger = logging.getLogger(__name__)

# Form field -> stored record key
RECORD_FIELDS = {
    "address": "address",
    "arv": "arv",
    "purchase": "purchase",
    "rehab": "rehab",
    "closing_buy_pct": "closingBuyPct",
    "closing_sell_pct": "closingSellPct",
    "contingency_pct": "contingencyPct",
    "carry_months": "carryMonths",
    "utilities_monthly": "utilitiesMonthly",
    "taxes_monthly": "taxesMonthly",
    "rate_apr": "rateAPR",
    "points_pct": "pointsPct",
    "ltv_pct": "ltvPct",
    "loan_amount_override": "loanAmountOverride",
    "num_draws": "numDraws",
    "draw_fee": "drawFee",
}

# Older saves used these keys
LEGACY_FIELDS = {
    "closingBuy": "closingBuyPct",
    "closingSell": "closingSellPct",
    "points": "pointsPct",
    "loanAmountInput": "loanAmountOverride",
    "drawAmount": "drawFee",
}


class ProfitState(BaseModel):
    """Profit calculator form. Percentages are whole numbers ("12" is 12%)."""

    address: str = ""

    # Deal basics
    arv: str = ""
    purchase: str = ""
    rehab: str = ""

    # Transaction costs / carry
    closing_buy_pct: str = "2"  # % of purchase
    closing_sell_pct: str = "6"  # % of ARV
    contingency_pct: str = "10"  # % of rehab
    carry_months: str = "4"
    utilities_monthly: str = "0"
    taxes_monthly: str = "0"

    # Financing
    rate_apr: str = "12"
    points_pct: str = "2"
    ltv_pct: str = "85"
    loan_amount_override: str = ""
    num_draws: str = "0"
    draw_fee: str = "0"

    selected_id: Optional[int] = None


def upgrade_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a stored profit record with legacy keys renamed."""
    upgraded = dict(record)
    for old, new in LEGACY_FIELDS.items():
        if old in upgraded:
            value = upgraded.pop(old)
            upgraded.setdefault(new, value)
    return upgraded


class ProfitEngine(CalculatorEngine):
    """Gross and net profit for a flip."""

    state_class = ProfitState

    def breakdown(self) -> ProfitBreakdown:
        s = self.state
        return calculate_profit(
            arv=parse_amount(s.arv),
            purchase=parse_amount(s.purchase),
            rehab=parse_amount(s.rehab),
            closing_buy_pct=parse_amount(s.closing_buy_pct),
            closing_sell_pct=parse_amount(s.closing_sell_pct),
            contingency_pct=parse_amount(s.contingency_pct),
            carry_months=parse_amount(s.carry_months),
            utilities_monthly=parse_amount(s.utilities_monthly),
            taxes_monthly=parse_amount(s.taxes_monthly),
            rate_apr=parse_amount(s.rate_apr),
            points_pct=parse_amount(s.points_pct),
            ltv_pct=parse_amount(s.ltv_pct),
            loan_amount_override=parse_amount(s.loan_amount_override),
            num_draws=parse_amount(s.num_draws),
            draw_fee=parse_amount(s.draw_fee),
        )

    def results(self) -> dict:
        figures = self.breakdown()
        results = figures.to_dict()
        results["display"] = {
            "total_costs": format_money(figures.total_costs),
            "gross_profit": format_money(figures.gross_profit),
            "net_profit": format_money(figures.net_profit),
            "margin": format_percent(figures.margin),
            "net_margin": format_percent(figures.net_margin),
        }
        return results

    def to_record(self) -> Dict[str, Any]:
        record = {
            key: getattr(self.state, field) for field, key in RECORD_FIELDS.items()
        }
        record["updatedAt"] = datetime.utcnow().isoformat()
        return record

    def reset_form(self) -> None:
        self.state = ProfitState()

    # ---------------------------------------------------------------------
    # Pulls from the other calculators
    # ---------------------------------------------------------------------

    @user_action
    def pull_arv(self, address: Optional[str] = None) -> str:
        """
        Fill ARV from a saved max offer.

        Matches on address; falls back to the last record in the max offer
        store when nothing matches.
        """
        offers = self.store.get_all(MAX_OFFER_STORE)
        if not offers:
            raise NoMatchError("No Max Offer projects found.")

        match = lookup.resolve(
            offers, address=address if address is not None else self.state.address
        )
        _, record = match
        self.state.arv = str(record.get("arv") or "")
        return f'Pulled ARV from "{record.get("address") or "last saved offer"}".'

    @user_action
    def pull_rehab(self, address: Optional[str] = None) -> str:
        """Fill rehab from the rehab project saved under the address."""
        projects = self.store.get_all(REHAB_STORE)
        if not projects:
            raise NoMatchError("No RehabCalc projects found.")

        match = lookup.resolve(
            projects, address=address if address is not None else self.state.address
        )
        if match is None:
            raise NoMatchError("No RehabCalc project matches that address.")

        key, record = match
        if record.get("total") not in (None, ""):
            rehab = record["total"]
        elif record.get("rehab") not in (None, ""):
            rehab = record["rehab"]
        else:
            rehab = compute_total_from_record(record)
        self.state.rehab = to_input_text(rehab) if isinstance(rehab, (int, float)) else str(rehab)
        return f'Pulled rehab from "{key}".'

    # ---------------------------------------------------------------------
    # Saved projects
    # ---------------------------------------------------------------------

    def list_projects(self) -> List[Dict[str, Any]]:
        return [
            {"id": record.get("id"), "label": str(record.get("address") or "(no address)")}
            for record in self.store.get_all(PROFIT_STORE)
        ]

    @user_action
    def save(self) -> str:
        if not self.state.address.strip():
            raise MissingAddressError()

        projects = self.store.get_all(PROFIT_STORE)
        record = self.to_record()

        if self.state.selected_id is not None:
            record["id"] = self.state.selected_id
            for idx, existing in enumerate(projects):
                if str(existing.get("id")) == str(self.state.selected_id):
                    projects[idx] = record
                    break
            else:
                projects.append(record)
        else:
            record["id"] = next_id(projects)
            projects.append(record)

        self.store.replace_all(PROFIT_STORE, projects)
        self.state.selected_id = record["id"]
        logger.info(f"Saved profit project {record['id']} ({self.state.address!r})")
        return f'Saved profit project for "{self.state.address}".'

    @user_action
    def load(self, project_id: Optional[int] = None) -> str:
        wanted = project_id if project_id is not None else self.state.selected_id
        if wanted is None:
            raise RecordNotFoundError("Pick a saved project to load.")

        for stored in self.store.get_all(PROFIT_STORE):
            if str(stored.get("id")) == str(wanted):
                record = upgrade_record(stored)
                break
        else:
            raise RecordNotFoundError("No saved profit project with that id.")

        defaults = ProfitState()
        values = {}
        for field, key in RECORD_FIELDS.items():
            value = record.get(key)
            values[field] = str(value) if value not in (None, "") else getattr(defaults, field)
        record_id = record.get("id")
        self.state = ProfitState(
            selected_id=record_id if isinstance(record_id, int) else None, **values
        )
        return f'Loaded profit project for "{self.state.address}".'

    @user_action
    def delete(self, project_id: Optional[int] = None, confirm: bool = False) -> str:
        wanted = project_id if project_id is not None else self.state.selected_id
        if wanted is None:
            raise RecordNotFoundError("Pick a saved project to delete.")

        if not any(str(r.get("id")) == str(wanted) for r in self.store.get_all(PROFIT_STORE)):
            raise RecordNotFoundError("No saved profit project with that id.")
        if self.require_confirmation and not confirm:
            raise ConfirmationRequiredError("Delete this saved profit project?")

        self.store.remove(PROFIT_STORE, wanted)
        if str(self.state.selected_id) == str(wanted):
            self.reset_form()
        logger.info(f"Deleted profit project {wanted}")
        return "Deleted saved profit project."
