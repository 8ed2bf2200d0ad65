"""
Rehab Cost Calculations

Total rehab = square-footage base (sf x scope rate) + included line items.
HVAC is priced as a flat amount ('cost'); every other line item is priced
per square foot ('rate' x sf).

compute_total_from_record works directly on a stored record so other
calculators can pull a rehab total without rebuilding the live form.
"""

import copy
from typing import Any, Dict, List, Mapping, Optional

from flipcalc.calculations.parsing import parse_amount

HVAC = "HVAC"

SCOPE_RATES = {
    "light": 10.0,  # Light Rehab ($10/sf)
    "mid": 20.0,  # Mid Tier Rehab ($20/sf)
    "gut": 45.0,  # Gut Job ($45/sf)
}
DEFAULT_SCOPE = "light"

SCOPE_LABELS = {
    "light": "Light Rehab ($10/sf)",
    "mid": "Mid Tier Rehab ($20/sf)",
    "gut": "Gut Job ($45/sf)",
}


def scope_label(scope: Optional[str]) -> str:
    if not isinstance(scope, str) or scope not in SCOPE_LABELS:
        scope = DEFAULT_SCOPE
    return SCOPE_LABELS[scope]


# Line item catalog. New entries are appended to older saves by
# merge_catalog_items when they are loaded.
DEFAULT_ITEMS: List[Dict[str, Any]] = [
    {"id": 1, "name": "Roof", "included": False, "rate": 0.0},
    {"id": 2, "name": "Siding", "included": False, "rate": 0.0},
    {"id": 3, "name": HVAC, "included": False, "cost": 0.0},
    {"id": 4, "name": "Rewiring", "included": False, "rate": 0.0},
    {"id": 5, "name": "Repiping", "included": False, "rate": 0.0},
    {"id": 6, "name": "Flooring", "included": False, "rate": 0.0},
]


def default_items() -> List[Dict[str, Any]]:
    """Fresh copy of the line item catalog."""
    return copy.deepcopy(DEFAULT_ITEMS)


def rate_for_scope(scope: Optional[str]) -> float:
    """$/sf for a rehab scope; unknown scopes are priced as light."""
    if not isinstance(scope, str) or scope not in SCOPE_RATES:
        scope = DEFAULT_SCOPE
    return SCOPE_RATES[scope]


def is_flat_cost(item: Mapping[str, Any]) -> bool:
    return item.get("name") == HVAC


def item_rate(item: Mapping[str, Any]) -> float:
    """
    Per-square-foot rate of a non-HVAC item.

    Saves made before the rate field existed stored the $/sf figure under
    'cost', so 'cost' is read when 'rate' is absent.
    """
    if item.get("rate") is not None:
        return parse_amount(item.get("rate"))
    return parse_amount(item.get("cost"))


def item_amount(item: Mapping[str, Any], sf: float) -> float:
    """Dollar amount a single line item contributes when included."""
    if is_flat_cost(item):
        return parse_amount(item.get("cost"))
    return item_rate(item) * sf


def calculate_base_rehab(sf: float, scope: Optional[str]) -> float:
    """
    Calculate the square-footage base rehab cost.

    Args:
        sf: Square footage
        scope: Rehab scope key (light, mid, gut)

    Returns:
        sf x scope rate
    """
    return parse_amount(sf) * rate_for_scope(scope)


def calculate_toggles_total(items: List[Mapping[str, Any]], sf: float) -> float:
    """Sum of all included line items."""
    sf = parse_amount(sf)
    total = 0.0
    for item in items:
        if not item.get("included"):
            continue
        total += item_amount(item, sf)
    return total


def calculate_rehab_total(
    items: List[Mapping[str, Any]], sf: float, scope: Optional[str]
) -> float:
    """Base rehab plus included line items."""
    return calculate_base_rehab(sf, scope) + calculate_toggles_total(items, sf)


def toggle_breakdown(items: List[Mapping[str, Any]], sf: float) -> List[Dict]:
    """
    Itemized view of the included line items that add a positive amount.

    Args:
        items: Line items
        sf: Square footage

    Returns:
        List of rows with id, name, amount and (for per-sf items) rate
    """
    sf = parse_amount(sf)
    rows = []
    for item in items:
        if not item.get("included"):
            continue
        amount = item_amount(item, sf)
        if amount <= 0:
            continue
        row = {"id": item.get("id"), "name": item.get("name"), "amount": amount}
        if not is_flat_cost(item):
            row["rate"] = item_rate(item)
        rows.append(row)
    return rows


def compute_total_from_record(record: Optional[Mapping[str, Any]]) -> float:
    """
    Calculate the rehab total straight from a stored rehab record.

    Uses the same formula as the live calculator, so a record saved from a
    form produces the total that form displayed.

    Args:
        record: Stored record ({"items": [...], "meta": {"sf", "scope"}})

    Returns:
        Total rehab cost, 0.0 for a missing record
    """
    if not isinstance(record, Mapping):
        return 0.0
    meta = record.get("meta")
    if not isinstance(meta, Mapping):
        meta = {}
    items = record.get("items")
    if not isinstance(items, list):
        items = []
    items = [item for item in items if isinstance(item, Mapping)]
    return calculate_rehab_total(items, meta.get("sf"), meta.get("scope"))


def merge_catalog_items(stored_items: Optional[List[Any]]) -> List[Dict[str, Any]]:
    """
    Migrate stored line items onto the current catalog.

    Stored items keep their id, name and toggle; missing ids fall back to
    their position and missing names to "Item N". Non-HVAC items saved with
    only a 'cost' get it as their rate. Catalog items missing by name are
    appended with default values and ids above every existing id.

    Args:
        stored_items: Items as read from a saved record

    Returns:
        Line items ready for the live calculator
    """
    if not isinstance(stored_items, list):
        stored_items = []

    merged = []
    for idx, stored in enumerate(stored_items):
        if not isinstance(stored, Mapping):
            continue
        name = str(stored.get("name") or f"Item {idx + 1}")
        item_id = stored.get("id")
        item = {
            "id": int(parse_amount(item_id)) if item_id is not None else idx + 1,
            "name": name,
            "included": bool(stored.get("included", False)),
        }
        if name == HVAC:
            item["cost"] = parse_amount(stored.get("cost"))
            item["rate"] = 0.0
        else:
            item["rate"] = item_rate(stored)
            if stored.get("cost") is not None:
                item["cost"] = parse_amount(stored.get("cost"))
        merged.append(item)

    if not merged:
        return default_items()

    have = {item["name"] for item in merged}
    next_id = max([0] + [item["id"] for item in merged])
    for default in DEFAULT_ITEMS:
        if default["name"] in have:
            continue
        next_id += 1
        addition = copy.deepcopy(default)
        addition["id"] = next_id
        merged.append(addition)

    return merged
