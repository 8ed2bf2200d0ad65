"""
Cross-calculator lookup.

How one calculator finds the saved project of another:
  1. an explicit pick (address key or record id) wins;
  2. otherwise an exact address match after trimming and case-folding;
  3. otherwise list stores fall back to their last record, while
     address-keyed stores report no match.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

LookupResult = Tuple[Union[str, int, None], Dict[str, Any]]


def normalize_address(address: Optional[str]) -> str:
    return str(address or "").strip().casefold()


def find_by_address(
    store: Union[Mapping[str, Any], List[Dict[str, Any]]], address: Optional[str]
) -> Optional[LookupResult]:
    """Exact normalized-address match, no fallback."""
    wanted = normalize_address(address)
    if not wanted:
        return None

    if isinstance(store, Mapping):
        for key, record in store.items():
            if normalize_address(key) == wanted:
                return key, record
        return None

    for record in store:
        if normalize_address(record.get("address")) == wanted:
            return record.get("id"), record
    return None


def resolve(
    store: Union[Mapping[str, Any], List[Dict[str, Any]]],
    address: Optional[str] = None,
    pick: Union[str, int, None] = None,
) -> Optional[LookupResult]:
    """
    Resolve the record another calculator should pull from.

    Args:
        store: Address-keyed mapping or ordered list of records
        address: Address typed in the pulling calculator
        pick: Explicit selection, an address key or a record id

    Returns:
        (key or id, record), or None when nothing resolves
    """
    if not store:
        return None

    if pick not in (None, ""):
        if isinstance(store, Mapping):
            record = store.get(pick)
            return (pick, record) if record is not None else None
        for record in store:
            if str(record.get("id")) == str(pick):
                return record.get("id"), record
        return None

    match = find_by_address(store, address)
    if match is not None:
        return match

    if isinstance(store, Mapping):
        return None

    last = store[-1]
    return last.get("id"), last
