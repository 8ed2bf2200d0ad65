"""
Seed the database with a demo flip: a rehab estimate, a max offer built
from it, and a profit projection that pulls from both.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from flipcalc.db.database import SessionLocal, init_db
from flipcalc.engines import (
    MaxOfferEngine,
    MaxOfferState,
    ProfitEngine,
    ProfitState,
    RehabEngine,
)
from flipcalc.services.record_store import RecordStore, REHAB_STORE

DEMO_ADDRESS = "1418 Magnolia St"


def seed(db):
    """Save the demo projects. Returns False if they already exist."""
    store = RecordStore(db)

    rehab = RehabEngine(store)
    if DEMO_ADDRESS in store.get_all(REHAB_STORE):
        print(f"Demo projects for '{DEMO_ADDRESS}' already exist")
        return False

    # 1,400 sf mid-tier rehab with a new roof and HVAC
    rehab.state.address = DEMO_ADDRESS
    rehab.state.sf = 1400
    rehab.state.scope = "mid"
    rehab.set_item_field(1, "included", True)
    rehab.set_item_field(1, "rate", 6)
    rehab.set_item_field(3, "included", True)
    rehab.set_item_field(3, "cost", 7500)
    result = rehab.save()
    print(f"Rehab: {result.notice.message} Total ${rehab.total:,.0f}")

    offer = MaxOfferEngine(store, MaxOfferState(address=DEMO_ADDRESS, arv="285,000"))
    offer.pull_rehab()
    result = offer.save()
    print(f"Max offer: {result.notice.message}")
    for tier in offer.tiers():
        print(f"  {tier['label']}: ${tier['offer_after_rehab']:,.0f}")

    profit = ProfitEngine(store, ProfitState(address=DEMO_ADDRESS, purchase="165,000"))
    profit.pull_arv()
    profit.pull_rehab()
    result = profit.save()
    breakdown = profit.breakdown()
    print(f"Profit: {result.notice.message}")
    print(f"  Gross ${breakdown.gross_profit:,.0f}, net ${breakdown.net_profit:,.0f}")
    return True


def main():
    init_db()
    db = SessionLocal()

    try:
        seed(db)
    except Exception as e:
        print(f"Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
