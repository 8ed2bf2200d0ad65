"""
Calculator engines: live form state plus save/load/delete and cross-calculator pulls.
"""

from flipcalc.engines.base import ActionResult, CalculatorEngine, Notice, user_action
from flipcalc.engines.rehab import RehabEngine, RehabState, LineItem
from flipcalc.engines.max_offer import MaxOfferEngine, MaxOfferState
from flipcalc.engines.profit import ProfitEngine, ProfitState

__all__ = [
    "ActionResult",
    "CalculatorEngine",
    "Notice",
    "user_action",
    "RehabEngine",
    "RehabState",
    "LineItem",
    "MaxOfferEngine",
    "MaxOfferState",
    "ProfitEngine",
    "ProfitState",
]
