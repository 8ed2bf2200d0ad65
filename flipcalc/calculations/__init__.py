"""
Calculator Formulas

Pure calculation modules for the flip calculators. Nothing here touches
storage; every function is deterministic in its inputs.
"""

from flipcalc.calculations import parsing, rehab, max_offer, profit

__all__ = ["parsing", "rehab", "max_offer", "profit"]
