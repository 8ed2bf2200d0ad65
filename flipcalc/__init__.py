"""
Flip Calculators: rehab, max offer and profit calculators sharing saved projects.
"""

__version__ = "0.1.0"
