"""
Max Offer Calculations

Maximum allowable offer at fixed loan-to-value tiers:
    tier amount        = ARV x LTV
    offer after rehab  = ARV x LTV - rehab

Offers are not clamped; a negative offer means the deal does not work at
that tier and is shown as-is.
"""

from typing import Dict, List, Sequence

LTV_TIERS = (0.80, 0.75, 0.70, 0.65)


def calculate_tier_amount(arv: float, ltv: float) -> float:
    """Loan-to-value amount for a single tier."""
    return arv * ltv


def calculate_offer_after_rehab(arv: float, rehab: float, ltv: float) -> float:
    """Maximum offer for a single tier once rehab is paid for."""
    return arv * ltv - rehab


def calculate_offer_tiers(
    arv: float, rehab: float, tiers: Sequence[float] = LTV_TIERS
) -> List[Dict]:
    """
    Calculate the offer table for every LTV tier.

    Args:
        arv: After repair value
        rehab: Rehab cost
        tiers: LTV ratios as decimals, highest first

    Returns:
        One row per tier, in tier order
    """
    return [
        {
            "ltv": ltv,
            "label": f"{ltv * 100:.0f}% LTV",
            "tier_amount": calculate_tier_amount(arv, ltv),
            "offer_after_rehab": calculate_offer_after_rehab(arv, rehab, ltv),
        }
        for ltv in tiers
    ]
