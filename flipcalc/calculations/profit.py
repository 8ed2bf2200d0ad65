"""
Flip Profit Calculations

Deal economics for a fix-and-flip:

    base costs          = purchase + rehab + buy closing + sell closing + contingency
    gross profit        = ARV - base costs
    financing and carry = points + interest + draw fees + utilities + taxes
    net profit          = gross profit - financing and carry

Gross profit leaves out financing and carry.

Percentages are entered as whole numbers (2 means 2%).
"""

from dataclasses import dataclass, asdict
from typing import Dict


@dataclass
class ProfitBreakdown:
    """Every derived figure shown by the profit calculator."""

    arv: float
    purchase: float
    rehab: float

    closing_buy_cost: float
    closing_sell_cost: float
    contingency_cost: float

    loan_amount: float
    points_cost: float
    monthly_interest: float
    interest_cost: float
    draw_fees: float
    utilities_cost: float
    taxes_cost: float

    base_costs: float
    financing_and_carry: float
    total_costs: float

    gross_profit: float
    net_profit: float
    margin: float  # gross profit / ARV
    net_margin: float  # net profit / ARV

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def calculate_loan_amount(
    purchase: float, ltv_pct: float, loan_amount_override: float = 0.0
) -> float:
    """
    Loan amount used for points and interest.

    A positive manual override always wins; otherwise the loan is sized
    from the purchase price at the LTV percentage.
    """
    if loan_amount_override > 0:
        return loan_amount_override
    return purchase * (ltv_pct / 100)


def calculate_profit(
    arv: float,
    purchase: float,
    rehab: float,
    closing_buy_pct: float = 0.0,
    closing_sell_pct: float = 0.0,
    contingency_pct: float = 0.0,
    carry_months: float = 0.0,
    utilities_monthly: float = 0.0,
    taxes_monthly: float = 0.0,
    rate_apr: float = 0.0,
    points_pct: float = 0.0,
    ltv_pct: float = 0.0,
    loan_amount_override: float = 0.0,
    num_draws: float = 0.0,
    draw_fee: float = 0.0,
) -> ProfitBreakdown:
    """
    Calculate gross and net profit for a flip.

    Args:
        arv: After repair value (sale price)
        purchase: Purchase price
        rehab: Rehab budget
        closing_buy_pct: Buy-side closing costs, % of purchase
        closing_sell_pct: Sell-side closing costs, % of ARV
        contingency_pct: Contingency, % of rehab
        carry_months: Months the property is held
        utilities_monthly: Utilities per month
        taxes_monthly: Property taxes per month
        rate_apr: Loan interest rate, annual %
        points_pct: Origination points, % of loan amount
        ltv_pct: Loan-to-value, % of purchase
        loan_amount_override: Manual loan amount (used when > 0)
        num_draws: Number of construction draws
        draw_fee: Fee charged per draw

    Returns:
        ProfitBreakdown with every intermediate figure
    """
    closing_buy_cost = (closing_buy_pct / 100) * purchase
    closing_sell_cost = (closing_sell_pct / 100) * arv
    contingency_cost = (contingency_pct / 100) * rehab

    # Financing
    loan_amount = calculate_loan_amount(purchase, ltv_pct, loan_amount_override)
    points_cost = (points_pct / 100) * loan_amount
    monthly_interest = loan_amount * (rate_apr / 100 / 12)
    interest_cost = monthly_interest * carry_months
    draw_fees = num_draws * draw_fee

    # Carry
    utilities_cost = utilities_monthly * carry_months
    taxes_cost = taxes_monthly * carry_months

    base_costs = purchase + rehab + closing_buy_cost + closing_sell_cost + contingency_cost
    financing_and_carry = (
        points_cost + interest_cost + draw_fees + utilities_cost + taxes_cost
    )

    gross_profit = arv - base_costs
    net_profit = gross_profit - financing_and_carry
    margin = gross_profit / arv if arv > 0 else 0.0
    net_margin = net_profit / arv if arv > 0 else 0.0

    return ProfitBreakdown(
        arv=arv,
        purchase=purchase,
        rehab=rehab,
        closing_buy_cost=closing_buy_cost,
        closing_sell_cost=closing_sell_cost,
        contingency_cost=contingency_cost,
        loan_amount=loan_amount,
        points_cost=points_cost,
        monthly_interest=monthly_interest,
        interest_cost=interest_cost,
        draw_fees=draw_fees,
        utilities_cost=utilities_cost,
        taxes_cost=taxes_cost,
        base_costs=base_costs,
        financing_and_carry=financing_and_carry,
        total_costs=base_costs + financing_and_carry,
        gross_profit=gross_profit,
        net_profit=net_profit,
        margin=margin,
        net_margin=net_margin,
    )
