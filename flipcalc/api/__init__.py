"""
API routes for the flip calculators.
"""

from fastapi import APIRouter

from flipcalc.api import max_offer, profit, rehab

router = APIRouter()

# Include sub-routers
router.include_router(rehab.router, prefix="/rehab", tags=["rehab"])
router.include_router(max_offer.router, prefix="/max-offer", tags=["max-offer"])
router.include_router(profit.router, prefix="/profit", tags=["profit"])
