"""
API routes for the calculators.
"""

from fastapi import APIRouter

from app.api import calculations

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
