"""
API Router.

Aggregates all endpoint routers. Paths are unversioned.
"""

from fastapi import APIRouter
from zapshift.app.api.endpoints import cashouts, parcels, payments, riders, trackings, users

router = APIRouter()

router.include_router(users.router)
router.include_router(parcels.router)
router.include_router(payments.router)
router.include_router(trackings.router)
router.include_router(riders.router)
router.include_router(cashouts.router)
