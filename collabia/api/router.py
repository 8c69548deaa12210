"""
Collabia — Main API Router

Aggregates all sub-routers under a single prefix so that ``collabia.main``
can mount the entire API surface with one ``include_router`` call.
"""

from fastapi import APIRouter

from collabia.api import discovery, interests, matches, swipes

router = APIRouter()

router.include_router(swipes.router, prefix="/swipes", tags=["Swipes"])
router.include_router(interests.router, prefix="/interests", tags=["Interests"])
router.include_router(matches.router, prefix="/matches", tags=["Matches"])
router.include_router(discovery.router, prefix="/discovery", tags=["Discovery"])
