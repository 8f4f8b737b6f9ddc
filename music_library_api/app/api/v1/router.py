"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers under a unified
prefix.  When new endpoints are added, update this file to include
their routers.
"""

from fastapi import APIRouter

from .endpoints import health, songs

router = APIRouter()

router.include_router(songs.router, prefix="/songs", tags=["songs"])
router.include_router(health.router, prefix="/health", tags=["health"])
