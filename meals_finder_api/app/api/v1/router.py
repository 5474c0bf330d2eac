"""
Top‑level router for version 1 of the API.

Aggregates the domain routers under a unified prefix.  Include new
domain routers here when they are added.
"""

from fastapi import APIRouter

from .endpoints import health, users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
# The health router defines its own "/health" path.
router.include_router(health.router, tags=["health"])
