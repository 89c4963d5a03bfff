"""API v1 router aggregator.

URL structure with /api/v1 prefix. All v1 endpoint routers are included here.
"""

from fastapi import APIRouter

from codenote.api.v1 import auth, notes

router = APIRouter()

# =============================================================================
# Authentication
# =============================================================================

router.include_router(auth.router, prefix="/auth", tags=["auth"])

# =============================================================================
# Core Resource Routers
# =============================================================================

router.include_router(notes.router, prefix="/notes", tags=["notes"])
