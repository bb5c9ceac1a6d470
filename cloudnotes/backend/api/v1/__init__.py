"""
API Version 1 Router.

Aggregates all v1 endpoint routers. Mounted under application.api_prefix.
"""

from fastapi import APIRouter

from cloudnotes.backend.api.v1.endpoints import identity, notes, trash, upload

router = APIRouter()

router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(trash.router, prefix="/trash", tags=["trash"])
router.include_router(upload.router, prefix="/upload", tags=["attachments"])
router.include_router(identity.router, prefix="/me", tags=["identity"])
