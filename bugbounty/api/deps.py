"""
Shared FastAPI dependencies.
"""

from __future__ import annotations

from fastapi import Request

from bugbounty.storage import MetadataStorage


def get_storage(request: Request) -> MetadataStorage:
    """The storage collaborator created at startup."""
    return request.app.state.storage
