"""
app/schemas/errors.py

Error envelope shared by every endpoint.
"""

from __future__ import annotations

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """
    API response model for a failed request.
    """

    error: str
