"""Schemas for the account registration endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field, StrictStr


class RegisterUserRequest(BaseModel):
    """JSON body of ``POST /register_user``."""

    velux_user_id: StrictStr = Field(..., min_length=1, description="Velux ACTIVE login.")
    velux_password: StrictStr = Field(..., min_length=1, description="Velux ACTIVE password.")


__all__ = ["RegisterUserRequest"]
