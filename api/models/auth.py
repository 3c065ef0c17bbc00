"""
Pydantic models for identity endpoints.
"""
from pydantic import BaseModel


class ResendVerificationRequest(BaseModel):
    """Request body for resending the verification e-mail."""

    email: str = ""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"email": "user@example.com"}
            ]
        }
    }
