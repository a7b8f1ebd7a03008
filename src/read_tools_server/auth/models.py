"""
Authentication Models

Typed view of a verified one-time security token.
"""

from pydantic import BaseModel, Field, ConfigDict


class NonceContext(BaseModel):
    """
    Claims of a verified security token.

    The token proves the request comes from a page this server rendered; it
    carries no user identity.
    """

    action: str = Field(
        ...,
        min_length=1,
        description="Action the token was issued for.",
    )

    token_id: str = Field(
        ...,
        min_length=1,
        description="Unique identifier of the issued token.",
    )

    issued_at: int = Field(..., ge=0)
    expires_at: int = Field(..., ge=0)

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
