"""Access token claim models."""

from typing import Any

from pydantic import BaseModel, Field

from src.marketplace.entities.user.entity import Role


class TokenClaims(BaseModel):
    """Structured representation of the claims inside an access token."""

    user_id: int = Field(description="Identifier of the authenticated user")
    role: Role = Field(description="Role of the user at issuance time")
    subject: str = Field(description="Subject (user email)")
    issued_at: int = Field(description="Issued at")
    expires_at: int = Field(description="Expiration time")

    @classmethod
    def from_jwt_payload(cls, payload: dict[str, Any]) -> "TokenClaims":
        """Create TokenClaims from a decoded JWT payload dictionary."""
        return cls(
            user_id=payload["user_id"],
            role=payload["role"],
            subject=payload["sub"],
            issued_at=payload.get("iat", 0),
            expires_at=payload["exp"],
        )

    def has_role(self, *allowed: Role) -> bool:
        return self.role in allowed
