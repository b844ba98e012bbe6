"""
User-related Pydantic schemas for request/response validation.
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class RegistrationRequest(BaseModel):
    """Registration body; unknown keys are kept as profile fields."""
    
    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "name": "Ada Lovelace",
                "username": "ada",
                "password": "analytical-engine",
                "city": "London"
            }
        }
    )
    
    name: str = Field(..., description="Display name")
    username: str = Field(..., min_length=1, max_length=255, description="Unique username")
    password: str = Field(..., min_length=1, description="Plaintext password")
    
    @property
    def profile_fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class AuthenticationRequest(BaseModel):
    """Credentials exchanged for a token."""
    
    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class TokenResponse(BaseModel):
    token: str = Field(..., description="Bearer token")


class ProfileResponse(BaseModel):
    """The only user fields a token holder can read back."""
    
    name: Optional[str] = Field(None, description="Display name")
    username: str = Field(..., description="Username")


class DeleteAccountRequest(BaseModel):
    password: str = Field(..., description="Current password")


class ErrorResponse(BaseModel):
    """Error body returned by every failing route."""
    
    detail: str
    error_code: str
