"""
User API Schemas - Pydantic models for request/response
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, SecretStr

from bus_reservation.service.reservation.domain.enum.user_role import UserRole


class CreateUserRequest(BaseModel):
    """Create user request schema"""

    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: SecretStr = Field(
        ...,
        min_length=6,
        max_length=72,
        description='Password must be 6-72 characters (bcrypt limit)',
    )
    full_name: str = Field(..., min_length=1, max_length=100)
    phone_number: str = Field('', max_length=20)

    class Config:
        json_schema_extra = {
            'example': {
                'username': 'alice',
                'email': 'alice@example.com',
                'password': 'P@ssw0rd',
                'full_name': 'Alice Chen',
                'phone_number': '0912345678',
            }
        }


class LoginRequest(BaseModel):
    """User login request schema"""

    username: str = Field(..., min_length=1, max_length=50)
    password: SecretStr = Field(
        ..., min_length=1, max_length=72, description='User password (max 72 chars)'
    )

    class Config:
        json_schema_extra = {'example': {'username': 'alice', 'password': 'P@ssw0rd'}}


class UserResponse(BaseModel):
    """User response schema"""

    id: int
    username: str
    email: str
    full_name: str
    role: UserRole
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        json_schema_extra = {
            'example': {
                'id': 1,
                'username': 'alice',
                'email': 'alice@example.com',
                'full_name': 'Alice Chen',
                'role': 'customer',
                'last_login_at': None,
            }
        }
