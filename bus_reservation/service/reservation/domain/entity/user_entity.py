from datetime import datetime
from typing import Optional

import attrs
from pydantic import SecretStr

from bus_reservation.platform.exception.exceptions import InvalidInputError, LoginError
from bus_reservation.service.reservation.domain.enum.user_role import UserRole


@attrs.define
class UserEntity:
    username: str = ''
    email: str = ''
    full_name: str = ''
    phone_number: str = ''
    hashed_password: str = attrs.field(default='', repr=False)  # Hide from repr for security
    id: Optional[int] = None
    role: UserRole = UserRole.CUSTOMER
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    def validate_profile(self) -> None:
        if not self.username.strip():
            raise InvalidInputError('Username is required')
        if not self.email.strip():
            raise InvalidInputError('Email is required')
        if not self.full_name.strip():
            raise InvalidInputError('Full name is required')

    @staticmethod
    def validate_user_exists(user_entity: Optional['UserEntity']) -> 'UserEntity':
        if not user_entity:
            raise LoginError('LOGIN_BAD_CREDENTIALS')
        return user_entity

    def set_password(self, plain_password: str, password_hasher) -> None:
        """Set password using provided password hasher"""
        from bus_reservation.service.reservation.app.interface.i_password_hasher import (
            IPasswordHasher,
        )

        if not isinstance(password_hasher, IPasswordHasher):
            raise TypeError('password_hasher must implement IPasswordHasher interface')
        if len(plain_password) < 6:
            raise InvalidInputError('Password must be at least 6 characters')

        self.hashed_password = password_hasher.hash_password(
            plain_password=SecretStr(plain_password)
        )
