"""
JWT cookie authentication
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import HTTPException, status
import jwt

from bus_reservation.platform.config.core_setting import settings
from bus_reservation.service.reservation.domain.entity.user_entity import UserEntity
from bus_reservation.service.reservation.domain.enum.user_role import UserRole


AUTH_COOKIE_NAME = 'bus_reservation_auth'


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    @property
    def max_age_seconds(self) -> int:
        return self.token_expire_minutes * 60

    def create_jwt_token(self, user_entity: UserEntity) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(user_entity.id),
            'exp': now + timedelta(minutes=self.token_expire_minutes),
            'iat': now,
            'user_id': user_entity.id,
            'username': user_entity.username,
            'email': user_entity.email,
            'full_name': user_entity.full_name,
            'role': user_entity.role.value,
        }

        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid token')

    def get_current_user_info_from_jwt(self, token: Optional[str]) -> UserEntity:
        if not token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail='Not authenticated'
            )

        payload = self.decode_jwt_token(token)

        user_id = payload.get('user_id')
        username = payload.get('username')
        role = payload.get('role')
        if not user_id or not username or not role:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid token')

        # Rebuild UserEntity from JWT payload (no DB query)
        return UserEntity(
            id=user_id,
            username=username,
            email=payload.get('email', ''),
            full_name=payload.get('full_name', ''),
            role=UserRole(role),
        )
