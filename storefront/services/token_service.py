# storefront/services/token_service.py
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

import jwt

from storefront.domain.errors import UnauthorizedError
from storefront.utils.settings import StoreConfig, get_config
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ALGORITHM = "HS256"


class TokenType(str, Enum):
    ACCESS = "ACCESS"


class TokenService:
    """
    Mints and verifies signed, time-boxed access tokens.
    Tokens are not persisted; validity depends only on signature and exp.
    """

    def __init__(self, config: StoreConfig | None = None):
        self.config = config or get_config()

    def generate_token(
        self,
        user_id: int,
        expires: int,
        token_type: str,
        secret: str | None = None,
    ) -> str:
        """
        :param user_id: subject of the token
        :param expires: expiry, seconds since unix epoch
        :param token_type: token type, eg. ACCESS or REFRESH
        :param secret: signing key, defaults to the configured secret
        """
        payload = {
            "sub": str(user_id),
            "iat": int(time.time()),
            "exp": int(expires),
            "type": token_type.value if isinstance(token_type, TokenType) else str(token_type),
        }
        return jwt.encode(payload, secret or self.config.jwt_secret, algorithm=ALGORITHM)

    def generate_auth_tokens(self, user) -> Dict[str, Any]:
        access_expires = int(time.time()) + self.config.access_expiration_minutes * 60
        token = self.generate_token(user.id, access_expires, TokenType.ACCESS)

        return {
            "access": {
                "token": token,
                "expires": datetime.fromtimestamp(access_expires, tz=timezone.utc).isoformat(),
            },
        }

    def verify_token(
        self,
        token: str,
        expected_type: str = TokenType.ACCESS,
        now: float | None = None,
        secret: str | None = None,
    ) -> Dict[str, Any]:
        # exp is checked below against `now` so callers can pin the clock
        try:
            payload = jwt.decode(
                token,
                secret or self.config.jwt_secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "require": ["sub", "exp", "type"]},
            )
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected token: {e}")
            raise UnauthorizedError()

        now = time.time() if now is None else now
        if now >= payload["exp"]:
            raise UnauthorizedError()

        if payload["type"] != TokenType(expected_type).value:
            raise UnauthorizedError()

        return payload
