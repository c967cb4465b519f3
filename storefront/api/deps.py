# storefront/api/deps.py
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import UnauthorizedError
from storefront.repos.user_repo import UserRepo
from storefront.services.lock_service import LockService
from storefront.services.token_service import TokenService, TokenType
from storefront.utils.settings import StoreConfig, get_config

bearer = HTTPBearer(auto_error=False)

# one redis connection pool per process
_lock_service = LockService()


def get_store_config() -> StoreConfig:
    return get_config()


def get_lock_service() -> LockService:
    return _lock_service


def get_token_service(config: StoreConfig = Depends(get_store_config)) -> TokenService:
    return TokenService(config)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    tokens: TokenService = Depends(get_token_service),
    db: Session = Depends(get_db),
) -> UserModel:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError()

    payload = tokens.verify_token(credentials.credentials, TokenType.ACCESS)

    try:
        user_id = int(payload["sub"])
    except ValueError:
        raise UnauthorizedError()

    user = UserRepo(db).get_user(user_id)
    if not user:
        raise UnauthorizedError()
    return user
