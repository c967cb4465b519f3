# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_store_config, get_token_service
from storefront.data.database import get_db
from storefront.domain.schemas import AuthOut, LoginIn, RegisterIn, UserRead
from storefront.services.auth_service import AuthService
from storefront.services.token_service import TokenService
from storefront.services.user_service import UserService
from storefront.utils.settings import StoreConfig

router = APIRouter(prefix="/v1/auth", tags=["auth"])


@router.post("/register", response_model=AuthOut, status_code=201)
def register(
    payload: RegisterIn,
    db: Session = Depends(get_db),
    config: StoreConfig = Depends(get_store_config),
    tokens: TokenService = Depends(get_token_service),
):
    user = UserService(db, config).create_user(payload)
    return {"user": UserRead.model_validate(user), "tokens": tokens.generate_auth_tokens(user)}


@router.post("/login", response_model=AuthOut)
def login(
    payload: LoginIn,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    user = AuthService(db).login_user_with_email_and_password(payload.email, payload.password)
    return {"user": UserRead.model_validate(user), "tokens": tokens.generate_auth_tokens(user)}
