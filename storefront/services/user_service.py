import bcrypt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import InternalError, InvalidRequestError, NotFoundError
from storefront.domain.schemas import RegisterIn
from storefront.repos.user_repo import UserRepo
from storefront.services.lock_service import LockService
from storefront.utils.settings import StoreConfig, get_config
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


class UserService:
    def __init__(self, db: Session, config: StoreConfig | None = None):
        self.repo = UserRepo(db)
        self.config = config or get_config()

    def create_user(self, payload: RegisterIn) -> UserModel:
        if self.repo.is_email_taken(payload.email):
            raise InvalidRequestError("Email already taken")

        user = UserModel(
            name=payload.name,
            email=payload.email.lower(),
            password=hash_password(payload.password),
            wallet_money=self.config.default_wallet_money,
            address=self.config.default_address,
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            # lost the race against a concurrent registration
            self.repo.db.rollback()
            raise InvalidRequestError("Email already taken")

        logger.info(f"Registered user {created.id}")
        return created

    def get_user_by_id(self, user_id: int) -> UserModel | None:
        return self.repo.get_user(user_id)

    def get_user_by_email(self, email: str) -> UserModel | None:
        return self.repo.get_user_by_email(email)

    def get_user_address_by_id(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def set_address(self, user: UserModel, address: str, lock_service: LockService) -> str:
        user_id = user.id
        with lock_service.user_lock(user_id):
            try:
                self.repo.refresh(user)
                user.address = address
                self.repo.save(user)
            except SQLAlchemyError as e:
                self.repo.db.rollback()
                logger.error(f"Failed to save address for user {user_id}: {e}")
                raise InternalError()

        logger.info(f"Address updated for user {user_id}")
        return user.address
