from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import UnauthorizedError
from storefront.repos.user_repo import UserRepo


class AuthService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def login_user_with_email_and_password(self, email: str, password: str) -> UserModel:
        user = self.repo.get_user_by_email(email)
        if not user or not user.is_password_match(password):
            raise UnauthorizedError("Incorrect email or password")
        return user
