from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.data.models.user import UserModel
from app.domain.errors import InternalError, NotFoundError
from app.repos.user_repo import UserRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def get_user_by_id(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def set_address(self, user: UserModel, address: str) -> str:
        user.address = address
        try:
            self.repo.save(user)
        except SQLAlchemyError as e:
            self.repo.db.rollback()
            logger.error(f"Error while saving address of {user.email}: {e}")
            raise InternalError("Setting address failed") from e
        return user.address
