# app/data/models/user.py
from sqlalchemy import Column, Integer, String, Numeric, CheckConstraint

from app.data.database import Base
from app.utils.settings import DEFAULT_ADDRESS, DEFAULT_WALLET_MONEY


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)

    wallet_money = Column(Numeric(12, 2), nullable=False, default=DEFAULT_WALLET_MONEY)
    address = Column(String, nullable=False, default=DEFAULT_ADDRESS)

    __table_args__ = (CheckConstraint("wallet_money >= 0", name="ck_user_wallet_non_negative"),)

    def has_set_non_default_address(self) -> bool:
        return bool(self.address) and self.address != DEFAULT_ADDRESS
