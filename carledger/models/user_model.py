# carledger/models/user_model.py

from sqlalchemy import Boolean, Column, Integer, String, DateTime
from sqlalchemy.sql import func

from carledger.utils.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    email = Column(String(254), nullable=False, unique=True, index=True)
    name = Column(String(120), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.user_id}, email={self.email})>"
