# carledger/models/car_share_model.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from carledger.utils.database import Base


class CarShare(Base):
    __tablename__ = "car_shares"

    share_id = Column(Integer, primary_key=True, index=True)

    car_id = Column(Integer, ForeignKey("cars.car_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    # owner / shared
    role = Column(String(20), nullable=False, server_default="shared")

    shared_at = Column(DateTime, server_default=func.now(), nullable=False)
    shared_by = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)

    car = relationship("Car", back_populates="shares")
    user = relationship("User", foreign_keys=[user_id])

    __table_args__ = (
        UniqueConstraint("car_id", "user_id", name="uq_car_share_car_user"),
    )
