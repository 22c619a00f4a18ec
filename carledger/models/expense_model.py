# carledger/models/expense_model.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Numeric,
    ForeignKey,
    Index,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from carledger.utils.database import Base


class Expense(Base):
    __tablename__ = "expenses"

    __table_args__ = (
        Index("ix_expenses_car_date", "car_id", "expense_date"),
        Index("ix_expenses_car_category", "car_id", "category"),
    )

    expense_id = Column(Integer, primary_key=True, index=True)

    car_id = Column(Integer, ForeignKey("cars.car_id", ondelete="CASCADE"), nullable=False, index=True)
    # who recorded the expense
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True, index=True)

    category = Column(String(30), nullable=False, index=True)
    subcategory = Column(String(120), nullable=True)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    expense_date = Column(DateTime, nullable=False)

    mileage = Column(Integer, nullable=True)
    location = Column(String(180), nullable=True)
    vendor = Column(String(180), nullable=True)

    # split as entered by the user for loan payments
    principal_amount = Column(Numeric(12, 2), nullable=True)
    interest_amount = Column(Numeric(12, 2), nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    car = relationship("Car")

    def __repr__(self) -> str:
        return f"<Expense(id={self.expense_id}, car_id={self.car_id}, category={self.category})>"
