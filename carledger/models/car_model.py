# carledger/models/car_model.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Numeric,
    Boolean,
    ForeignKey,
    Index,
    JSON,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from carledger.utils.database import Base


class Car(Base):
    __tablename__ = "cars"

    __table_args__ = (
        Index("ix_cars_owner_archived", "owner_id", "is_archived"),
        Index("ix_cars_make_model", "make", "model"),
    )

    car_id = Column(Integer, primary_key=True, index=True)

    # basic info
    make = Column(String(80), nullable=False)
    model = Column(String(80), nullable=False)
    trim = Column(String(80), nullable=True)
    year = Column(Integer, nullable=False)
    nickname = Column(String(120), nullable=True)

    vin = Column(String(32), nullable=True, index=True)
    color = Column(String(40), nullable=True)
    purchase_date = Column(DateTime, nullable=True)
    purchase_mileage = Column(Integer, nullable=True)

    # MSRP breakdown
    base_msrp = Column(Numeric(12, 2), nullable=True)
    base_msrp_features = Column(JSON, nullable=True)
    optional_packages = Column(JSON, nullable=True)
    destination_delivery = Column(Numeric(12, 2), nullable=True)
    dealership_accessories = Column(JSON, nullable=True)
    buyer_accessories = Column(JSON, nullable=True)

    # purchase
    actual_purchase_price = Column(Numeric(12, 2), nullable=True)
    discount = Column(Numeric(12, 2), nullable=True)
    dealership_fees = Column(JSON, nullable=True)
    down_payments = Column(JSON, nullable=True)

    # trade-in
    trade_in_value = Column(Numeric(12, 2), nullable=True)
    trade_in_make = Column(String(80), nullable=True)
    trade_in_model = Column(String(80), nullable=True)
    trade_in_trim = Column(String(80), nullable=True)
    trade_in_year = Column(Integer, nullable=True)
    trade_in_vin = Column(String(32), nullable=True)
    trade_in_mileage = Column(Integer, nullable=True)

    salesperson = Column(JSON, nullable=True)

    # loan
    loan_amount = Column(Numeric(12, 2), nullable=True)
    loan_term = Column(Integer, nullable=True)  # months
    interest_rate = Column(Numeric(6, 3), nullable=True)  # annual %
    monthly_payment = Column(Numeric(12, 2), nullable=True)
    loan_bank = Column(String(120), nullable=True)

    # sale
    sale_price = Column(Numeric(12, 2), nullable=True)
    sale_mileage = Column(Integer, nullable=True)
    buyer_info = Column(JSON, nullable=True)

    # total loss
    total_loss_date = Column(DateTime, nullable=True)
    total_loss_mileage = Column(Integer, nullable=True)
    insurance_company = Column(String(120), nullable=True)
    claim_number = Column(String(80), nullable=True)
    insurance_payout = Column(Numeric(12, 2), nullable=True)
    accident_description = Column(Text, nullable=True)

    owner_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    # traded_in / sold / totaled / ...
    is_archived = Column(Boolean, nullable=False, default=False, server_default="false")
    archived_at = Column(DateTime, nullable=True)
    archived_reason = Column(String(40), nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    owner = relationship("User")
    shares = relationship(
        "CarShare",
        back_populates="car",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Car(id={self.car_id}, {self.year} {self.make} {self.model})>"
