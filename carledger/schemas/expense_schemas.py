# carledger/schemas/expense_schemas.py

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

from carledger.schemas.common import to_naive_utc, empty_to_none


class ExpenseCategory(str, Enum):
    FUEL = "fuel"
    MAINTENANCE = "maintenance"
    REPAIR = "repair"
    INSURANCE = "insurance"
    REGISTRATION = "registration"
    INSPECTION = "inspection"
    PARKING = "parking"
    TOLLS = "tolls"
    ACCESSORIES = "accessories"
    LOAN_PAYMENT = "loan_payment"
    OTHER = "other"


class ExpenseBase(BaseModel):
    category: ExpenseCategory
    subcategory: Optional[str] = None
    description: str
    amount: Decimal = Field(ge=0)
    expense_date: datetime
    mileage: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None
    vendor: Optional[str] = None
    principal_amount: Optional[Decimal] = Field(None, ge=0)
    interest_amount: Optional[Decimal] = Field(None, ge=0)

    @field_validator("expense_date")
    def naive_expense_date(cls, v):
        return to_naive_utc(v)

    @field_validator("subcategory", "location", "vendor", mode="before")
    def blank_to_none(cls, v):
        return empty_to_none(v)

    class Config:
        extra = "forbid"
        use_enum_values = True


class ExpenseCreate(ExpenseBase):
    car_id: int


class ExpenseUpdate(BaseModel):
    category: Optional[ExpenseCategory] = None
    subcategory: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(None, ge=0)  # keep Decimal (don't use float)
    expense_date: Optional[datetime] = None
    mileage: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None
    vendor: Optional[str] = None
    principal_amount: Optional[Decimal] = Field(None, ge=0)
    interest_amount: Optional[Decimal] = Field(None, ge=0)

    @field_validator("expense_date")
    def naive_expense_date(cls, v):
        return to_naive_utc(v)

    class Config:
        extra = "forbid"
        use_enum_values = True


class ExpenseOut(BaseModel):
    expense_id: int
    car_id: int
    user_id: Optional[int] = None
    category: str
    subcategory: Optional[str] = None
    description: str
    amount: float
    expense_date: datetime
    mileage: Optional[int] = None
    location: Optional[str] = None
    vendor: Optional[str] = None
    principal_amount: Optional[float] = None
    interest_amount: Optional[float] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ExpenseSummaryOut(BaseModel):
    total_expenses: float
    category_totals: Dict[str, float]
    expense_count: int


class UserExpenseTotalsOut(BaseModel):
    total_expenses: float
    car_count: int
