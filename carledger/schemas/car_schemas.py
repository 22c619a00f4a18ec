# carledger/schemas/car_schemas.py

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from carledger.schemas.common import to_naive_utc, empty_to_none


# ----------------------------
# Nested items (stored as JSON on the car row)
# ----------------------------
class OptionalPackage(BaseModel):
    name: str
    price: float
    features: Optional[List[str]] = None


class PricedItem(BaseModel):
    name: str
    price: float


class BuyerAccessory(BaseModel):
    name: str = Field(..., min_length=1)
    price: float = Field(ge=0)
    date_added: datetime

    @field_validator("date_added")
    def naive_date_added(cls, v):
        return to_naive_utc(v)


class DealershipFee(BaseModel):
    name: str
    amount: float


class DownPayment(BaseModel):
    type: Literal["check", "credit_card", "cash", "other"]
    amount: float
    description: Optional[str] = None


class Salesperson(BaseModel):
    name: str
    dealership: str
    address: str
    phone: Optional[str] = None
    email: Optional[str] = None


class BuyerInfo(BaseModel):
    business_name: Optional[str] = None
    person_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None


# ----------------------------
# Requests
# ----------------------------
class CarCreate(BaseModel):
    make: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    trim: Optional[str] = None
    year: int = Field(ge=1886, le=2100)
    nickname: Optional[str] = None

    @field_validator("trim", "nickname", mode="before")
    def blank_to_none(cls, v):
        return empty_to_none(v)

    class Config:
        extra = "forbid"


class CarBasicUpdate(CarCreate):
    vin: Optional[str] = None
    color: Optional[str] = None

    @field_validator("vin", "color", mode="before")
    def blank_extra_to_none(cls, v):
        return empty_to_none(v)


class CarPurchaseUpdate(BaseModel):
    purchase_date: Optional[datetime] = None
    purchase_mileage: Optional[int] = Field(None, ge=0)
    base_msrp: Optional[Decimal] = None
    base_msrp_features: Optional[List[str]] = None
    optional_packages: Optional[List[OptionalPackage]] = None
    destination_delivery: Optional[Decimal] = None
    dealership_accessories: Optional[List[PricedItem]] = None
    actual_purchase_price: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    dealership_fees: Optional[List[DealershipFee]] = None
    down_payments: Optional[List[DownPayment]] = None
    trade_in_value: Optional[Decimal] = None
    trade_in_make: Optional[str] = None
    trade_in_model: Optional[str] = None
    trade_in_trim: Optional[str] = None
    trade_in_year: Optional[int] = None
    trade_in_vin: Optional[str] = None
    trade_in_mileage: Optional[int] = Field(None, ge=0)
    salesperson: Optional[Salesperson] = None

    @field_validator("purchase_date")
    def naive_purchase_date(cls, v):
        return to_naive_utc(v)

    class Config:
        extra = "forbid"


class CarLoanUpdate(BaseModel):
    loan_amount: Optional[Decimal] = Field(None, gt=0)
    loan_term: Optional[int] = Field(None, gt=0)
    interest_rate: Optional[Decimal] = Field(None, ge=0)
    monthly_payment: Optional[Decimal] = Field(None, gt=0)
    loan_bank: Optional[str] = None

    @field_validator("loan_bank", mode="before")
    def blank_bank(cls, v):
        return empty_to_none(v)

    class Config:
        extra = "forbid"


class CarArchive(BaseModel):
    reason: str = Field(..., min_length=1, max_length=40)


class CarTotaled(BaseModel):
    total_loss_date: datetime
    total_loss_mileage: int = Field(ge=0)
    insurance_company: Optional[str] = None
    claim_number: Optional[str] = None
    insurance_payout: Optional[Decimal] = None
    accident_description: Optional[str] = None

    @field_validator("total_loss_date")
    def naive_total_loss_date(cls, v):
        return to_naive_utc(v)


class CarSold(BaseModel):
    sale_price: Decimal = Field(ge=0)
    sale_mileage: int = Field(ge=0)
    buyer_info: BuyerInfo


class ShareCreate(BaseModel):
    user_email: str

    @field_validator("user_email")
    def normalize_email(cls, v):
        return v.strip().lower()


# ----------------------------
# Responses
# ----------------------------
class CarOut(BaseModel):
    car_id: int
    owner_id: int

    make: str
    model: str
    trim: Optional[str] = None
    year: int
    nickname: Optional[str] = None
    vin: Optional[str] = None
    color: Optional[str] = None

    purchase_date: Optional[datetime] = None
    purchase_mileage: Optional[int] = None
    base_msrp: Optional[float] = None
    base_msrp_features: Optional[List[str]] = None
    optional_packages: Optional[List[OptionalPackage]] = None
    destination_delivery: Optional[float] = None
    dealership_accessories: Optional[List[PricedItem]] = None
    buyer_accessories: Optional[List[BuyerAccessory]] = None
    actual_purchase_price: Optional[float] = None
    discount: Optional[float] = None
    dealership_fees: Optional[List[DealershipFee]] = None
    down_payments: Optional[List[DownPayment]] = None

    trade_in_value: Optional[float] = None
    trade_in_make: Optional[str] = None
    trade_in_model: Optional[str] = None
    trade_in_trim: Optional[str] = None
    trade_in_year: Optional[int] = None
    trade_in_vin: Optional[str] = None
    trade_in_mileage: Optional[int] = None
    salesperson: Optional[Salesperson] = None

    loan_amount: Optional[float] = None
    loan_term: Optional[int] = None
    interest_rate: Optional[float] = None
    monthly_payment: Optional[float] = None
    loan_bank: Optional[str] = None

    sale_price: Optional[float] = None
    sale_mileage: Optional[int] = None
    buyer_info: Optional[BuyerInfo] = None

    total_loss_date: Optional[datetime] = None
    total_loss_mileage: Optional[int] = None
    insurance_company: Optional[str] = None
    claim_number: Optional[str] = None
    insurance_payout: Optional[float] = None
    accident_description: Optional[str] = None

    is_archived: bool = False
    archived_at: Optional[datetime] = None
    archived_reason: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CarListOut(CarOut):
    is_shared: bool = False
    share_role: Literal["owner", "shared"] = "owner"


class CarUserOut(BaseModel):
    user_id: int
    email: str
    name: Optional[str] = None
    role: Literal["owner", "shared"]
