from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


# Loan query payloads use camelCase keys on the wire
class NextLoanPaymentOut(BaseModel):
    is_paid_off: bool
    next_due_date: Optional[datetime] = None
    monthly_payment: Optional[float] = None
    amount_due: Optional[float] = None
    paid_this_period: Optional[float] = None
    remaining_balance: Optional[float] = None
    payment_number: Optional[int] = None
    is_overdue: Optional[bool] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class LoanPaymentOut(BaseModel):
    expense_id: Optional[int] = None
    date: datetime
    amount: float
    principal_amount: float
    interest_amount: float

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class LoanDetailsOut(BaseModel):
    original_loan_amount: float
    loan_term: int
    interest_rate: float
    monthly_payment: float
    loan_bank: Optional[str] = None
    total_paid: float
    total_principal: float
    total_interest: float
    remaining_balance: float
    is_paid_off: bool
    months_early: int
    next_payment_date: Optional[datetime] = None
    is_overdue: bool
    payments: List[LoanPaymentOut]

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
