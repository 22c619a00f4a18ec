from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from carledger.models.user_model import User
from carledger.schemas.common import to_naive_utc
from carledger.schemas.loan_schema import LoanDetailsOut, NextLoanPaymentOut
from carledger.utils.car_access import (
    get_accessible_car,
    get_current_user,
    list_loan_payments,
    loan_terms_for,
)
from carledger.utils.clock import utcnow
from carledger.utils.database import get_db
from carledger.utils.loan_calculations import build_loan_details, build_next_payment
from carledger.utils.settings import get_paid_off_precedence

router = APIRouter(prefix="/loans", tags=["Loans"])


def resolve_as_of(as_of: Optional[datetime]) -> datetime:
    return to_naive_utc(as_of) if as_of else utcnow()


@router.get(
    "/{car_id}/next-payment",
    response_model=Optional[NextLoanPaymentOut],
    response_model_exclude_none=True,
)
def get_next_loan_payment(
        car_id: int,
        as_of: Optional[datetime] = Query(None, description="Evaluate as of this instant (default: now)"),
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_accessible_car(db, car_id, user)

    terms = loan_terms_for(car)
    if terms is None or terms.purchase_date is None:
        return None

    return build_next_payment(
        terms,
        list_loan_payments(db, car_id),
        now=resolve_as_of(as_of),
        precedence=get_paid_off_precedence(db),
    )


@router.get("/{car_id}/details", response_model=Optional[LoanDetailsOut])
def get_loan_details(
        car_id: int,
        as_of: Optional[datetime] = Query(None, description="Evaluate as of this instant (default: now)"),
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_accessible_car(db, car_id, user)

    terms = loan_terms_for(car)
    if terms is None:
        return None

    return build_loan_details(
        terms,
        list_loan_payments(db, car_id),
        now=resolve_as_of(as_of),
        precedence=get_paid_off_precedence(db),
    )
