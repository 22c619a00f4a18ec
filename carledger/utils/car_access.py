"""
Record-store access shared by the routers.

Every car read or write goes through the owner-or-shared check here. The
loan helpers at the bottom turn rows into the plain LoanTerms /
PaymentRecord data the calculators work on.
"""

import logging
from typing import List, Optional, Tuple

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from carledger.core.config import AUTH_USER_HEADER
from carledger.models.car_model import Car
from carledger.models.car_share_model import CarShare
from carledger.models.expense_model import Expense
from carledger.models.user_model import User
from carledger.utils.database import get_db
from carledger.utils.loan_calculations import LoanTerms, PaymentRecord, to_decimal

logger = logging.getLogger(__name__)

LOAN_PAYMENT_CATEGORY = "loan_payment"


# -------------------------------------------------
# Caller identity
# -------------------------------------------------
def get_current_user(
        x_user_id: Optional[str] = Header(None, alias=AUTH_USER_HEADER),
        db: Session = Depends(get_db),
) -> User:
    if not x_user_id or not x_user_id.strip().isdigit():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    user = db.query(User).filter(User.user_id == int(x_user_id)).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def get_admin_user(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        logger.info("user %s denied settings change", user.user_id)
        raise HTTPException(status_code=403, detail="Only an administrator can change settings")
    return user


# -------------------------------------------------
# Car access
# -------------------------------------------------
def get_share(db: Session, car_id: int, user_id: int) -> Optional[CarShare]:
    return (
        db.query(CarShare)
        .filter(CarShare.car_id == car_id, CarShare.user_id == user_id)
        .first()
    )


def has_car_access(db: Session, car: Car, user_id: int) -> bool:
    return car.owner_id == user_id or get_share(db, car.car_id, user_id) is not None


def get_car_or_404(db: Session, car_id: int) -> Car:
    car = db.query(Car).filter(Car.car_id == car_id).first()
    if not car:
        raise HTTPException(status_code=404, detail="Car not found")
    return car


def get_accessible_car(db: Session, car_id: int, user: User) -> Car:
    """Owner or shared user; 404 for unknown cars, 403 otherwise."""
    car = get_car_or_404(db, car_id)
    if not has_car_access(db, car, user.user_id):
        logger.info("user %s denied access to car %s", user.user_id, car_id)
        raise HTTPException(status_code=403, detail="Access denied")
    return car


def get_owned_car(db: Session, car_id: int, user: User, action: str) -> Car:
    car = get_car_or_404(db, car_id)
    if car.owner_id != user.user_id:
        raise HTTPException(status_code=403, detail=f"Only the owner can {action}")
    return car


def list_accessible_cars(db: Session, user: User) -> List[Tuple[Car, bool, str]]:
    """
    Active (non-archived) cars the user owns, then those shared with them.
    Returns (car, is_shared, role) tuples.
    """
    owned = (
        db.query(Car)
        .filter(Car.owner_id == user.user_id, Car.is_archived.is_(False))
        .order_by(Car.car_id.asc())
        .all()
    )

    shares = (
        db.query(CarShare)
        .filter(CarShare.user_id == user.user_id)
        .order_by(CarShare.share_id.asc())
        .all()
    )

    out = [(car, False, "owner") for car in owned]
    seen = {car.car_id for car in owned}
    for share in shares:
        car = share.car
        if car is None or car.is_archived or car.car_id in seen:
            continue
        seen.add(car.car_id)
        out.append((car, True, share.role))
    return out


# -------------------------------------------------
# Loan data
# -------------------------------------------------
def loan_terms_for(car: Car) -> Optional[LoanTerms]:
    """None when the car is missing any of amount / monthly payment / term."""
    if not car.loan_amount or not car.monthly_payment or not car.loan_term:
        return None

    return LoanTerms(
        loan_amount=to_decimal(car.loan_amount),
        loan_term=int(car.loan_term),
        monthly_payment=to_decimal(car.monthly_payment),
        interest_rate=to_decimal(car.interest_rate),
        purchase_date=car.purchase_date,
        loan_bank=car.loan_bank,
    )


def list_loan_payments(db: Session, car_id: int) -> List[PaymentRecord]:
    rows = (
        db.query(Expense)
        .filter(Expense.car_id == car_id, Expense.category == LOAN_PAYMENT_CATEGORY)
        .order_by(Expense.expense_date.asc(), Expense.expense_id.asc())
        .all()
    )
    return [
        PaymentRecord(date=r.expense_date, amount=to_decimal(r.amount), expense_id=r.expense_id)
        for r in rows
    ]
