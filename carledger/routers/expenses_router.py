# carledger/routers/expenses_router.py

from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from carledger.models.expense_model import Expense
from carledger.models.user_model import User
from carledger.models.car_model import Car
from carledger.schemas.expense_schemas import (
    ExpenseCategory,
    ExpenseCreate,
    ExpenseOut,
    ExpenseSummaryOut,
    ExpenseUpdate,
    UserExpenseTotalsOut,
)
from carledger.utils.car_access import (
    get_accessible_car,
    get_current_user,
    list_accessible_cars,
)
from carledger.utils.database import get_db
from carledger.utils.loan_calculations import money, to_decimal

router = APIRouter(prefix="/expenses", tags=["Expenses"])

DOWN_PAYMENTS_KEY = "down_payments"


def down_payments_total(car: Car) -> Decimal:
    return sum((to_decimal(p.get("amount")) for p in (car.down_payments or [])), Decimal("0"))


def get_expense_or_404(db: Session, expense_id: int) -> Expense:
    exp = db.query(Expense).filter(Expense.expense_id == expense_id).first()
    if not exp:
        raise HTTPException(status_code=404, detail="Expense not found")
    return exp


# =================================================
# STATIC ROUTES (ALWAYS FIRST)
# =================================================
@router.get("/totals", response_model=UserExpenseTotalsOut)
def user_expense_totals(
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    """Expenses plus down payments across every active car the user can see."""
    cars = [car for car, _, _ in list_accessible_cars(db, user)]

    total = Decimal("0")
    for car in cars:
        amounts = db.query(Expense.amount).filter(Expense.car_id == car.car_id).all()
        total += sum((to_decimal(a) for (a,) in amounts), Decimal("0"))
        total += down_payments_total(car)

    return UserExpenseTotalsOut(total_expenses=float(money(total)), car_count=len(cars))


@router.post("/", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
def add_expense(
        payload: ExpenseCreate,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    get_accessible_car(db, payload.car_id, user)

    exp = Expense(**payload.model_dump(), user_id=user.user_id)
    db.add(exp)
    db.commit()
    db.refresh(exp)
    return exp


# =================================================
# PER-CAR ROUTES
# =================================================
@router.get("/car/{car_id}", response_model=List[ExpenseOut])
def list_car_expenses(
        car_id: int,
        category: Optional[ExpenseCategory] = Query(default=None, description="Filter by category"),
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    get_accessible_car(db, car_id, user)

    q = db.query(Expense).filter(Expense.car_id == car_id)
    if category is not None:
        q = q.filter(Expense.category == category.value)

    return q.order_by(Expense.expense_date.desc(), Expense.expense_id.desc()).all()


@router.get("/car/{car_id}/summary", response_model=ExpenseSummaryOut)
def car_expense_summary(
        car_id: int,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_accessible_car(db, car_id, user)
    expenses = db.query(Expense).filter(Expense.car_id == car_id).all()

    category_totals: dict = {}
    total = Decimal("0")
    for e in expenses:
        amount = to_decimal(e.amount)
        total += amount
        category_totals[e.category] = category_totals.get(e.category, Decimal("0")) + amount

    # down payments from the purchase details count as spending too
    down = down_payments_total(car)
    if down > 0:
        category_totals[DOWN_PAYMENTS_KEY] = down

    return ExpenseSummaryOut(
        total_expenses=float(money(total + down)),
        category_totals={k: float(money(v)) for k, v in category_totals.items()},
        expense_count=len(expenses),
    )


# =================================================
# SINGLE EXPENSE
# =================================================
@router.put("/{expense_id}", response_model=ExpenseOut)
def update_expense(
        expense_id: int,
        payload: ExpenseUpdate,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    exp = get_expense_or_404(db, expense_id)
    get_accessible_car(db, exp.car_id, user)

    data = payload.model_dump(exclude_unset=True)
    for k, v in data.items():
        if v is None and k in ("category", "description", "amount", "expense_date"):
            raise HTTPException(status_code=400, detail=f"{k} cannot be null")
        setattr(exp, k, v)

    db.commit()
    db.refresh(exp)
    return exp


@router.delete("/{expense_id}")
def delete_expense(
        expense_id: int,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    exp = get_expense_or_404(db, expense_id)
    get_accessible_car(db, exp.car_id, user)

    db.delete(exp)
    db.commit()
    return {"message": "Expense deleted successfully"}
