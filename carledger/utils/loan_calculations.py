import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

# Interest accrues per average month, not per calendar month
AVERAGE_MONTH = timedelta(days=30.44)
PAID_OFF_THRESHOLD = Decimal("0.01")


def money(x) -> Decimal:
    """Always return 2-decimal Decimal with HALF_UP rounding."""
    if x is None:
        x = 0
    if not isinstance(x, Decimal):
        x = Decimal(str(x))
    return x.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_decimal(x) -> Decimal:
    if x is None:
        return Decimal("0")
    if isinstance(x, Decimal):
        return x
    return Decimal(str(x))


def _seconds(delta: timedelta) -> Decimal:
    return (
        Decimal(delta.days * 86400 + delta.seconds)
        + Decimal(delta.microseconds) / Decimal(1_000_000)
    )


def months_elapsed(start: datetime, end: datetime) -> Decimal:
    """
    Fractional months between two instants using the 30.44-day average month.
    Never negative.
    """
    months = _seconds(end - start) / _seconds(AVERAGE_MONTH)
    return max(Decimal("0"), months)


def add_months(anchor: datetime, months: int) -> datetime:
    """
    Same day-of-month `months` later; days past the end of the target month
    roll into the next one (Jan 31 + 1 -> Mar 3, or Mar 2 in a leap year).
    """
    first_of_month = anchor.replace(day=1) + relativedelta(months=months)
    return first_of_month + timedelta(days=anchor.day - 1)


def month_bucket(dt: datetime) -> Tuple[int, int]:
    return dt.year, dt.month


class PaidOffPrecedence(str, enum.Enum):
    """How the balance signal and the schedule-coverage signal combine."""

    EITHER = "EITHER"
    BALANCE = "BALANCE"
    SCHEDULE = "SCHEDULE"


def resolve_paid_off(
        paid_by_balance: bool,
        paid_by_schedule: bool,
        precedence: PaidOffPrecedence = PaidOffPrecedence.EITHER,
) -> bool:
    if precedence == PaidOffPrecedence.BALANCE:
        return paid_by_balance
    if precedence == PaidOffPrecedence.SCHEDULE:
        return paid_by_schedule
    return paid_by_balance or paid_by_schedule


# -------------------------------------------------
# Plain data consumed by the calculators
# -------------------------------------------------
@dataclass(frozen=True)
class LoanTerms:
    loan_amount: Decimal
    loan_term: int
    monthly_payment: Decimal
    interest_rate: Decimal = Decimal("0")
    purchase_date: Optional[datetime] = None
    loan_bank: Optional[str] = None

    @property
    def monthly_interest_rate(self) -> Decimal:
        return to_decimal(self.interest_rate) / Decimal("100") / Decimal("12")


@dataclass(frozen=True)
class PaymentRecord:
    date: datetime
    amount: Decimal
    expense_id: Optional[int] = None


@dataclass(frozen=True)
class PaymentSplit:
    payment: PaymentRecord
    interest_amount: Decimal
    principal_amount: Decimal
    balance_after: Decimal


@dataclass
class BalanceProjection:
    opening_balance: Decimal
    balance: Decimal
    last_date: datetime
    splits: List[PaymentSplit] = field(default_factory=list)
    # interest accrued after the last payment, only set when projected to a date
    accrued_interest: Decimal = Decimal("0")

    @property
    def remaining_balance(self) -> Decimal:
        return money(max(Decimal("0"), self.balance + self.accrued_interest))

    @property
    def is_paid_off(self) -> bool:
        return self.remaining_balance <= PAID_OFF_THRESHOLD


@dataclass(frozen=True)
class NextInstallment:
    payment_number: int
    due_date: datetime
    period_start: datetime


def sort_payments(payments: Iterable[PaymentRecord]) -> List[PaymentRecord]:
    # stable: same-date payments keep their recorded order
    return sorted(payments, key=lambda p: p.date)


# -------------------------------------------------
# Projector
# -------------------------------------------------
def project_balance(
        opening_balance,
        monthly_interest_rate,
        payments: Iterable[PaymentRecord],
        anchor_date: datetime,
        as_of: Optional[datetime] = None,
) -> BalanceProjection:
    """
    Replay payments in date order against the opening balance.

    Each payment first covers the simple interest accrued on the running
    balance since the previous payment (or the anchor), the rest reduces
    principal. With `as_of`, interest accrued after the last payment up to
    that instant is added on top of the balance.
    """
    rate = to_decimal(monthly_interest_rate)
    opening = to_decimal(opening_balance)

    current_balance = opening
    last_date = anchor_date
    splits: List[PaymentSplit] = []

    for payment in sort_payments(payments):
        amount = to_decimal(payment.amount)
        interest_accrued = current_balance * rate * months_elapsed(last_date, payment.date)
        interest_portion = min(amount, interest_accrued)
        principal_portion = max(Decimal("0"), amount - interest_portion)
        current_balance = max(Decimal("0"), current_balance - principal_portion)
        last_date = payment.date

        splits.append(
            PaymentSplit(
                payment=payment,
                interest_amount=interest_portion,
                principal_amount=principal_portion,
                balance_after=current_balance,
            )
        )

    projection = BalanceProjection(
        opening_balance=opening,
        balance=current_balance,
        last_date=last_date,
        splits=splits,
    )

    if as_of is not None:
        projection.accrued_interest = current_balance * rate * months_elapsed(last_date, as_of)

    return projection


# -------------------------------------------------
# Locator
# -------------------------------------------------
def locate_next_installment(
        loan_term: int,
        anchor_date: datetime,
        payment_dates: Iterable[datetime],
) -> Optional[NextInstallment]:
    """
    First installment 1..loan_term whose calendar month holds no payment.
    None means every month of the term is covered.
    """
    paid_months = {month_bucket(d) for d in payment_dates}

    for month_offset in range(1, int(loan_term) + 1):
        due_date = add_months(anchor_date, month_offset)
        if month_bucket(due_date) not in paid_months:
            return NextInstallment(
                payment_number=month_offset,
                due_date=due_date,
                period_start=add_months(due_date, -1),
            )

    return None


def paid_in_period(
        payments: Iterable[PaymentRecord],
        period_start: datetime,
        period_end: datetime,
) -> Decimal:
    """Sum of payments with period_start < date <= period_end."""
    total = Decimal("0")
    for p in payments:
        if period_start < p.date <= period_end:
            total += to_decimal(p.amount)
    return total


def amount_due(remaining_balance, monthly_payment, paid_this_period) -> Decimal:
    remaining_balance = to_decimal(remaining_balance)
    monthly_payment = to_decimal(monthly_payment)

    # final installment is capped to what is actually owed
    effective = remaining_balance if remaining_balance < monthly_payment else monthly_payment
    return max(Decimal("0"), effective - to_decimal(paid_this_period))


def calendar_months_between(start: datetime, end: datetime) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


# -------------------------------------------------
# Reports
# -------------------------------------------------
@dataclass
class NextPaymentReport:
    is_paid_off: bool
    next_due_date: Optional[datetime] = None
    monthly_payment: Optional[Decimal] = None
    amount_due: Optional[Decimal] = None
    paid_this_period: Optional[Decimal] = None
    remaining_balance: Optional[Decimal] = None
    payment_number: Optional[int] = None
    is_overdue: Optional[bool] = None


@dataclass
class PaymentDetail:
    expense_id: Optional[int]
    date: datetime
    amount: Decimal
    principal_amount: Decimal
    interest_amount: Decimal


@dataclass
class LoanDetailsReport:
    original_loan_amount: Decimal
    loan_term: int
    interest_rate: Decimal
    monthly_payment: Decimal
    loan_bank: Optional[str]
    total_paid: Decimal
    total_principal: Decimal
    total_interest: Decimal
    remaining_balance: Decimal
    is_paid_off: bool
    months_early: int
    next_payment_date: Optional[datetime]
    is_overdue: bool
    payments: List[PaymentDetail] = field(default_factory=list)


def build_next_payment(
        terms: LoanTerms,
        payments: Sequence[PaymentRecord],
        now: datetime,
        precedence: PaidOffPrecedence = PaidOffPrecedence.EITHER,
) -> Optional[NextPaymentReport]:
    """
    Next installment due, what is left to pay on it and whether it is late.
    Needs a purchase date; returns None without one.
    """
    if terms.purchase_date is None:
        return None

    payments = sort_payments(payments)
    projection = project_balance(
        terms.loan_amount,
        terms.monthly_interest_rate,
        payments,
        terms.purchase_date,
    )
    remaining_balance = projection.remaining_balance

    next_installment = locate_next_installment(
        terms.loan_term, terms.purchase_date, (p.date for p in payments)
    )

    if resolve_paid_off(projection.is_paid_off, next_installment is None, precedence):
        return NextPaymentReport(is_paid_off=True)

    if next_installment is None:
        # every month covered but money still owed: the remainder rides on the last installment
        due_date = add_months(terms.purchase_date, terms.loan_term)
        next_installment = NextInstallment(
            payment_number=terms.loan_term,
            due_date=due_date,
            period_start=add_months(due_date, -1),
        )

    paid_this_period = paid_in_period(
        payments, next_installment.period_start, next_installment.due_date
    )
    due = amount_due(remaining_balance, terms.monthly_payment, paid_this_period)

    return NextPaymentReport(
        is_paid_off=False,
        next_due_date=next_installment.due_date,
        monthly_payment=money(terms.monthly_payment),
        amount_due=money(due),
        paid_this_period=money(paid_this_period),
        remaining_balance=remaining_balance,
        payment_number=next_installment.payment_number,
        is_overdue=now > next_installment.due_date,
    )


def build_loan_details(
        terms: LoanTerms,
        payments: Sequence[PaymentRecord],
        now: datetime,
        precedence: PaidOffPrecedence = PaidOffPrecedence.EITHER,
) -> LoanDetailsReport:
    """
    Full payment history with the interest/principal split of each payment.

    Unlike build_next_payment, the remaining balance here includes interest
    accrued from the last payment up to `now`.
    """
    payments = sort_payments(payments)
    anchor = terms.purchase_date or now

    projection = project_balance(
        terms.loan_amount,
        terms.monthly_interest_rate,
        payments,
        anchor,
        as_of=now,
    )
    remaining_balance = projection.remaining_balance

    next_installment = None
    paid_by_schedule = False
    if terms.purchase_date is not None:
        next_installment = locate_next_installment(
            terms.loan_term, terms.purchase_date, (p.date for p in payments)
        )
        paid_by_schedule = next_installment is None

    is_paid_off = resolve_paid_off(projection.is_paid_off, paid_by_schedule, precedence)

    months_early = 0
    if is_paid_off and terms.purchase_date is not None:
        last_payment_date = payments[-1].date if payments else now
        scheduled_end = add_months(terms.purchase_date, terms.loan_term)
        if last_payment_date < scheduled_end:
            months_early = max(0, calendar_months_between(last_payment_date, scheduled_end))

    next_payment_date = None
    is_overdue = False
    if not is_paid_off and next_installment is not None:
        next_payment_date = next_installment.due_date
        is_overdue = now > next_installment.due_date

    total_paid = sum((to_decimal(p.amount) for p in payments), Decimal("0"))
    total_principal = sum((s.principal_amount for s in projection.splits), Decimal("0"))
    total_interest = sum((s.interest_amount for s in projection.splits), Decimal("0"))

    return LoanDetailsReport(
        original_loan_amount=money(terms.loan_amount),
        loan_term=terms.loan_term,
        interest_rate=to_decimal(terms.interest_rate),
        monthly_payment=money(terms.monthly_payment),
        loan_bank=terms.loan_bank,
        total_paid=money(total_paid),
        total_principal=money(total_principal),
        total_interest=money(total_interest),
        remaining_balance=remaining_balance,
        is_paid_off=is_paid_off,
        months_early=months_early,
        next_payment_date=next_payment_date,
        is_overdue=is_overdue,
        payments=[
            PaymentDetail(
                expense_id=s.payment.expense_id,
                date=s.payment.date,
                amount=money(s.payment.amount),
                principal_amount=money(s.principal_amount),
                interest_amount=money(s.interest_amount),
            )
            for s in projection.splits
        ],
    )
