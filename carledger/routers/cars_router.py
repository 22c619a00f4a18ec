# carledger/routers/cars_router.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from carledger.models.car_model import Car
from carledger.models.car_share_model import CarShare
from carledger.models.expense_model import Expense
from carledger.models.user_model import User
from carledger.schemas.car_schemas import (
    BuyerAccessory,
    CarArchive,
    CarBasicUpdate,
    CarCreate,
    CarListOut,
    CarLoanUpdate,
    CarOut,
    CarPurchaseUpdate,
    CarSold,
    CarTotaled,
    CarUserOut,
    ShareCreate,
)
from carledger.utils.car_access import (
    get_accessible_car,
    get_current_user,
    get_owned_car,
    get_share,
    list_accessible_cars,
)
from carledger.utils.clock import utcnow
from carledger.utils.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cars", tags=["Cars"])

# car columns holding lists / objects
JSON_FIELDS = {
    "base_msrp_features",
    "optional_packages",
    "dealership_accessories",
    "buyer_accessories",
    "dealership_fees",
    "down_payments",
    "salesperson",
    "buyer_info",
}

ACCESSORY_CATEGORY = "accessories"


# -------------------------------------------------
# Helpers
# -------------------------------------------------
def apply_patch(car: Car, payload) -> None:
    """Copy the fields the client actually sent onto the car row."""
    data = payload.model_dump(exclude_unset=True)
    json_data = payload.model_dump(exclude_unset=True, mode="json")

    for k, v in data.items():
        setattr(car, k, json_data[k] if k in JSON_FIELDS else v)


def archive(car: Car, reason: str) -> None:
    car.is_archived = True
    car.archived_at = utcnow()
    car.archived_reason = reason


def accessory_description(name: str) -> str:
    return f"Buyer accessory: {name}"


def latest_accessory_expense(db: Session, car_id: int, name: str) -> Optional[Expense]:
    return (
        db.query(Expense)
        .filter(
            Expense.car_id == car_id,
            Expense.category == ACCESSORY_CATEGORY,
            Expense.description == accessory_description(name),
        )
        .order_by(Expense.expense_date.desc(), Expense.expense_id.desc())
        .first()
    )


def check_accessory_index(car: Car, index: int) -> list:
    accessories = list(car.buyer_accessories or [])
    if index < 0 or index >= len(accessories):
        raise HTTPException(status_code=400, detail="Invalid accessory index")
    return accessories


# =================================================
# STATIC ROUTES (ALWAYS FIRST)
# =================================================
@router.get("/", response_model=List[CarListOut])
def list_user_cars(
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    return [
        CarListOut.model_validate(car).model_copy(update={"is_shared": is_shared, "share_role": role})
        for car, is_shared, role in list_accessible_cars(db, user)
    ]


@router.get("/archived", response_model=List[CarOut])
def list_archived_cars(
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    return (
        db.query(Car)
        .filter(Car.owner_id == user.user_id, Car.is_archived.is_(True))
        .order_by(Car.archived_at.desc(), Car.car_id.desc())
        .all()
    )


@router.get("/trade-in-candidates", response_model=List[CarOut])
def list_trade_in_candidates(
        exclude_car_id: int = Query(..., description="Car being edited"),
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    return (
        db.query(Car)
        .filter(
            Car.owner_id == user.user_id,
            Car.is_archived.is_(False),
            Car.car_id != exclude_car_id,
        )
        .order_by(Car.car_id.asc())
        .all()
    )


@router.post("/", response_model=CarOut, status_code=status.HTTP_201_CREATED)
def create_car(
        payload: CarCreate,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = Car(**payload.model_dump(), owner_id=user.user_id, is_archived=False)
    db.add(car)
    db.commit()
    db.refresh(car)

    logger.info("user %s created car %s", user.user_id, car.car_id)
    return car


# =================================================
# DYNAMIC ROUTES
# =================================================
@router.get("/{car_id}", response_model=CarOut)
def get_car(
        car_id: int,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    return get_accessible_car(db, car_id, user)


@router.put("/{car_id}/basic", response_model=CarOut)
def update_basic_info(
        car_id: int,
        payload: CarBasicUpdate,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    # owner or shared user can update basic info
    car = get_accessible_car(db, car_id, user)
    apply_patch(car, payload)
    db.commit()
    db.refresh(car)
    return car


@router.put("/{car_id}/purchase", response_model=CarOut)
def update_purchase_details(
        car_id: int,
        payload: CarPurchaseUpdate,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_owned_car(db, car_id, user, "update purchase details")
    apply_patch(car, payload)
    db.commit()
    db.refresh(car)
    return car


@router.put("/{car_id}/loan", response_model=CarOut)
def update_loan_details(
        car_id: int,
        payload: CarLoanUpdate,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_owned_car(db, car_id, user, "update loan details")
    apply_patch(car, payload)
    db.commit()
    db.refresh(car)

    logger.info("loan terms updated for car %s", car_id)
    return car


@router.post("/{car_id}/archive", response_model=CarOut)
def archive_car(
        car_id: int,
        payload: CarArchive,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_owned_car(db, car_id, user, "archive this car")
    archive(car, payload.reason)
    db.commit()
    db.refresh(car)
    return car


@router.post("/{car_id}/totaled", response_model=CarOut)
def mark_car_totaled(
        car_id: int,
        payload: CarTotaled,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_owned_car(db, car_id, user, "mark this car as totaled")
    for k, v in payload.model_dump().items():
        setattr(car, k, v)
    archive(car, "totaled")
    db.commit()
    db.refresh(car)
    return car


@router.post("/{car_id}/sold", response_model=CarOut)
def mark_car_sold(
        car_id: int,
        payload: CarSold,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_owned_car(db, car_id, user, "mark this car as sold")
    car.sale_price = payload.sale_price
    car.sale_mileage = payload.sale_mileage
    car.buyer_info = payload.buyer_info.model_dump(mode="json")
    archive(car, "sold")
    db.commit()
    db.refresh(car)
    return car


# -------------------------------------------------
# Sharing
# -------------------------------------------------
@router.post("/{car_id}/shares", status_code=status.HTTP_201_CREATED)
def share_car(
        car_id: int,
        payload: ShareCreate,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_owned_car(db, car_id, user, "share this car")

    target = db.query(User).filter(User.email == payload.user_email).first()
    if not target:
        raise HTTPException(status_code=404, detail="User not found")

    if target.user_id == car.owner_id:
        raise HTTPException(status_code=400, detail="Cannot share a car with its owner")

    if get_share(db, car_id, target.user_id):
        raise HTTPException(status_code=409, detail="Car is already shared with this user")

    share = CarShare(
        car_id=car_id,
        user_id=target.user_id,
        role="shared",
        shared_at=utcnow(),
        shared_by=user.user_id,
    )
    db.add(share)
    db.commit()

    logger.info("car %s shared with user %s", car_id, target.user_id)
    return {"message": "Car shared successfully", "user_id": target.user_id}


@router.delete("/{car_id}/shares/{user_id}")
def unshare_car(
        car_id: int,
        user_id: int,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    get_owned_car(db, car_id, user, "unshare this car")

    share = get_share(db, car_id, user_id)
    if share:
        db.delete(share)
        db.commit()
        logger.info("car %s unshared from user %s", car_id, user_id)

    return {"message": "Car unshared successfully"}


@router.get("/{car_id}/users", response_model=List[CarUserOut])
def list_car_users(
        car_id: int,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_accessible_car(db, car_id, user)

    users = []
    if car.owner:
        users.append(
            CarUserOut(user_id=car.owner.user_id, email=car.owner.email, name=car.owner.name, role="owner")
        )

    shares = (
        db.query(CarShare)
        .filter(CarShare.car_id == car_id)
        .order_by(CarShare.share_id.asc())
        .all()
    )
    for share in shares:
        if share.user:
            users.append(
                CarUserOut(user_id=share.user.user_id, email=share.user.email, name=share.user.name, role=share.role)
            )

    return users


# -------------------------------------------------
# Buyer accessories (each mirrored by an "accessories" expense)
# -------------------------------------------------
@router.post("/{car_id}/accessories", response_model=CarOut)
def add_buyer_accessory(
        car_id: int,
        payload: BuyerAccessory,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_accessible_car(db, car_id, user)

    car.buyer_accessories = list(car.buyer_accessories or []) + [payload.model_dump(mode="json")]

    db.add(
        Expense(
            car_id=car_id,
            user_id=user.user_id,
            category=ACCESSORY_CATEGORY,
            description=accessory_description(payload.name),
            amount=payload.price,
            expense_date=payload.date_added,
        )
    )
    db.commit()
    db.refresh(car)
    return car


@router.put("/{car_id}/accessories/{index}", response_model=CarOut)
def update_buyer_accessory(
        car_id: int,
        index: int,
        payload: BuyerAccessory,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_accessible_car(db, car_id, user)
    accessories = check_accessory_index(car, index)

    old = accessories[index]
    accessories[index] = payload.model_dump(mode="json")
    car.buyer_accessories = accessories

    exp = latest_accessory_expense(db, car_id, old["name"])
    if exp:
        exp.description = accessory_description(payload.name)
        exp.amount = payload.price
        exp.expense_date = payload.date_added

    db.commit()
    db.refresh(car)
    return car


@router.delete("/{car_id}/accessories/{index}", response_model=CarOut)
def remove_buyer_accessory(
        car_id: int,
        index: int,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    car = get_accessible_car(db, car_id, user)
    accessories = check_accessory_index(car, index)

    removed = accessories.pop(index)
    car.buyer_accessories = accessories

    exp = latest_accessory_expense(db, car_id, removed["name"])
    if exp:
        db.delete(exp)

    db.commit()
    db.refresh(car)
    return car
