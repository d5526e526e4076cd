"""
Service type and service payment API endpoints.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from bank_admin.api.deps import get_acting_user_id, unit_of_work
from bank_admin.models.base import get_db
from bank_admin.services.payment_service import PaymentService
from bank_admin.schemas.payment import (
    PaymentCreate,
    PaymentResponse,
    PaymentUpdate,
    ServiceTypeCreate,
    ServiceTypeResponse,
    ServiceTypeUpdate,
)

router = APIRouter(tags=["Payments"])


# --- Service Type Endpoints ---

@router.get("/service-types", response_model=list[ServiceTypeResponse])
def list_service_types(db: Session = Depends(get_db)):
    return PaymentService(db).list_service_types()


@router.post("/service-types", response_model=ServiceTypeResponse, status_code=201)
def create_service_type(
    request: ServiceTypeCreate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        service_type = PaymentService(db).create_service_type(request, user_id)
    return service_type


@router.get("/service-types/{type_id}", response_model=ServiceTypeResponse)
def get_service_type(type_id: int, db: Session = Depends(get_db)):
    return PaymentService(db).get_service_type(type_id)


@router.put("/service-types/{type_id}", response_model=ServiceTypeResponse)
def update_service_type(
    type_id: int,
    request: ServiceTypeUpdate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        service_type = PaymentService(db).update_service_type(
            type_id, request, user_id
        )
    return service_type


@router.delete("/service-types/{type_id}", status_code=204)
def delete_service_type(
    type_id: int,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        PaymentService(db).delete_service_type(type_id, user_id)
    return Response(status_code=204)


# --- Payment Endpoints ---

@router.get("/payments", response_model=list[PaymentResponse])
def list_payments(
    account_id: int | None = None,
    db: Session = Depends(get_db),
):
    """Payments newest first, optionally for one account."""
    return PaymentService(db).list_payments(account_id)


@router.post("/payments", response_model=PaymentResponse, status_code=201)
def create_payment(
    request: PaymentCreate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    """
    Pay for a service from an account.

    The account is debited immediately. It can be given by id
    or by the number of an active RFID card.
    """
    with unit_of_work(db):
        payment = PaymentService(db).create_payment(request, user_id)
    return payment


@router.get("/payments/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: int, db: Session = Depends(get_db)):
    return PaymentService(db).get_payment(payment_id)


@router.put("/payments/{payment_id}", response_model=PaymentResponse)
def update_payment(
    payment_id: int,
    request: PaymentUpdate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        payment = PaymentService(db).update_payment(payment_id, request, user_id)
    return payment


@router.delete("/payments/{payment_id}", status_code=204)
def delete_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    """Delete a payment and refund the account."""
    with unit_of_work(db):
        PaymentService(db).delete_payment(payment_id, user_id)
    return Response(status_code=204)
