from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from warehouse_payments.core.database import get_db
from warehouse_payments.core.deps import get_party_target
from warehouse_payments.core.serialization import serialize_balance_payment
from warehouse_payments.services.balance_payment_service import (
    PaymentTarget,
    get_payment_by_receipt,
    list_payments,
    parse_payment_request,
    party_statement,
    record_payment,
)

router = APIRouter()


class BalancePaymentCreate(BaseModel):
    # Everything optional here; presence rules are enforced by the service
    # so they surface as 400 {"error"} like every other rule
    customer_id: Optional[str] = Field(None, alias="customerId")
    supplier_id: Optional[str] = Field(None, alias="supplierId")
    sale_id: Optional[str] = Field(None, alias="saleId")  # sale invoice number
    purchase_id: Optional[str] = Field(None, alias="purchaseId")  # purchase reference number
    amount: Optional[Decimal] = None
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    notes: Optional[str] = None
    warehouses_id: Optional[str] = Field(None, alias="warehousesId")

    class Config:
        populate_by_name = True


@router.post("", status_code=status.HTTP_201_CREATED)
def create_balance_payment(
    data: BalancePaymentCreate,
    db: Session = Depends(get_db),
):
    """Apply a payment against a customer's or supplier's outstanding balance"""
    request = parse_payment_request(
        customer_id=data.customer_id,
        supplier_id=data.supplier_id,
        sale_id=data.sale_id,
        purchase_id=data.purchase_id,
        amount=data.amount,
        payment_method=data.payment_method,
        notes=data.notes,
        warehouses_id=data.warehouses_id,
    )
    payment = record_payment(db, request)
    return {
        "success": True,
        "balancePayment": serialize_balance_payment(payment),
        "message": "Balance payment processed successfully",
    }


@router.get("")
def get_balance_payments(
    target: PaymentTarget = Depends(get_party_target),
    db: Session = Depends(get_db),
):
    """Balance payments for a customer or supplier, newest first"""
    payments = list_payments(db, target)
    return {
        "success": True,
        "balancePayments": [serialize_balance_payment(p) for p in payments],
    }


@router.get("/statement")
def get_party_statement(
    target: PaymentTarget = Depends(get_party_target),
    db: Session = Depends(get_db),
):
    """Account totals and open documents for a customer or supplier"""
    statement = party_statement(db, target)
    return {
        "success": True,
        "summary": statement["summary"],
        "documents": statement["documents"],
    }


@router.get("/receipt/{receipt_no}")
def get_balance_payment_receipt(
    receipt_no: str,
    db: Session = Depends(get_db),
):
    """Single balance payment by receipt number, for printing"""
    payment = get_payment_by_receipt(db, receipt_no)
    return {"success": True, "balancePayment": serialize_balance_payment(payment)}
