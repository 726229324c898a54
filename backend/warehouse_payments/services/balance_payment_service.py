"""
Balance payment reconciliation.

Applies a payment from a customer (against a sale) or to a supplier (against a
purchase), keeping ``balance + paid_amount`` equal to the document total.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from warehouse_payments.core.errors import InternalError, InvalidRequest, InvalidState, NotFound, PaymentError
from warehouse_payments.core.payment_methods import PaymentMethod, PAYMENT_METHOD_VALUES
from warehouse_payments.core.receipt_service import generate_receipt_no
from warehouse_payments.core.serialization import serialize_decimal, serialize_purchase, serialize_sale
from warehouse_payments.models.balance_payment import BalancePayment
from warehouse_payments.models.ledger import Sale, Purchase
from warehouse_payments.models.party import Customer, Supplier
from warehouse_payments.models.warehouse import Warehouse


logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
# Largest value NUMERIC(12, 2) holds
MAX_AMOUNT = Decimal("9999999999.99")


@dataclass(frozen=True)
class CustomerTarget:
    customer_id: str


@dataclass(frozen=True)
class SupplierTarget:
    supplier_id: str


@dataclass(frozen=True)
class SaleRef:
    invoice_no: str


@dataclass(frozen=True)
class PurchaseRef:
    reference_no: str


PaymentTarget = Union[CustomerTarget, SupplierTarget]
LedgerRef = Optional[Union[SaleRef, PurchaseRef]]


@dataclass(frozen=True)
class PaymentRequest:
    target: PaymentTarget
    ledger: LedgerRef
    amount: Decimal
    payment_method: PaymentMethod
    notes: Optional[str] = None
    warehouse_id: Optional[str] = None


def _normalize_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def parse_party_filter(customer_id: Optional[str], supplier_id: Optional[str]) -> PaymentTarget:
    """Exactly one of customer/supplier, or InvalidRequest."""
    customer_id = _normalize_text(customer_id)
    supplier_id = _normalize_text(supplier_id)

    if not customer_id and not supplier_id:
        raise InvalidRequest("Customer ID or Supplier ID is required")
    if customer_id and supplier_id:
        raise InvalidRequest("Cannot provide both customer ID and supplier ID")

    if customer_id:
        return CustomerTarget(customer_id)
    return SupplierTarget(supplier_id)


def parse_payment_request(
    customer_id: Optional[str] = None,
    supplier_id: Optional[str] = None,
    sale_id: Optional[str] = None,
    purchase_id: Optional[str] = None,
    amount: Any = None,
    payment_method: Optional[str] = None,
    notes: Optional[str] = None,
    warehouses_id: Optional[str] = None,
) -> PaymentRequest:
    """
    Turn the loose request fields into a PaymentRequest.

    Rules are checked in order and the first violation is raised as
    InvalidRequest.
    """
    customer_id = _normalize_text(customer_id)
    supplier_id = _normalize_text(supplier_id)
    sale_id = _normalize_text(sale_id)
    purchase_id = _normalize_text(purchase_id)
    payment_method = _normalize_text(payment_method)

    if (not customer_id and not supplier_id) or amount is None or not payment_method:
        raise InvalidRequest("Customer ID or Supplier ID, amount, and payment method are required")

    target = parse_party_filter(customer_id, supplier_id)

    if sale_id and purchase_id:
        raise InvalidRequest("Cannot provide both sale ID and purchase ID")

    try:
        amount_val = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise InvalidRequest("Payment amount must be a number")
    if not amount_val.is_finite():
        raise InvalidRequest("Payment amount must be a number")
    if amount_val <= 0:
        raise InvalidRequest("Payment amount must be positive")
    if amount_val > MAX_AMOUNT:
        raise InvalidRequest(f"Payment amount cannot exceed {MAX_AMOUNT}")
    # Sub-cent amounts are rejected, never rounded
    if amount_val != amount_val.quantize(CENT):
        raise InvalidRequest("Payment amount cannot have more than two decimal places")
    amount_val = amount_val.quantize(CENT)

    if payment_method not in PAYMENT_METHOD_VALUES:
        allowed = ", ".join(sorted(PAYMENT_METHOD_VALUES))
        raise InvalidRequest(f"Unsupported payment method: {payment_method}. Expected one of: {allowed}")

    ledger: LedgerRef = None
    if sale_id:
        ledger = SaleRef(sale_id)
    elif purchase_id:
        ledger = PurchaseRef(purchase_id)

    return PaymentRequest(
        target=target,
        ledger=ledger,
        amount=amount_val,
        payment_method=PaymentMethod(payment_method),
        notes=_normalize_text(notes),
        warehouse_id=_normalize_text(warehouses_id),
    )


def _get_customer(db: Session, customer_id: str) -> Customer:
    customer = db.query(Customer).filter(
        Customer.id == customer_id,
        Customer.is_deleted == False,
    ).first()
    if not customer:
        raise NotFound("Customer")
    return customer


def _get_supplier(db: Session, supplier_id: str) -> Supplier:
    supplier = db.query(Supplier).filter(
        Supplier.id == supplier_id,
        Supplier.is_deleted == False,
    ).first()
    if not supplier:
        raise NotFound("Supplier")
    return supplier


def _check_outstanding(entity: str, balance, amount: Decimal) -> None:
    balance = Decimal(str(balance or 0))
    if balance <= 0:
        raise InvalidState(f"{entity} has no outstanding balance")
    if amount > balance:
        raise InvalidRequest("Payment amount cannot exceed outstanding balance")


def decrement_ledger_balance(db: Session, ledger: LedgerRef, amount: Decimal) -> bool:
    """
    Move ``amount`` from balance to paid_amount on the referenced sale/purchase.

    Single conditional UPDATE guarded by ``balance >= amount``, so a balance
    consumed by a concurrent payment is detected here rather than driven
    negative. Returns False when no row qualified. Does NOT commit.
    """
    if ledger is None:
        return True

    if isinstance(ledger, SaleRef):
        model, key_column, key = Sale, Sale.invoice_no, ledger.invoice_no
    else:
        model, key_column, key = Purchase, Purchase.reference_no, ledger.reference_no

    updated = (
        db.query(model)
        .filter(
            key_column == key,
            model.is_deleted == False,
            model.balance >= amount,
        )
        .update(
            {
                model.balance: model.balance - amount,
                model.paid_amount: model.paid_amount + amount,
            },
            synchronize_session=False,
        )
    )
    return updated == 1


def record_payment(db: Session, request: PaymentRequest) -> BalancePayment:
    """
    Validate and persist a balance payment, updating the referenced ledger row.

    Args:
        db: Database session
        request: Parsed payment request

    Returns:
        The committed BalancePayment with its associations loadable

    Raises:
        NotFound: customer, supplier, sale, purchase or warehouse missing
        InvalidState: the sale/purchase has nothing outstanding
        InvalidRequest: amount exceeds the outstanding balance
        InternalError: persistence failed; nothing was committed
    """
    target = request.target
    if isinstance(target, CustomerTarget):
        _get_customer(db, target.customer_id)
    else:
        _get_supplier(db, target.supplier_id)

    ledger = request.ledger
    if isinstance(ledger, SaleRef):
        sale = db.query(Sale).filter(
            Sale.invoice_no == ledger.invoice_no,
            Sale.is_deleted == False,
        ).first()
        if not sale:
            raise NotFound("Sale")
        _check_outstanding("Sale", sale.balance, request.amount)
    elif isinstance(ledger, PurchaseRef):
        purchase = db.query(Purchase).filter(
            Purchase.reference_no == ledger.reference_no,
            Purchase.is_deleted == False,
        ).first()
        if not purchase:
            raise NotFound("Purchase")
        _check_outstanding("Purchase", purchase.balance, request.amount)

    if request.warehouse_id:
        warehouse = db.query(Warehouse).filter(
            Warehouse.id == request.warehouse_id,
            Warehouse.is_deleted == False,
        ).first()
        if not warehouse:
            raise NotFound("Warehouse")

    try:
        receipt_no = generate_receipt_no(db)
        payment = BalancePayment(
            customer_id=target.customer_id if isinstance(target, CustomerTarget) else None,
            supplier_id=target.supplier_id if isinstance(target, SupplierTarget) else None,
            sale_id=ledger.invoice_no if isinstance(ledger, SaleRef) else None,
            purchase_id=ledger.reference_no if isinstance(ledger, PurchaseRef) else None,
            amount=request.amount,
            payment_method=request.payment_method.value,
            receipt_no=receipt_no,
            notes=request.notes,
            warehouses_id=request.warehouse_id,
        )
        db.add(payment)
        db.flush()

        if not decrement_ledger_balance(db, ledger, request.amount):
            entity = "Sale" if isinstance(ledger, SaleRef) else "Purchase"
            logger.warning(
                "balance payment rejected: %s %s no longer covers amount=%s",
                entity.lower(), payment.sale_id or payment.purchase_id, request.amount,
            )
            raise InvalidState(
                f"{entity} balance changed, outstanding balance is now lower than the payment amount"
            )

        db.commit()
    except PaymentError:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error processing balance payment")
        raise InternalError()

    db.refresh(payment)
    logger.info(
        "balance payment recorded receipt=%s customer=%s supplier=%s sale=%s purchase=%s amount=%s",
        payment.receipt_no, payment.customer_id, payment.supplier_id,
        payment.sale_id, payment.purchase_id, payment.amount,
    )
    return payment


def _party_clause(target: PaymentTarget):
    if isinstance(target, CustomerTarget):
        return BalancePayment.customer_id == target.customer_id
    return BalancePayment.supplier_id == target.supplier_id


def list_payments(db: Session, target: PaymentTarget) -> List[BalancePayment]:
    """Non-deleted payments for one party, newest first."""
    return (
        db.query(BalancePayment)
        .filter(_party_clause(target), BalancePayment.is_deleted == False)
        .order_by(BalancePayment.created_at.desc(), BalancePayment.receipt_no.desc())
        .all()
    )


def get_payment_by_receipt(db: Session, receipt_no: str) -> BalancePayment:
    payment = db.query(BalancePayment).filter(
        BalancePayment.receipt_no == receipt_no,
        BalancePayment.is_deleted == False,
    ).first()
    if not payment:
        raise NotFound("Balance payment")
    return payment


def party_statement(db: Session, target: PaymentTarget) -> Dict[str, Any]:
    """
    Account statement for a customer (over sales) or supplier (over purchases).

    Returns ``summary`` totals, including the balance payments recorded for
    the party, and ``documents``: each non-deleted sale/purchase, newest
    first, so open balances can be paid one by one.
    """
    if isinstance(target, CustomerTarget):
        _get_customer(db, target.customer_id)
        document_filter = (Sale.customer_id == target.customer_id, Sale.is_deleted == False)
        totals = db.query(
            func.count(Sale.id),
            func.coalesce(func.sum(Sale.grand_total), 0),
            func.coalesce(func.sum(Sale.paid_amount), 0),
            func.coalesce(func.sum(Sale.balance), 0),
        ).filter(*document_filter).one()
        documents = [
            serialize_sale(s)
            for s in db.query(Sale).filter(*document_filter)
            .order_by(Sale.created_at.desc(), Sale.invoice_no.desc())
            .all()
        ]
    else:
        _get_supplier(db, target.supplier_id)
        document_filter = (Purchase.supplier_id == target.supplier_id, Purchase.is_deleted == False)
        totals = db.query(
            func.count(Purchase.id),
            func.coalesce(func.sum(Purchase.total_amount), 0),
            func.coalesce(func.sum(Purchase.paid_amount), 0),
            func.coalesce(func.sum(Purchase.balance), 0),
        ).filter(*document_filter).one()
        documents = [
            serialize_purchase(p)
            for p in db.query(Purchase).filter(*document_filter)
            .order_by(Purchase.created_at.desc(), Purchase.reference_no.desc())
            .all()
        ]

    payments = db.query(
        func.count(BalancePayment.id),
        func.coalesce(func.sum(BalancePayment.amount), 0),
    ).filter(
        _party_clause(target),
        BalancePayment.is_deleted == False,
    ).one()

    count, total_amount, total_paid, total_balance = totals
    payment_count, payment_total = payments
    return {
        "summary": {
            "totalDocuments": int(count or 0),
            "totalAmount": serialize_decimal(total_amount),
            "totalPaid": serialize_decimal(total_paid),
            "totalBalance": serialize_decimal(total_balance),
            "totalBalancePayments": int(payment_count or 0),
            "totalBalancePaid": serialize_decimal(payment_total),
        },
        "documents": documents,
    }
