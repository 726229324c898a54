from sqlalchemy import Column, String, Numeric, Boolean, DateTime, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from warehouse_payments.models.warehouse import Base, new_id, utcnow


class BalancePayment(Base):
    __tablename__ = "balance_payments"
    __table_args__ = (
        UniqueConstraint("receipt_no", name="uq_balance_payments_receipt_no"),
        CheckConstraint(
            "(customer_id IS NOT NULL) <> (supplier_id IS NOT NULL)",
            name="ck_balance_payments_one_party",
        ),
        CheckConstraint(
            "NOT (sale_id IS NOT NULL AND purchase_id IS NOT NULL)",
            name="ck_balance_payments_one_ledger",
        ),
        CheckConstraint("amount > 0", name="ck_balance_payments_amount_positive"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=True, index=True)
    supplier_id = Column(String(36), ForeignKey("suppliers.id"), nullable=True, index=True)
    # Ledger references hold the business number, not the internal id
    sale_id = Column(String(100), ForeignKey("sales.invoice_no"), nullable=True, index=True)
    purchase_id = Column(String(100), ForeignKey("purchases.reference_no"), nullable=True, index=True)

    amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(30), nullable=False)
    receipt_no = Column(String(50), nullable=False)
    notes = Column(String(1000), nullable=True)
    warehouses_id = Column(String(36), ForeignKey("warehouses.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    is_deleted = Column(Boolean, nullable=False, default=False)

    customer = relationship("Customer")
    supplier = relationship("Supplier")
    sale = relationship("Sale")
    purchase = relationship("Purchase")
