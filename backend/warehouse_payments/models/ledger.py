from sqlalchemy import Column, String, Numeric, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from warehouse_payments.models.warehouse import Base, new_id, utcnow


class Sale(Base):
    __tablename__ = "sales"

    id = Column(String(36), primary_key=True, default=new_id)
    # Business reference used by balance payments
    invoice_no = Column(String(100), nullable=False, unique=True, index=True)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    warehouses_id = Column(String(36), ForeignKey("warehouses.id", ondelete="SET NULL"), nullable=True, index=True)
    grand_total = Column(Numeric(12, 2), nullable=False, default=0)
    # balance + paid_amount == grand_total
    paid_amount = Column(Numeric(12, 2), nullable=False, default=0)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    customer = relationship("Customer")


class Purchase(Base):
    __tablename__ = "purchases"

    id = Column(String(36), primary_key=True, default=new_id)
    reference_no = Column(String(100), nullable=False, unique=True, index=True)
    supplier_id = Column(String(36), ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True, index=True)
    warehouses_id = Column(String(36), ForeignKey("warehouses.id", ondelete="SET NULL"), nullable=True, index=True)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    paid_amount = Column(Numeric(12, 2), nullable=False, default=0)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    supplier = relationship("Supplier")
