from sqlalchemy import Column, Integer, String, UniqueConstraint
from warehouse_payments.models.warehouse import Base


class ReceiptCounter(Base):
	__tablename__ = "receipt_counters"
	__table_args__ = (
		UniqueConstraint("name", name="uq_receipt_counters_name"),
	)

	id = Column(Integer, primary_key=True, index=True)
	# name: 'BALANCE_PAYMENT'
	name = Column(String(50), nullable=False, index=True)
	next_seq = Column(Integer, nullable=False, default=1)
