"""
Receipt number generation for balance payments.

Numbers come from a counter row that is incremented with a single UPDATE, so
the database row lock (or SQLite's write lock) serializes concurrent
allocations. The unique constraint on ``balance_payments.receipt_no`` backs
this up.
"""
import time
from typing import Optional

from sqlalchemy.orm import Session

from warehouse_payments.core.config import settings
from warehouse_payments.models.receipt_counter import ReceiptCounter


BALANCE_PAYMENT_COUNTER = "BALANCE_PAYMENT"


def ensure_counter(db: Session, name: str = BALANCE_PAYMENT_COUNTER) -> ReceiptCounter:
    """Create the counter row if it does not exist yet. Does not commit."""
    counter = db.query(ReceiptCounter).filter(ReceiptCounter.name == name).first()
    if not counter:
        counter = ReceiptCounter(name=name, next_seq=1)
        db.add(counter)
        db.flush()
    return counter


def get_next_receipt_seq(db: Session, name: str = BALANCE_PAYMENT_COUNTER) -> int:
    """
    Reserve the next sequence number for ``name``.

    Increments in place and reads the value back inside the caller's
    transaction. Does NOT commit: the caller commits together with the
    record that uses the number, so a rollback releases nothing twice.
    """
    updated = (
        db.query(ReceiptCounter)
        .filter(ReceiptCounter.name == name)
        .update({ReceiptCounter.next_seq: ReceiptCounter.next_seq + 1}, synchronize_session=False)
    )
    if not updated:
        # First allocation ever for this counter
        db.add(ReceiptCounter(name=name, next_seq=2))
        db.flush()
        return 1

    next_seq = db.query(ReceiptCounter.next_seq).filter(ReceiptCounter.name == name).scalar()
    return next_seq - 1


def generate_receipt_no(db: Session, now_millis: Optional[int] = None) -> str:
    """
    Build a receipt number: ``{PREFIX}-{epochMillis}-{SEQ:06d}``.

    e.g. 'BP-1760875200000-000042'
    """
    if now_millis is None:
        now_millis = int(time.time() * 1000)
    seq = get_next_receipt_seq(db, BALANCE_PAYMENT_COUNTER)
    return f"{settings.receipt_prefix}-{now_millis}-{str(seq).zfill(6)}"
