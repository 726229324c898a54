from decimal import Decimal

from sqlalchemy.orm import Session

from warehouse_payments.core.receipt_service import ensure_counter
from warehouse_payments.models.ledger import Sale, Purchase
from warehouse_payments.models.party import Customer, Supplier
from warehouse_payments.models.warehouse import Warehouse


def seed_demo(db: Session):
    ensure_counter(db)
    if db.query(Warehouse).filter(Warehouse.name == 'Demo Warehouse').first():
        db.commit()
        return
    warehouse = Warehouse(name='Demo Warehouse')
    db.add(warehouse)
    db.flush()

    customer = Customer(name='Walk-in Customer', phone='0300-0000000', warehouses_id=warehouse.id)
    supplier = Supplier(
        name='Demo Supplier',
        phone='0300-1111111',
        company_name='Demo Trading Co.',
        warehouses_id=warehouse.id,
    )
    db.add_all([customer, supplier])
    db.flush()

    db.add(Sale(
        invoice_no='INV-000001',
        customer_id=customer.id,
        warehouses_id=warehouse.id,
        grand_total=Decimal('1500.00'),
        paid_amount=Decimal('500.00'),
        balance=Decimal('1000.00'),
    ))
    db.add(Purchase(
        reference_no='PO-000001',
        supplier_id=supplier.id,
        warehouses_id=warehouse.id,
        total_amount=Decimal('4000.00'),
        paid_amount=Decimal('0.00'),
        balance=Decimal('4000.00'),
    ))
    db.commit()
