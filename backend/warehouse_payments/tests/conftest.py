import os

# Must be set before the app modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"

from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from warehouse_payments.core.database import get_db
from warehouse_payments.main import app
from warehouse_payments.models import Base, Customer, Purchase, Sale, Supplier, Warehouse


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def ledger(db):
    """Parties and open documents; returns their ids and reference numbers."""
    warehouse = Warehouse(name="Main Warehouse")
    db.add(warehouse)
    db.flush()

    customer = Customer(name="Ali Traders", phone="0300-1234567", warehouses_id=warehouse.id)
    other_customer = Customer(name="Bilal Store", phone="0300-7654321")
    deleted_customer = Customer(name="Closed Account", phone="0300-0000001", is_deleted=True)
    supplier = Supplier(name="Agro Supplies", phone="0321-1111111", company_name="Agro Supplies Ltd")
    deleted_supplier = Supplier(name="Gone Supplier", phone="0321-0000000", is_deleted=True)
    db.add_all([customer, other_customer, deleted_customer, supplier, deleted_supplier])
    db.flush()

    db.add_all([
        Sale(invoice_no="INV-1001", customer_id=customer.id, warehouses_id=warehouse.id,
             grand_total=Decimal("100.00"), paid_amount=Decimal("0.00"), balance=Decimal("100.00")),
        Sale(invoice_no="INV-1002", customer_id=customer.id,
             grand_total=Decimal("250.00"), paid_amount=Decimal("250.00"), balance=Decimal("0.00")),
        Sale(invoice_no="INV-1003", customer_id=customer.id, is_deleted=True,
             grand_total=Decimal("80.00"), paid_amount=Decimal("0.00"), balance=Decimal("80.00")),
        Purchase(reference_no="PO-2001", supplier_id=supplier.id, warehouses_id=warehouse.id,
                 total_amount=Decimal("500.00"), paid_amount=Decimal("100.00"), balance=Decimal("400.00")),
        Purchase(reference_no="PO-2002", supplier_id=supplier.id,
                 total_amount=Decimal("300.00"), paid_amount=Decimal("300.00"), balance=Decimal("0.00")),
    ])
    db.commit()

    return SimpleNamespace(
        warehouse_id=warehouse.id,
        customer_id=customer.id,
        other_customer_id=other_customer.id,
        deleted_customer_id=deleted_customer.id,
        supplier_id=supplier.id,
        deleted_supplier_id=deleted_supplier.id,
        open_sale="INV-1001",
        settled_sale="INV-1002",
        deleted_sale="INV-1003",
        open_purchase="PO-2001",
        settled_purchase="PO-2002",
    )
