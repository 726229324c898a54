from datetime import datetime, timedelta, timezone

from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from warehouse_payments.core import database
from warehouse_payments.core.database import get_db
from warehouse_payments.main import app
from warehouse_payments.models import BalancePayment, Sale


def _pay(client, **body):
    body.setdefault("paymentMethod", "cash")
    return client.post("/balance-payment", json=body)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_create_customer_payment_against_sale(client, db, ledger):
    r = _pay(
        client,
        customerId=ledger.customer_id,
        saleId=ledger.open_sale,
        amount=40,
        notes="cash at counter",
        warehousesId=ledger.warehouse_id,
    )
    assert r.status_code == 201
    data = r.json()
    assert data["success"] is True
    assert data["message"] == "Balance payment processed successfully"

    payment = data["balancePayment"]
    assert payment["customerId"] == ledger.customer_id
    assert payment["supplierId"] is None
    assert payment["saleId"] == ledger.open_sale
    assert payment["purchaseId"] is None
    assert payment["amount"] == 40.0
    assert payment["paymentMethod"] == "cash"
    assert payment["receiptNo"].startswith("BP-")
    assert payment["warehousesId"] == ledger.warehouse_id
    assert payment["customer"]["name"] == "Ali Traders"
    assert payment["supplier"] is None
    assert payment["sale"]["invoiceNo"] == ledger.open_sale
    assert payment["sale"]["balance"] == 60.0
    assert payment["sale"]["paidAmount"] == 40.0

    db.expire_all()
    sale = db.query(Sale).filter(Sale.invoice_no == ledger.open_sale).one()
    assert float(sale.balance) == 60.0


def test_create_supplier_payment_against_purchase(client, ledger):
    r = _pay(
        client,
        supplierId=ledger.supplier_id,
        purchaseId=ledger.open_purchase,
        amount="125.25",
        paymentMethod="bank_transfer",
    )
    assert r.status_code == 201
    payment = r.json()["balancePayment"]
    assert payment["supplier"]["companyName"] == "Agro Supplies Ltd"
    assert payment["purchase"]["referenceNo"] == ledger.open_purchase
    assert payment["purchase"]["balance"] == 274.75
    assert payment["purchase"]["paidAmount"] == 225.25


def test_missing_fields_are_400(client, ledger):
    r = client.post("/balance-payment", json={"customerId": ledger.customer_id, "amount": 10})
    assert r.status_code == 400
    assert r.json() == {"error": "Customer ID or Supplier ID, amount, and payment method are required"}

    r = client.post("/balance-payment", json={"amount": 10, "paymentMethod": "cash"})
    assert r.status_code == 400


def test_both_parties_are_400(client, ledger):
    r = _pay(client, customerId=ledger.customer_id, supplierId=ledger.supplier_id, amount=10)
    assert r.status_code == 400
    assert r.json()["error"] == "Cannot provide both customer ID and supplier ID"


def test_both_ledgers_are_400(client, ledger):
    r = _pay(
        client,
        customerId=ledger.customer_id,
        saleId=ledger.open_sale,
        purchaseId=ledger.open_purchase,
        amount=10,
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Cannot provide both sale ID and purchase ID"


def test_malformed_amount_is_400(client, ledger):
    r = _pay(client, customerId=ledger.customer_id, amount="lots")
    assert r.status_code == 400
    assert "error" in r.json()


def test_unknown_customer_is_404(client, ledger):
    r = _pay(client, customerId="no-such-customer", amount=10)
    assert r.status_code == 404
    assert r.json() == {"error": "Customer not found"}


def test_unknown_sale_is_404(client, ledger):
    r = _pay(client, customerId=ledger.customer_id, saleId="INV-404", amount=10)
    assert r.status_code == 404
    assert r.json() == {"error": "Sale not found"}


def test_overpayment_is_400_and_changes_nothing(client, db, ledger):
    r = _pay(client, customerId=ledger.customer_id, saleId=ledger.open_sale, amount=150)
    assert r.status_code == 400
    assert r.json() == {"error": "Payment amount cannot exceed outstanding balance"}

    db.expire_all()
    sale = db.query(Sale).filter(Sale.invoice_no == ledger.open_sale).one()
    assert float(sale.balance) == 100.0
    assert float(sale.paid_amount) == 0.0
    assert db.query(BalancePayment).count() == 0


def test_zero_balance_is_400(client, ledger):
    r = _pay(client, customerId=ledger.customer_id, saleId=ledger.settled_sale, amount=1)
    assert r.status_code == 400
    assert r.json() == {"error": "Sale has no outstanding balance"}


def test_list_requires_exactly_one_party(client, ledger):
    r = client.get("/balance-payment")
    assert r.status_code == 400
    assert r.json() == {"error": "Customer ID or Supplier ID is required"}

    r = client.get(
        "/balance-payment",
        params={"customerId": ledger.customer_id, "supplierId": ledger.supplier_id},
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Cannot provide both customer ID and supplier ID"}


def test_list_is_newest_first_and_repeatable(client, db, ledger):
    receipts = []
    for amount in (10, 20, 30):
        r = _pay(client, customerId=ledger.customer_id, saleId=ledger.open_sale, amount=amount)
        assert r.status_code == 201
        receipts.append(r.json()["balancePayment"]["receiptNo"])
    _pay(client, customerId=ledger.other_customer_id, amount=99)

    # Pin creation times so ordering does not depend on clock resolution
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for offset, receipt_no in enumerate(receipts):
        db.query(BalancePayment).filter(BalancePayment.receipt_no == receipt_no).update(
            {BalancePayment.created_at: base + timedelta(hours=offset)},
            synchronize_session=False,
        )
    db.commit()

    r = client.get("/balance-payment", params={"customerId": ledger.customer_id})
    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    listed = data["balancePayments"]
    assert [p["receiptNo"] for p in listed] == list(reversed(receipts))
    assert [p["amount"] for p in listed] == [30.0, 20.0, 10.0]
    assert all(p["customerId"] == ledger.customer_id for p in listed)

    again = client.get("/balance-payment", params={"customerId": ledger.customer_id})
    assert again.json() == data


def test_list_for_supplier(client, ledger):
    _pay(client, supplierId=ledger.supplier_id, purchaseId=ledger.open_purchase, amount=50)
    r = client.get("/balance-payment", params={"supplierId": ledger.supplier_id})
    assert r.status_code == 200
    payments = r.json()["balancePayments"]
    assert len(payments) == 1
    assert payments[0]["purchase"]["referenceNo"] == ledger.open_purchase


def test_receipt_lookup(client, ledger):
    created = _pay(client, supplierId=ledger.supplier_id, amount=12).json()["balancePayment"]

    r = client.get(f"/balance-payment/receipt/{created['receiptNo']}")
    assert r.status_code == 200
    assert r.json()["balancePayment"]["id"] == created["id"]

    r = client.get("/balance-payment/receipt/BP-0-000000")
    assert r.status_code == 404
    assert r.json() == {"error": "Balance payment not found"}


def test_statement(client, ledger):
    _pay(client, customerId=ledger.customer_id, saleId=ledger.open_sale, amount=25)

    r = client.get("/balance-payment/statement", params={"customerId": ledger.customer_id})
    assert r.status_code == 200
    data = r.json()
    summary = data["summary"]
    assert summary["totalDocuments"] == 2
    assert summary["totalAmount"] == 350.0
    assert summary["totalPaid"] == 275.0
    assert summary["totalBalance"] == 75.0
    assert summary["totalBalancePayments"] == 1
    assert summary["totalBalancePaid"] == 25.0

    documents = {d["invoiceNo"]: d for d in data["documents"]}
    assert set(documents) == {ledger.open_sale, ledger.settled_sale}
    assert documents[ledger.open_sale]["balance"] == 75.0
    assert documents[ledger.open_sale]["paidAmount"] == 25.0
    assert documents[ledger.settled_sale]["balance"] == 0.0

    r = client.get("/balance-payment/statement", params={"supplierId": ledger.deleted_supplier_id})
    assert r.status_code == 404
    assert r.json() == {"error": "Supplier not found"}


def test_sub_cent_amount_is_400_and_changes_nothing(client, db, ledger):
    r = _pay(client, customerId=ledger.customer_id, saleId=ledger.open_sale, amount="100.004")
    assert r.status_code == 400
    assert r.json() == {"error": "Payment amount cannot have more than two decimal places"}

    db.expire_all()
    sale = db.query(Sale).filter(Sale.invoice_no == ledger.open_sale).one()
    assert float(sale.balance) == 100.0
    assert db.query(BalancePayment).count() == 0


def test_oversized_amount_is_400(client, ledger):
    r = _pay(client, customerId=ledger.customer_id, amount="12345678901.00")
    assert r.status_code == 400
    assert r.json() == {"error": "Payment amount cannot exceed 9999999999.99"}


class _UnreachableDatabase:
    def query(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("could not connect to server"))

    def rollback(self):
        pass

    def close(self):
        pass


def test_database_failure_is_json_500(client, ledger):
    def broken_get_db():
        yield _UnreachableDatabase()

    app.dependency_overrides[get_db] = broken_get_db

    r = client.get("/balance-payment", params={"customerId": ledger.customer_id})
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}

    r = _pay(client, customerId=ledger.customer_id, saleId=ledger.open_sale, amount=10)
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}

    r = client.get("/balance-payment/statement", params={"supplierId": ledger.supplier_id})
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}


def test_startup_creates_tables_in_test_env():
    tables = set(inspect(database.engine).get_table_names())
    assert {"balance_payments", "sales", "purchases", "receipt_counters"} <= tables
