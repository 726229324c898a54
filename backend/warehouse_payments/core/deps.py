from typing import Optional

from fastapi import Query

from warehouse_payments.services.balance_payment_service import PaymentTarget, parse_party_filter


def get_party_target(
    customer_id: Optional[str] = Query(None, alias="customerId"),
    supplier_id: Optional[str] = Query(None, alias="supplierId"),
) -> PaymentTarget:
    # Raises InvalidRequest unless exactly one is given
    return parse_party_filter(customer_id, supplier_id)
