"""
Wire shapes for balance payments and the rows they reference.
Format only, no business rules.
"""


def serialize_decimal(value):
    """Decimal -> float for JSON"""
    if value is None:
        return None
    return float(value)


def serialize_datetime(value):
    if value is None:
        return None
    return value.isoformat()


def serialize_customer(customer):
    if customer is None:
        return None
    return {
        "id": customer.id,
        "name": customer.name,
        "phone": customer.phone,
        "email": customer.email,
        "address": customer.address,
        "warehousesId": customer.warehouses_id,
    }


def serialize_supplier(supplier):
    if supplier is None:
        return None
    return {
        "id": supplier.id,
        "name": supplier.name,
        "phone": supplier.phone,
        "email": supplier.email,
        "address": supplier.address,
        "companyName": supplier.company_name,
        "warehousesId": supplier.warehouses_id,
    }


def serialize_sale(sale):
    if sale is None:
        return None
    return {
        "id": sale.id,
        "invoiceNo": sale.invoice_no,
        "customerId": sale.customer_id,
        "grandTotal": serialize_decimal(sale.grand_total),
        "paidAmount": serialize_decimal(sale.paid_amount),
        "balance": serialize_decimal(sale.balance),
        "createdAt": serialize_datetime(sale.created_at),
    }


def serialize_purchase(purchase):
    if purchase is None:
        return None
    return {
        "id": purchase.id,
        "referenceNo": purchase.reference_no,
        "supplierId": purchase.supplier_id,
        "totalAmount": serialize_decimal(purchase.total_amount),
        "paidAmount": serialize_decimal(purchase.paid_amount),
        "balance": serialize_decimal(purchase.balance),
        "createdAt": serialize_datetime(purchase.created_at),
    }


def serialize_balance_payment(payment):
    """Payment plus its resolved customer/supplier/sale/purchase"""
    return {
        "id": payment.id,
        "customerId": payment.customer_id,
        "supplierId": payment.supplier_id,
        "saleId": payment.sale_id,
        "purchaseId": payment.purchase_id,
        "amount": serialize_decimal(payment.amount),
        "paymentMethod": payment.payment_method,
        "receiptNo": payment.receipt_no,
        "notes": payment.notes,
        "warehousesId": payment.warehouses_id,
        "createdAt": serialize_datetime(payment.created_at),
        "isDeleted": payment.is_deleted,
        "customer": serialize_customer(payment.customer),
        "supplier": serialize_supplier(payment.supplier),
        "sale": serialize_sale(payment.sale),
        "purchase": serialize_purchase(payment.purchase),
    }
