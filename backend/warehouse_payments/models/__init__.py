from .warehouse import Base, Warehouse
from .party import Customer, Supplier
from .ledger import Sale, Purchase
from .balance_payment import BalancePayment
from .receipt_counter import ReceiptCounter

__all__ = ["Base", "Warehouse", "Customer", "Supplier", "Sale", "Purchase", "BalancePayment", "ReceiptCounter"]
