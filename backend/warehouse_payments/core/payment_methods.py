from enum import Enum


class PaymentMethod(str, Enum):
    cash = "cash"
    card = "card"
    bank_transfer = "bank_transfer"
    cheque = "cheque"


PAYMENT_METHOD_VALUES = {m.value for m in PaymentMethod}
