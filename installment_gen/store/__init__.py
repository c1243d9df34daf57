"""In-memory ledger standing in for the agreement and invoice data API."""

from installment_gen.store.ledger import (
    PROJECT_AGREEMENT,
    PROJECT_INVOICE,
    RENTAL_AGREEMENT,
    RENTAL_INVOICE,
    InvoiceLedger,
)

__all__ = [
    "InvoiceLedger",
    "PROJECT_AGREEMENT",
    "PROJECT_INVOICE",
    "RENTAL_AGREEMENT",
    "RENTAL_INVOICE",
]
