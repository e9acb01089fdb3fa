"""
Exceptions raised by the order document pipeline.

Missing satellite data and malformed line items are not errors; they
degrade to documented defaults inside the normalizer.
"""


class OrderDocumentError(Exception):
    """Base class for all order document failures."""


class OrderNotFoundError(OrderDocumentError):
    """The order row itself could not be found."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class QuotationNotFoundError(OrderDocumentError):
    """The quotation row could not be found."""

    def __init__(self, quotation_id: str):
        self.quotation_id = quotation_id
        super().__init__(f"Quotation not found: {quotation_id}")


class DocumentExportError(OrderDocumentError):
    """A renderer failed to write its printable artifact."""

    def __init__(self, kind: str, identifier: str, reason: str):
        self.kind = kind
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"{kind} export failed for {identifier}: {reason}")


class RecordLookupError(OrderDocumentError):
    """The store failed or timed out while reading a required record."""

    def __init__(self, kind: str, identifier: str, reason: str):
        self.kind = kind
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"{kind} {identifier} could not be read: {reason}")
