"""Protocol interfaces for the mock oracle's collaborators."""
from .event_sink import EventSink
from .payment_gateway import PaymentGateway

__all__ = ["EventSink", "PaymentGateway"]
