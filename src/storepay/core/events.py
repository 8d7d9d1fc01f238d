"""
Event names emitted into the webhook dispatcher.
"""
from enum import Enum


class EventName(str, Enum):
    """Events a webhook subscriber can register for."""
    ORDER_CREATED = "order.created"
    ORDER_UPDATED = "order.updated"
    ORDER_DELETED = "order.deleted"
    TRANSACTION_CREATED = "transaction.created"
    TRANSACTION_UPDATED = "transaction.updated"
    TRANSACTION_DELETED = "transaction.deleted"
    CUSTOMER_CREATED = "customer.created"
    CUSTOMER_UPDATED = "customer.updated"
    CUSTOMER_DELETED = "customer.deleted"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


def event_value(event: "EventName | str") -> str:
    """Plain event name for headers and subscription matching."""
    return event.value if isinstance(event, EventName) else str(event)
