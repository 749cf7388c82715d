"""
Status and role enumerations.

Values are the exact strings used on the wire and in the database.
"""

import enum

from sqlalchemy import Enum


class AccountRole(str, enum.Enum):
    """
    Account role enumeration.

    Roles:
        USER: Default role for every new account
        RIDER: Granted when a rider application is approved
        ADMIN: Moderates riders, cashouts and other admins
    """
    USER = "user"
    RIDER = "rider"
    ADMIN = "admin"


class ParcelStatus(str, enum.Enum):
    """
    Parcel delivery status.

    Status flow:
        PENDING → RIDER_ASSIGNED → IN_TRANSIT → DELIVERED | SERVICE_CENTER_DELIVERED
    """
    PENDING = "pending"
    RIDER_ASSIGNED = "rider-assigned"
    IN_TRANSIT = "in-transit"
    DELIVERED = "delivered"
    SERVICE_CENTER_DELIVERED = "service-center-delivered"


class PaymentState(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class RiderStatus(str, enum.Enum):
    """Rider application status: PENDING → ACTIVE | REJECTED."""
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"


class WorkStatus(str, enum.Enum):
    IDLE = "idle"
    ON_WORK = "on-work"


class CashoutStatus(str, enum.Enum):
    """Cashout request status: PENDING → APPROVED | REJECTED."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Parcel states that count as an active rider assignment
ACTIVE_DELIVERY_STATUSES = (ParcelStatus.RIDER_ASSIGNED, ParcelStatus.IN_TRANSIT)

# Parcel states that count as a finished delivery
COMPLETED_DELIVERY_STATUSES = (ParcelStatus.DELIVERED, ParcelStatus.SERVICE_CENTER_DELIVERED)


def db_enum(enum_cls: type, name: str) -> Enum:
    """Column type that stores the enum *value* rather than the member name."""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )
