"""
Access Policy

Single decision point for who may do what with bookings and properties.

Callers describe the acting identity (Actor) and the ownership facts of the
resource (Ownership); ``can_act`` answers with a Decision that carries the
reason, so every endpoint denies with the same wording.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

ADMIN_ROLE = 'admin'


class Action(str, Enum):
    """Operations guarded by the policy"""
    VIEW_BOOKING = 'view_booking'
    UPDATE_BOOKING = 'update_booking'
    CHANGE_PAYMENT_STATUS = 'change_payment_status'
    DELETE_BOOKING = 'delete_booking'
    LIST_PROPERTY_BOOKINGS = 'list_property_bookings'
    CREATE_PROPERTY = 'create_property'
    UPDATE_PROPERTY = 'update_property'
    DELETE_PROPERTY = 'delete_property'


@dataclass(frozen=True)
class Actor:
    """The authenticated identity performing a request"""
    id: Any
    role: str = 'user'

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


@dataclass(frozen=True)
class Ownership:
    """
    Ownership facts about a resource

    owner_id: the booking's user for bookings, the owner for properties
    property_owner_id: owner of the property a booking belongs to
    """
    owner_id: Optional[Any] = None
    property_owner_id: Optional[Any] = None


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ''

    def __bool__(self) -> bool:
        return self.allowed


_DENY_MESSAGES = {
    Action.VIEW_BOOKING: 'Not authorized to view this booking',
    Action.UPDATE_BOOKING: 'Not authorized to update this booking',
    Action.CHANGE_PAYMENT_STATUS: 'Only the property owner or an admin can change the payment status',
    Action.DELETE_BOOKING: 'Only admins can delete bookings',
    Action.LIST_PROPERTY_BOOKINGS: 'Not authorized to view property bookings',
    Action.CREATE_PROPERTY: 'Authentication required to create a property',
    Action.UPDATE_PROPERTY: 'Not authorized to update this property',
    Action.DELETE_PROPERTY: 'Not authorized to delete this property',
}


def _same(left, right) -> bool:
    return left is not None and right is not None and str(left) == str(right)


def can_act(actor: Optional[Actor], ownership: Ownership, action: Action) -> Decision:
    """Decide whether ``actor`` may perform ``action`` on the described resource."""
    if actor is None or actor.id is None:
        return Decision(False, 'Authentication required')

    is_owner = _same(actor.id, ownership.owner_id)
    is_property_owner = _same(actor.id, ownership.property_owner_id)

    if actor.is_admin:
        return Decision(True, 'admin')

    if action is Action.CREATE_PROPERTY:
        return Decision(True, 'authenticated')

    if action in (Action.VIEW_BOOKING, Action.UPDATE_BOOKING):
        if is_owner:
            return Decision(True, 'booking owner')
        if is_property_owner:
            return Decision(True, 'property owner')
    elif action in (Action.CHANGE_PAYMENT_STATUS, Action.LIST_PROPERTY_BOOKINGS):
        if is_property_owner:
            return Decision(True, 'property owner')
    elif action in (Action.UPDATE_PROPERTY, Action.DELETE_PROPERTY):
        if is_owner:
            return Decision(True, 'property owner')

    return Decision(False, _DENY_MESSAGES[action])
