"""DRF bindings for the access policy."""

from __future__ import annotations

import structlog
from rest_framework import permissions  # type: ignore
from rest_framework.exceptions import PermissionDenied  # type: ignore

from shared.domain.policy import ADMIN_ROLE, Action, Actor, Decision, Ownership, can_act

logger = structlog.get_logger(__name__)


def actor_for(user) -> Actor | None:
    """Build the policy actor for a request user; anonymous users have none."""

    if user is None or not user.is_authenticated:
        return None
    role = ADMIN_ROLE if getattr(user, "is_admin", False) else getattr(user, "role", "user")
    return Actor(id=user.pk, role=role)


def check_access(user, ownership: Ownership, action: Action) -> Decision:
    """Evaluate the policy for ``user`` and log denials."""

    decision = can_act(actor_for(user), ownership, action)
    if not decision:
        logger.info(
            "access.denied",
            user_id=getattr(user, "pk", None),
            action=action.value,
            reason=decision.reason,
        )
    return decision


def enforce(user, ownership: Ownership, action: Action) -> Decision:
    """Like :func:`check_access` but raises ``PermissionDenied`` on deny."""

    decision = check_access(user, ownership, action)
    if not decision:
        raise PermissionDenied(decision.reason)
    return decision


class PolicyPermission(permissions.BasePermission):
    """Object permission driven by the view's ``policy_actions`` mapping.

    Objects must expose ``ownership()`` returning :class:`Ownership`.
    """

    def has_object_permission(self, request, view, obj):  # type: ignore
        action = getattr(view, "policy_actions", {}).get(getattr(view, "action", None))
        if action is None:
            return True
        decision = check_access(request.user, obj.ownership(), action)
        if not decision:
            self.message = decision.reason
        return decision.allowed
