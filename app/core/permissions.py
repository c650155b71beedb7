"""
Declarative access policy.

``POLICY[(resource, action)][role]`` is a predicate ``(identity, record) -> bool``.
Routes never compare roles themselves: they call :func:`authorize` for a
single record (or request payload) and :func:`visibility_clauses` to scope
list queries. A role missing from an entry is denied.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import Forbidden
from .security import UserRole

logger = logging.getLogger(__name__)

Predicate = Callable[[Any, Any], bool]


def allow(identity, record) -> bool:
    return True


def own_patient(identity, record) -> bool:
    return record is not None and record.patient_id == identity.user_id


def own_doctor(identity, record) -> bool:
    return record is not None and record.doctor_id == identity.user_id


def owner(identity, record) -> bool:
    return record is not None and record.user_id == identity.user_id


def books_for_self(identity, payload) -> bool:
    return payload is not None and payload.patient_id == identity.user_id


_SCOPED_READ: Dict[UserRole, Predicate] = {
    UserRole.ADMIN: allow,
    UserRole.ATTENDANT: allow,
    UserRole.PATIENT: own_patient,
    UserRole.DOCTOR: own_doctor,
}

_BOOKING_CREATE: Dict[UserRole, Predicate] = {
    UserRole.ADMIN: allow,
    UserRole.ATTENDANT: allow,
    UserRole.DOCTOR: allow,
    UserRole.PATIENT: books_for_self,
}

POLICY: Dict[Tuple[str, str], Dict[UserRole, Predicate]] = {}

for _resource in ("consulta", "exame"):
    POLICY[(_resource, "create")] = _BOOKING_CREATE
    POLICY[(_resource, "read")] = _SCOPED_READ
    POLICY[(_resource, "update")] = _SCOPED_READ
    # Cancel shares the update rule: a doctor may only cancel their own bookings
    POLICY[(_resource, "cancel")] = _SCOPED_READ

POLICY[("resultado", "create")] = {
    UserRole.ADMIN: allow,
    UserRole.DOCTOR: allow,
}
POLICY[("resultado", "read")] = _SCOPED_READ

POLICY[("push_token", "register")] = {role: allow for role in UserRole}
POLICY[("push_token", "delete")] = {role: owner for role in UserRole}

# Column each scoped role is filtered on when listing
_LIST_SCOPE: Dict[UserRole, str] = {
    UserRole.PATIENT: "patient_id",
    UserRole.DOCTOR: "doctor_id",
}

_DENIAL_MESSAGES = {
    ("consulta", "create"): "You can only book appointments for yourself",
    ("exame", "create"): "You can only book exams for yourself",
    ("resultado", "create"): "Only doctors and administrators can create results",
    ("push_token", "delete"): "You do not have permission to remove this token",
}


def is_allowed(identity, resource: str, action: str, record: Any = None) -> bool:
    rules = POLICY.get((resource, action))
    if rules is None:
        raise KeyError(f"No access policy for {resource}:{action}")
    predicate = rules.get(identity.role)
    return bool(predicate and predicate(identity, record))


def authorize(identity, resource: str, action: str, record: Any = None) -> None:
    """Raise :class:`Forbidden` unless ``identity`` may perform ``action``."""
    if not is_allowed(identity, resource, action, record):
        logger.info(
            f"Denied {resource}:{action} for user {identity.user_id} "
            f"({getattr(identity.role, 'value', identity.role)})"
        )
        raise Forbidden(_DENIAL_MESSAGES.get((resource, action)))


def visibility_clauses(identity, model) -> List[Any]:
    """SQLAlchemy filter clauses restricting ``model`` to what the caller may list."""
    column: Optional[str] = _LIST_SCOPE.get(identity.role)
    if column is None:
        return []
    return [getattr(model, column) == identity.user_id]
