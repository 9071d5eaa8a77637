"""
Row-level access rules expressed over an explicit caller context.

Mirrors the RLS policies in supabase/migrations so services can decide access
for a given caller without relying on an ambient "current user". Policies for
one resource/operation are OR-composed: the operation is allowed if any
matching policy's predicate holds for the caller and the row's owner.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

from app.config import settings

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


ALL_OPERATIONS = frozenset(Operation)

SELF = "self"
ADMIN = "admin"

PROFILES = "profiles"
APPLICATIONS = "membership_applications"
ROLE_GRANTS = "user_roles"
DOCUMENTS = "documents"


@dataclass(frozen=True)
class CallerContext:
    user_id: str
    email: Optional[str] = None
    is_admin: bool = False
    access_token: Optional[str] = None


class AccessDenied(Exception):
    def __init__(self, resource: str, operation: Operation):
        self.resource = resource
        self.operation = operation
        super().__init__(f"{operation.value} on {resource} denied")


# resource -> [(operations, predicate)]
POLICIES: Dict[str, List[Tuple[frozenset, str]]] = {
    PROFILES: [
        (ALL_OPERATIONS, SELF),
        (frozenset({Operation.SELECT}), ADMIN),
    ],
    APPLICATIONS: [
        (frozenset({Operation.SELECT}), SELF),
        (frozenset({Operation.INSERT}), SELF),
        (ALL_OPERATIONS, ADMIN),
    ],
    ROLE_GRANTS: [
        (ALL_OPERATIONS, ADMIN),
    ],
    DOCUMENTS: [
        (frozenset({Operation.INSERT, Operation.SELECT, Operation.UPDATE}), SELF),
    ],
}


def _admin_document_policies() -> List[Tuple[frozenset, str]]:
    if settings.admin_document_access:
        return [(frozenset({Operation.SELECT}), ADMIN)]
    return []


def policies_for(resource: str) -> List[Tuple[frozenset, str]]:
    policies = list(POLICIES.get(resource, []))
    if resource == DOCUMENTS:
        policies.extend(_admin_document_policies())
    return policies


def _predicate_holds(predicate: str, ctx: CallerContext, owner_id: Optional[str]) -> bool:
    if predicate == SELF:
        return owner_id is not None and str(ctx.user_id) == str(owner_id)
    if predicate == ADMIN:
        return ctx.is_admin is True
    return False


def is_allowed(
    ctx: CallerContext,
    resource: str,
    operation: Operation,
    owner_id: Optional[str] = None,
) -> bool:
    """True if any policy covering this resource/operation is satisfied by the caller."""
    for operations, predicate in policies_for(resource):
        if operation in operations and _predicate_holds(predicate, ctx, owner_id):
            return True
    return False


def authorize(
    ctx: CallerContext,
    resource: str,
    operation: Operation,
    owner_id: Optional[str] = None,
) -> None:
    """Raise AccessDenied for an operation no policy permits."""
    if not is_allowed(ctx, resource, operation, owner_id):
        logger.warning(
            f"Denied {operation.value} on {resource} for user {ctx.user_id} (owner {owner_id})"
        )
        raise AccessDenied(resource, operation)


def visible_rows(
    ctx: CallerContext,
    resource: str,
    rows: Iterable[Dict[str, Any]],
    owner_field: str = "user_id",
) -> List[Dict[str, Any]]:
    """Filter rows the way a SELECT policy does: invisible rows are dropped, never an error."""
    return [
        row for row in rows
        if is_allowed(ctx, resource, Operation.SELECT, row.get(owner_field))
    ]


def document_owner(path: str) -> Optional[str]:
    """Owner identity of a storage object: the first path segment."""
    segments = [s for s in path.strip("/").split("/") if s]
    if len(segments) < 2:
        return None
    return segments[0]
