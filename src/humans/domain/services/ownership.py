"""Identity and ownership checks shared by the store services."""

from humans.domain.exceptions import (
    AuthenticationRequiredError,
    AuthorizationError,
    NotFoundError,
)


def require_identity(current_user_id: str | None) -> str:
    """Return the caller's ID or fail when nobody is signed in."""
    if not current_user_id:
        raise AuthenticationRequiredError()
    return current_user_id


def require_owner(
    current_user_id: str | None,
    owner_id: str | None,
    *,
    resource: str,
    action: str,
) -> str:
    """Check that the caller owns a resource.

    Args:
        current_user_id: The signed-in caller, if any.
        owner_id: Owner of the resource; None when the resource is missing.
        resource: Resource name for error messages ("block", "collection").
        action: Verb for error messages ("update", "delete").

    Returns:
        The caller's ID.

    Raises:
        AuthenticationRequiredError: If nobody is signed in.
        NotFoundError: If the resource does not exist.
        AuthorizationError: If the resource belongs to someone else.
    """
    caller_id = require_identity(current_user_id)
    if owner_id is None:
        raise NotFoundError(f"{resource.capitalize()} not found")
    if owner_id != caller_id:
        raise AuthorizationError(
            f"Unauthorized: Cannot {action} {resource} belonging to another user"
        )
    return caller_id


def require_self(current_user_id: str | None, owner_id: str, *, action: str) -> str:
    """Check that an operation scoped to owner_id is issued by that owner."""
    caller_id = require_identity(current_user_id)
    if owner_id != caller_id:
        raise AuthorizationError(f"Unauthorized: Cannot {action} for another user")
    return caller_id
