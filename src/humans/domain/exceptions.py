"""Domain exceptions for humans.inc.

Every service operation either returns its result or raises one of these.
The HTTP layer maps each class to a status code in a single place.
"""

from dataclasses import dataclass


class HumansError(Exception):
    """Base exception for all domain errors."""

    error = "Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationRequiredError(HumansError):
    """Raised when an operation needs a signed-in identity and there is none."""

    error = "Authentication required"
    redirect = "/login"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class AuthorizationError(HumansError):
    """Raised when the caller does not own the resource it acts on."""

    error = "Forbidden"


class ProfileSetupRequiredError(HumansError):
    """Raised when the caller has no profile or no username yet."""

    error = "Setup required"
    redirect = "/dashboard?setup=required"

    def __init__(self, message: str = "Complete your profile setup first") -> None:
        super().__init__(message)


class NotFoundError(HumansError):
    """Raised when an authenticated read expects a record that does not exist."""

    error = "Not Found"


class ValidationError(HumansError):
    """Raised when input fails validation before reaching persistence.

    Attributes:
        field: Name of the offending field, when known.
        code: Machine-readable error code.
    """

    error = "Validation error"

    def __init__(self, message: str, field: str | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.code = code


class BlockContentError(ValidationError):
    """Raised when a block's content payload does not match its block type."""


class ConflictError(HumansError):
    """Raised on a uniqueness conflict."""

    error = "Conflict"
    field: str | None = None


class SlugTakenError(ConflictError):
    """Raised when a slug is already used by another block of the same owner."""

    field = "slug"

    def __init__(self, slug: str) -> None:
        super().__init__(f"The slug '{slug}' is already taken")
        self.slug = slug


class UsernameTakenError(ConflictError):
    """Raised when a username belongs to another profile."""

    field = "username"

    def __init__(self) -> None:
        super().__init__("This username is already taken.")


class EmailTakenError(ConflictError):
    """Raised when signing up with an email that already has an account."""

    field = "email"

    def __init__(self) -> None:
        super().__init__("An account with this email already exists")


class BioBlockExistsError(ConflictError):
    """Raised when creating a second bio block; points at the existing one."""

    field = "block_type"

    def __init__(self, existing_block_id: str) -> None:
        super().__init__("A bio block already exists; edit it instead")
        self.existing_block_id = existing_block_id

    @property
    def redirect(self) -> str:
        return f"/dashboard/edit-block/{self.existing_block_id}"


@dataclass
class BatchItemFailure:
    """One failed item of a batch update."""

    id: str
    reason: str


class BatchUpdateError(HumansError):
    """Raised after a batch update attempted every item and some failed.

    Items that succeeded stay applied; there is no rollback.
    """

    error = "Partial failure"

    def __init__(self, message: str, failures: list[BatchItemFailure] | None = None) -> None:
        super().__init__(message)
        self.failures: list[BatchItemFailure] = failures if failures is not None else []

    @property
    def failed_ids(self) -> list[str]:
        return [failure.id for failure in self.failures]


class StorageError(HumansError):
    """Raised when the object store rejects an operation."""

    error = "Storage error"
