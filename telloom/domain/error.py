"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    pass


class InvalidTransitionError(BusinessRuleViolationError):
    """Raised when an invitation is moved out of a terminal status."""

    pass


class AuthorityUnavailableError(DomainError):
    """Raised when an authority store call fails or exceeds its time budget.

    Callers resolve this to the conservative outcome (deny / no partition),
    never to a grant.
    """

    def __init__(self, operation: str, detail: str | None = None):
        self.operation = operation
        self.detail = detail
        message = f"Authority store unavailable during {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ProvisioningError(DomainError):
    """Raised when every write path failed for a required provisioning step."""

    def __init__(self, step: str, failures: list[str]):
        self.step = step
        self.failures = failures
        super().__init__(f"Provisioning step {step} failed on all paths: {failures}")


class NotAuthorizedError(DomainError):
    """Raised when a principal acts on a partition or invitation it may not."""

    def __init__(self, action: str, resource: str, principal_id: str):
        self.action = action
        self.resource = resource
        super().__init__(f"Principal {principal_id} is not authorized to {action} {resource}")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")
