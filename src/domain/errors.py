"""Domain exceptions

Raised by pure domain functions and the credit ledger; use cases translate
them into ``libs.result.Error`` values using ``code``.
"""


class DomainError(Exception):
    code = "DOMAIN_ERROR"

    def __init__(self, message: str, reason: str = None):
        super().__init__(message)
        self.message = message
        self.reason = reason


class InvalidAvailabilityRule(DomainError):
    code = "INVALID_AVAILABILITY_RULE"


class InvalidTransition(DomainError):
    code = "INVALID_TRANSITION"


class AlreadyTerminal(InvalidTransition):
    code = "ALREADY_TERMINAL"


class InvalidDeclaration(DomainError):
    code = "INVALID_DECLARATION"


class InsufficientCredits(DomainError):
    code = "INSUFFICIENT_CREDITS"

    def __init__(self, required: int, available: int):
        super().__init__(
            f"Insufficient credits. Required: {required}, Available: {available}",
            reason=f"available={available}, required={required}",
        )
        self.required = required
        self.available = available


class PackageNotFound(DomainError):
    code = "PACKAGE_NOT_FOUND"
