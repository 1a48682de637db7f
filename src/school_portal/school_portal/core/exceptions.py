class DomainError(Exception):
    """Base class for errors the portal reports to the user or the job log."""


class ValidationError(DomainError):
    """Submitted data (attendance form, push token, query params) is invalid."""


class AuthenticationError(DomainError):
    """Email or password did not match an active profile."""


class AuthorizationError(DomainError):
    """The signed-in role may not perform this action."""


class PushGatewayError(DomainError):
    """The push gateway rejected a whole dispatch (not a single recipient)."""


class ConfigurationError(DomainError):
    pass
