"""Custom exceptions for the negotiator application."""


class NegotiatorException(Exception):
    """Base exception for the negotiator application."""

    pass


class ValidationError(NegotiatorException):
    """Raised when validation fails."""

    def __init__(self, message: str, details: list | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class NotFoundError(NegotiatorException):
    """Raised when a resource is not found."""

    pass


class DatabaseError(NegotiatorException):
    """Raised when a database operation fails."""

    pass


class ServiceError(NegotiatorException):
    """Raised when a service operation fails."""

    pass


class IntegrationError(ServiceError):
    """Raised when an outbound integration (render, email) fails."""

    pass


class InvoiceRenderError(IntegrationError):
    pass


class EmailDeliveryError(IntegrationError):
    pass


class ConfigurationError(NegotiatorException):
    """Raised when configuration is invalid."""

    pass


class AuthenticationError(NegotiatorException):
    """Raised when authentication fails."""

    pass


class AuthorizationError(NegotiatorException):
    """Raised when an authenticated caller lacks a required scope."""

    pass
