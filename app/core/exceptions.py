"""Domain errors raised by services and translated to HTTP responses at the API edge."""


class AppError(Exception):
    """Base for errors that map to a client-visible failure envelope."""

    status_code = 400
    field = "request"

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        if field is not None:
            self.field = field
        super().__init__(message)


class AuthenticationFailedError(AppError):
    """Bad credentials, or an account that cannot sign in."""

    status_code = 401
    field = "authentication"


class InvalidTokenError(AppError):
    """Refresh token is missing, unknown, expired or otherwise unusable. Forces re-login."""

    status_code = 401
    field = "refreshToken"


class TokenNotFoundError(InvalidTokenError):
    pass


class TokenExpiredError(InvalidTokenError):
    pass


class PermissionDeniedError(AppError):
    status_code = 403
    field = "authorization"


class ResourceNotFoundError(AppError):
    status_code = 404
    field = "resource"


class EmailAlreadyExistsError(AppError):
    status_code = 409
    field = "email"


class InvalidDateRangeError(AppError):
    status_code = 400
    field = "dateRange"


class CarNotAvailableError(AppError):
    status_code = 409
    field = "car.availability"


class BookingStateError(AppError):
    """Booking cannot move to the requested status from its current one."""

    status_code = 409
    field = "booking.status"


class RentalStateError(AppError):
    """Rental cannot move to the requested status from its current one."""

    status_code = 409
    field = "rental.status"


class UserAlreadyRentingError(AppError):
    """A customer may hold at most one pending or active rental."""

    status_code = 409
    field = "rental"


class OAuth2NotConfiguredError(AppError):
    """Raised when Google sign-in is invoked but client credentials are missing."""

    status_code = 503
    field = "oauth2"


class OAuth2ProviderError(AppError):
    """Raised when the OAuth2 provider rejects the code exchange or user-info request."""

    status_code = 502
    field = "oauth2"
