"""Account-flow exceptions.

Routes raise these; ``api.errors`` turns them into JSON responses.
"""


class AccountError(Exception):
    """Base exception for all account-flow errors."""

    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BadRequest(AccountError):
    """Raised when required fields are missing or do not match."""

    status_code = 400
    message = "Bad request"


class UserNotFound(AccountError):
    """Raised when no record exists for the given email."""

    status_code = 400
    message = "User not found"

    def __init__(self, email: str):
        """Initialize the exception.

        Args:
            email: The address that has no record.
        """
        self.email = email
        super().__init__()


class InvalidCode(AccountError):
    """Raised when a submitted verification code does not match."""

    status_code = 400
    message = "Invalid Verification Code"


class MailDispatchError(AccountError):
    """Raised when the verification email could not be handed to the relay."""

    status_code = 500
    message = "Internal Server Error"
