"""
Exceptions raised by the service's collaborators.

Route handlers translate these into HTTP responses; nothing here knows about
HTTP status codes.
"""


class MemberServiceError(Exception):
    """Base class for member service failures."""


class PasswordHashingError(MemberServiceError):
    """The password could not be hashed or checked against a stored hash."""


class MissingSigningKeyError(MemberServiceError):
    """No token signing key is configured."""


class StoreUnavailableError(MemberServiceError):
    """A store operation was attempted while the connection is not ready."""

    def __init__(self, state):
        super().__init__(f"Member store is not ready (state={state.value})")
        self.state = state


class DuplicateEmailError(MemberServiceError):
    """The store rejected a write because the email is already taken."""

    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}")
        self.email = email
