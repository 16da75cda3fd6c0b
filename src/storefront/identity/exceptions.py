"""Authentication and authorization failures raised by the identity layer."""


class AuthenticationFailed(Exception):
    """Credentials or bearer token could not be verified."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)
        self.message = message


class PermissionDenied(Exception):
    """The authenticated user may not perform the requested action."""

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message)
        self.message = message
