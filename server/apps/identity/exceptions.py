"""Exceptions for identity app."""

from uuid import UUID


class DuplicateUsernameError(Exception):
    """Raised when registering a username that is already taken."""

    def __init__(self, username: str) -> None:
        """Initialize DuplicateUsernameError.

        Args:
            username: The username that is already taken.
        """
        self.username = username
        super().__init__('User already exists')


class InvalidCredentialsError(Exception):
    """Raised when username and secret do not match a principal.

    The message is the same whether the username is unknown or the
    secret is wrong.
    """

    def __init__(self) -> None:
        """Initialize InvalidCredentialsError."""
        super().__init__('Username or password is invalid')


class PrincipalNotFoundError(Exception):
    """Raised when no principal has the requested identifier."""

    def __init__(self, principal_id: UUID | str) -> None:
        """Initialize PrincipalNotFoundError.

        Args:
            principal_id: The identifier that was looked up.
        """
        self.principal_id = principal_id
        super().__init__(f'Principal not found: {principal_id}')
