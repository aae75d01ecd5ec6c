"""Database models for identity app."""

import uuid
from typing import ClassVar, Final, final, override

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.core.exceptions import ValidationError
from django.core.validators import MinLengthValidator
from django.db import models

# Username length bounds
USERNAME_MIN_LENGTH: Final = 3
USERNAME_MAX_LENGTH: Final = 30


class PrincipalManager(BaseUserManager['Principal']):
    """Manager that creates principals with hashed secrets."""

    def create_principal(self, username: str, secret: str) -> 'Principal':
        """Validate and insert a new principal.

        The unique constraint on ``username`` is checked by the database
        during the insert, so a duplicate surfaces as ``IntegrityError``.

        Args:
            username: Requested username (3-30 characters).
            secret: Raw secret, stored only as a password hash.

        Returns:
            Saved Principal instance.

        Raises:
            ValidationError: If username or secret is invalid.
            IntegrityError: If the username is already taken.
        """
        principal = self.model(username=username)
        principal.set_secret(secret)
        principal.full_clean(exclude=['password'], validate_unique=False)
        principal.save(using=self._db)
        return principal


@final
class Principal(AbstractBaseUser):
    """Registered account that owns exactly one storage namespace.

    ``principal_id`` is generated at creation and is the only key used
    to address the principal's namespace. The secret is kept in the
    inherited ``password`` column as a Django password hash.
    """

    principal_id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    username = models.CharField(
        max_length=USERNAME_MAX_LENGTH,
        unique=True,
        validators=[MinLengthValidator(USERNAME_MIN_LENGTH)],
        help_text='Unique login name, 3-30 characters',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    objects = PrincipalManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS: ClassVar[list[str]] = []

    class Meta:
        """Model metadata."""

        verbose_name = 'Principal'  # type: ignore[mutable-override]
        verbose_name_plural = 'Principals'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['created_at']

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.username

    @property
    def namespace_id(self) -> str:
        """Identifier of the namespace owned by this principal."""
        return str(self.principal_id)

    def set_secret(self, secret: str) -> None:
        """Hash and store the secret.

        Args:
            secret: Raw secret.

        Raises:
            ValidationError: If the secret is empty.
        """
        if not secret:
            raise ValidationError({'password': 'Secret cannot be empty'})
        self.set_password(secret)
