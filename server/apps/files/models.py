"""Database models for files app."""

from typing import ClassVar, Final, final, override

from django.conf import settings
from django.db import models

# Constants for field max lengths
_REGION_MAX_LENGTH: Final = 64
_STATUS_MAX_LENGTH: Final = 16


@final
class Namespace(models.Model):
    """Storage bucket exclusively owned by one principal.

    The principal is the primary key, so ``namespace_id`` always equals
    the owner's ``principal_id`` and a second namespace for the same
    principal cannot exist. The bucket in storage carries the same name.
    """

    class Status(models.TextChoices):
        """Creation status of the bucket."""

        PENDING = 'pending', 'Pending'
        READY = 'ready', 'Ready'
        FAILED = 'failed', 'Failed'

    principal = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='namespace',
        primary_key=True,
    )

    region = models.CharField(
        max_length=_REGION_MAX_LENGTH,
        help_text='Region the bucket is created in',
    )

    status = models.CharField(
        max_length=_STATUS_MAX_LENGTH,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )

    last_error = models.TextField(
        blank=True,
        default='',
        help_text='Backend error of the last failed attempt',
    )

    attempts = models.PositiveIntegerField(
        default=0,
        help_text='Number of provisioning attempts',
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Namespace'  # type: ignore[mutable-override]
        verbose_name_plural = 'Namespaces'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['created_at']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.namespace_id} ({self.status})'

    @property
    def namespace_id(self) -> str:
        """Bucket name, equal to the owner's principal ID."""
        return str(self.principal_id)

    @property
    def is_ready(self) -> bool:
        """Whether the bucket exists in storage."""
        return self.status == self.Status.READY

    def mark_ready(self) -> None:
        """Record a successful provisioning attempt."""
        self.status = self.Status.READY
        self.last_error = ''
        self.attempts += 1
        self.save(update_fields=['status', 'last_error', 'attempts', 'modified_at'])

    def mark_failed(self, error: Exception) -> None:
        """Record a failed provisioning attempt.

        Args:
            error: Backend error that stopped the attempt.
        """
        self.status = self.Status.FAILED
        self.last_error = str(error)
        self.attempts += 1
        self.save(update_fields=['status', 'last_error', 'attempts', 'modified_at'])
