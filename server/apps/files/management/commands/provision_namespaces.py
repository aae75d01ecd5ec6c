"""Management command to retry namespace provisioning."""

import logging
from typing import Any, Final

from django.core.management.base import BaseCommand, CommandError

from server.apps.files.exceptions import ProvisioningFailedError
from server.apps.files.infrastructure.storage import get_namespace_storage
from server.apps.files.logic.namespace_operations import (
    pending_namespaces,
    provision_namespace,
)

_DEFAULT_BATCH_SIZE: Final = 1000

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Provision namespaces that are missing, pending or failed."""

    help = 'Retry namespace provisioning for principals without a bucket'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be provisioned without provisioning',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=_DEFAULT_BATCH_SIZE,
            help=f'Max principals to process (default: {_DEFAULT_BATCH_SIZE})',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the provisioning command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        batch_size = options['batch_size']
        if batch_size < 1:
            raise CommandError('--batch-size must be at least 1')

        principals = pending_namespaces()[:batch_size]
        storage = get_namespace_storage()

        count = 0
        failed = 0

        for principal in principals:
            if dry_run:
                self.stdout.write(
                    f'Would provision: {principal.namespace_id} '
                    f'(user: {principal.username})',
                )
                count += 1
                continue

            try:
                provision_namespace(principal.principal_id, storage)
            except ProvisioningFailedError as exc:
                self.stderr.write(
                    f'Failed to provision {principal.namespace_id}: {exc.cause}',
                )
                failed += 1
                continue
            count += 1

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would provision {count} namespaces'),
            )
        else:
            logger.info('Provisioned %d namespaces, %d failed', count, failed)
            self.stdout.write(
                self.style.SUCCESS(
                    f'Provisioned {count} namespaces, {failed} failed',
                ),
            )
