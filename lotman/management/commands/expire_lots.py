"""
Management command to expire lots past their expiry date.

Usage:
    python manage.py expire_lots
    python manage.py expire_lots --dry-run
    python manage.py expire_lots --date 2026-03-01
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError

from lotman import ledger
from lotman.models import InventoryLot
from lotman.models.lot import USABLE_LOT_STATUSES


class Command(BaseCommand):
    """Expire lots command."""

    help = 'Marks usable lots whose expiry date has passed as EXPIRED'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show how many lots would expire without changing them'
        )
        parser.add_argument(
            '--date',
            dest='as_of',
            help='Expire lots with expiry date before this day (YYYY-MM-DD, default today)'
        )

    def handle(self, *args, **options):
        as_of = date.today()
        if options['as_of']:
            try:
                as_of = date.fromisoformat(options['as_of'])
            except ValueError:
                raise CommandError(f"Invalid date: {options['as_of']}") from None

        if options['dry_run']:
            pending = InventoryLot.objects.filter(
                status__in=USABLE_LOT_STATUSES,
            ).expiring_before(as_of).count()

            self.stdout.write(f'{pending} lot(s) would expire')
        else:
            count = ledger.expire_lots(as_of=as_of)
            self.stdout.write(
                self.style.SUCCESS(f'{count} lot(s) expired')
            )
