from django.core.management.base import BaseCommand
from django.utils import timezone

from crm.services import ledger
from crm.services.periods import previous_period, validate_period
from crm.services.repositories import CATEGORIES


class Command(BaseCommand):
    help = "Rebuild cached carry-forward reports for every payee category."

    def add_arguments(self, parser):
        parser.add_argument('--month', type=int, help='Defaults to last month')
        parser.add_argument('--year', type=int, help='Defaults to the year of last month')

    def handle(self, *args, **options):
        today = timezone.localdate()
        default_month, default_year = previous_period(today.month, today.year)
        month, year = validate_period(options.get('month') or default_month, options.get('year') or default_year)

        keys_refreshed = []
        for category in CATEGORIES:
            ledger.carry_forward_report(category, month, year, use_cache=False)
            keys_refreshed.append(ledger.report_cache_key(category, month, year))

        self.stdout.write(self.style.SUCCESS(f"Refreshed {len(keys_refreshed)} keys for {month}/{year}"))
