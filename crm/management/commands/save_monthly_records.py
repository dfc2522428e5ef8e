from django.core.management.base import BaseCommand, CommandError

from crm.exceptions import LedgerError
from crm.services import ledger
from crm.services.repositories import CATEGORIES


class Command(BaseCommand):
    help = "Freeze one month's balances and carry unpaid amounts forward."

    def add_arguments(self, parser):
        parser.add_argument('category', choices=sorted(CATEGORIES) + ['all'])
        parser.add_argument('month', type=int)
        parser.add_argument('year', type=int)

    def handle(self, *args, **options):
        category = options['category']
        categories = sorted(CATEGORIES) if category == 'all' else [category]
        for key in categories:
            try:
                result = ledger.run_monthly_carry_forward(key, options['month'], options['year'])
            except LedgerError as exc:
                raise CommandError(f"{key}: {exc.detail}") from exc
            self.stdout.write(self.style.SUCCESS(
                f"{key}: {result.records_processed} records, "
                f"{result.carry_forward_updates} carried forward ({result.month}/{result.year})"
            ))
