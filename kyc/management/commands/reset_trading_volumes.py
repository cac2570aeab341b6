from datetime import date
from django.core.management.base import BaseCommand
from kyc.services.trading_limit_service import TradingLimitService


class Command(BaseCommand):
    help = "Zero the daily and monthly trading volume of every user whose window has rolled over."

    def add_arguments(self, parser):
        parser.add_argument("--date", type=date.fromisoformat, default=None, help="Reset as of this day (YYYY-MM-DD).")

    def handle(self, *args, **options):
        reset_count = TradingLimitService().reset_expired_windows(today=options["date"])
        self.stdout.write(self.style.SUCCESS(f"Reset trading volume windows for {reset_count} users"))
