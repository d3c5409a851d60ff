"""Run the expired-event cleanup: once, or periodically in the foreground."""

import threading
from datetime import timedelta

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError
from django.db import close_old_connections


class Command(BaseCommand):
    help = "Purge expired events now and then on a fixed interval."

    def add_arguments(self, parser):
        parser.add_argument(
            "--once",
            action="store_true",
            help="Run a single sweep and exit.",
        )
        parser.add_argument(
            "--interval",
            type=int,
            default=None,
            help="Seconds between sweeps (default: EVENT_CLEANUP_INTERVAL_SECONDS).",
        )

    def handle(self, *args, **options):
        container = apps.get_app_config("events").container
        interval = options["interval"]
        if interval is not None and interval <= 0:
            raise CommandError("--interval must be a positive number of seconds")

        scheduler = container.cleanup_scheduler(
            interval=timedelta(seconds=interval) if interval else None,
            after_sweep=close_old_connections,
        )

        if options["once"]:
            report = scheduler.run_sweep()
            container.mirror.close()
            if report is None:
                self.stdout.write("A sweep is already running")
                return
            self.stdout.write(
                f"Expired: {report.examined}, purged: {len(report.purged)}, failed: {len(report.failed)}"
            )
            return

        scheduler.start()
        self.stdout.write(f"Cleanup running every {scheduler.interval}; press Ctrl-C to stop")
        try:
            threading.Event().wait()
        except KeyboardInterrupt:
            self.stdout.write("Stopping cleanup")
        finally:
            scheduler.stop(timeout=30)
            container.mirror.close()
