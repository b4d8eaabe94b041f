"""
Neokids seed command - creates reproducible demo data.

Usage:
    python manage.py seed           # seed all apps
    python manage.py seed --flush   # rebuild demo rows before seeding
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from neokids_backend.appointments.seeders import seed_appointments
from neokids_backend.catalog.seeders import seed_catalog
from neokids_backend.core.seeders import seed_core
from neokids_backend.inventory.seeders import seed_inventory


class Command(BaseCommand):
    help = "Seed database with demo data for the Neokids clinic"

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete existing demo data before seeding (audit entries are kept).",
        )

    def handle(self, *args, **options):
        flush = options.get("flush", False)

        self.stdout.write("=" * 80)
        self.stdout.write("  Neokids seed - demo data")
        self.stdout.write("=" * 80)

        try:
            with transaction.atomic():
                stats = {}

                self.stdout.write("\n[1/4] Seeding Core (Roles, Users, Settings)...")
                core_stats = seed_core(flush=flush)
                stats.update(core_stats)
                self._print_stats(core_stats)

                self.stdout.write("\n[2/4] Seeding Catalog (Services)...")
                catalog_stats = seed_catalog(flush=flush)
                stats.update(catalog_stats)
                self._print_stats(catalog_stats)

                self.stdout.write("\n[3/4] Seeding Inventory (Items, Movements)...")
                inventory_stats = seed_inventory(flush=flush)
                stats.update(inventory_stats)
                self._print_stats(inventory_stats)

                self.stdout.write("\n[4/4] Seeding Appointments (Demo patient & booking)...")
                appointment_stats = seed_appointments()
                stats.update(appointment_stats)
                self._print_stats(appointment_stats)

                self.stdout.write("\n" + "=" * 80)
                self.stdout.write(self.style.SUCCESS("  Seeding finished."))
                self.stdout.write("=" * 80)
                self._print_summary(stats)

        except Exception as e:
            self.stderr.write(f"\nSeeding failed: {e}")
            raise

    def _print_stats(self, stats):
        for key, value in stats.items():
            self.stdout.write(f"  - {key}: {value}")

    def _print_summary(self, stats):
        self.stdout.write("\nRecords (total):")
        for key, value in sorted(stats.items()):
            self.stdout.write(f"  * {key}: {value}")
