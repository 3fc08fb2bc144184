import typing as t

from django.core.management.base import BaseCommand, CommandError

from events.domain.errors import DomainError
from events.services import get_event_service
from events.stores import get_registration_store


class Command(BaseCommand):
    help = "Delete registrations that still reference deleted events."

    def add_arguments(self, parser: t.Any) -> None:
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Only report the events with dangling registrations.",
        )

    def handle(self, *args: t.Any, **options: t.Any) -> None:
        if options["dry_run"]:
            dangling = get_registration_store().dangling_event_ids()
            for event_id in sorted(dangling, key=str):
                self.stdout.write(f"dangling registrations for event {event_id}")
            self.stdout.write(f"{len(dangling)} event(s) with dangling registrations.")
            return

        try:
            removed = get_event_service().sweep_dangling_registrations()
        except DomainError as exc:
            raise CommandError(str(exc)) from exc
        self.stdout.write(self.style.SUCCESS(f"Removed {removed} dangling registration(s)."))
