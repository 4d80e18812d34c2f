import json

from django.core.management.base import BaseCommand, CommandError

from labflow_core.workflows import UnknownEntityType, workflow_definition


class Command(BaseCommand):
    help = "Print workflow status definitions and transition graphs as JSON"

    def add_arguments(self, parser):
        parser.add_argument(
            "kind",
            nargs="?",
            help="Entity type (sample, test, order, invoice, sequencing_run, pcr_plate). Omit for all.",
        )

    def handle(self, *args, **options):
        try:
            definition = workflow_definition(options.get("kind"))
        except UnknownEntityType as exc:
            raise CommandError(str(exc))

        self.stdout.write(json.dumps(definition, indent=2))
