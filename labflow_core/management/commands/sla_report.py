import json
import logging
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from labflow_core.serializers import SLAMetricsSerializer, SLAStatusSerializer
from labflow_core.workflows.sla import SLAOrder, calculate_sla_status, coerce_datetime
from labflow_core.workflows.sla_metrics import DateRange, calculate_sla_metrics

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Compute SLA status and aggregate metrics for orders exported as JSON"

    def add_arguments(self, parser):
        parser.add_argument("path", help="JSON file holding a list of order objects")
        parser.add_argument("--from", dest="date_from", help="Received-date window start (ISO-8601)")
        parser.add_argument("--to", dest="date_to", help="Received-date window end (ISO-8601)")
        parser.add_argument("--now", dest="now", help="Evaluate as of this instant (ISO-8601)")
        parser.add_argument(
            "--summary-only",
            action="store_true",
            help="Omit per-order SLA statuses",
        )

    def _parse_instant(self, value, name):
        if value is None:
            return None
        parsed = coerce_datetime(value)
        if parsed is None:
            raise CommandError(f"Invalid --{name} value: {value}")
        return parsed

    def handle(self, *args, **options):
        path = Path(options["path"])
        try:
            payload = json.loads(path.read_text())
        except FileNotFoundError:
            raise CommandError(f"File not found: {path}")
        except json.JSONDecodeError as exc:
            raise CommandError(f"Invalid JSON in {path}: {exc}")

        if isinstance(payload, dict):
            payload = payload.get("orders", [])
        if not isinstance(payload, list):
            raise CommandError("Expected a list of orders or an object with an 'orders' list")

        # Metrics and per-order rows share one evaluation instant
        now = self._parse_instant(options.get("now"), "now") or timezone.now()
        start = self._parse_instant(options.get("date_from"), "from")
        end = self._parse_instant(options.get("date_to"), "to")

        date_range = None
        if start or end:
            if not (start and end):
                raise CommandError("--from and --to must be given together")
            try:
                date_range = DateRange(start=start, end=end)
            except ValueError as exc:
                raise CommandError(str(exc))

        orders = [SLAOrder.from_mapping(item) for item in payload if isinstance(item, dict)]
        skipped = len(payload) - len(orders)
        if skipped:
            logger.warning("Skipped %s non-object entries in %s", skipped, path)

        metrics = calculate_sla_metrics(orders, date_range=date_range, now=now)
        report = {"metrics": SLAMetricsSerializer(metrics).data}

        if not options["summary_only"]:
            in_range = [o for o in orders if date_range is None or date_range.contains(o.received_date)]
            report["orders"] = SLAStatusSerializer(
                [calculate_sla_status(o, now=now) for o in in_range],
                many=True,
            ).data

        self.stdout.write(json.dumps(report, indent=2, default=str))
