"""Fleet orchestrator: render a template per inventory row and push it.

Rows are processed strictly in inventory order, one at a time. A device
failure is counted and reported, never retried, and never stops the run.
Template and inventory problems are fatal and raised before any device is
contacted.
"""

from __future__ import annotations

from pathlib import Path

from fleetcmd.models.credential import build_credential
from fleetcmd.models.inventory import Inventory, InventoryRow
from fleetcmd.models.results import ExecutionResult, RunSummary
from fleetcmd.services.inventory import load_inventory
from fleetcmd.services.pipeline import report_summary, run_command
from fleetcmd.services.reporter import Reporter
from fleetcmd.services.template import check_template, load_template, render_command
from fleetcmd.services.transport import Transport
from fleetcmd.utils.logging import get_logger

log = get_logger(__name__)


def progress_percent(current: int, total: int) -> int:
    return round(current / total * 100) if total else 100


class FleetOrchestrator:
    """Owns the progress counters and the reporter for one run."""

    def __init__(self, transport: Transport, reporter: Reporter) -> None:
        self._transport = transport
        self._reporter = reporter
        self.current = 0
        self.total = 0
        self.errors = 0

    def run(self, template_path: str | Path, inventory_path: str | Path) -> RunSummary:
        template = load_template(template_path)
        inventory = load_inventory(inventory_path)
        return self.run_loaded(template, inventory)

    def run_loaded(self, template: list[str], inventory: Inventory) -> RunSummary:
        check_template(template, inventory.param_width)
        self._reporter.open()

        self.current = 0
        self.total = len(inventory)
        self.errors = 0
        summary = RunSummary(
            total=self.total,
            log_path=str(self._reporter.log_path) if self._reporter.log_path else None,
        )
        log.info("fleet.run_start", devices=self.total)

        for row in inventory.rows:
            self.current += 1
            result = self._process(row, template)
            if result is None:
                summary.skipped += 1
                continue
            summary.attempted += 1
            summary.results.append(result)
            if not result.succeeded:
                self.errors += 1

        summary.errors = self.errors
        report_summary(self._reporter, self.errors)
        log.info(
            "fleet.run_done",
            devices=self.total,
            attempted=summary.attempted,
            skipped=summary.skipped,
            errors=self.errors,
        )
        return summary

    def _process(self, row: InventoryRow, template: list[str]) -> ExecutionResult | None:
        if not row.device or not row.has_credentials:
            missing = ", ".join(row.missing_fields)
            label = row.device or f"line {row.line}"
            self._reporter.status(f"WARNING: Skipping {label}: missing {missing}.")
            log.warning("fleet.row_skipped", line=row.line, missing=row.missing_fields)
            return None

        credential = build_credential(row.user, row.password)
        pct = progress_percent(self.current, self.total)
        self._reporter.status(
            f"({pct}%) [{self.current}/{self.total}] Configuring {row.device}",
        )
        command = render_command(template, row.params)
        result = run_command(self._transport, row.device, credential, command)
        if result.succeeded:
            self._reporter.content(result.raw_output)
        else:
            self._reporter.failure(row.device)
        return result
