"""Multi-module release orchestration.

Modules are released one after the other, in the order given. A failed
module is recorded in the failure ledger; unless continue-on-error is set
the run stops there and later modules are not attempted.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from modrelease.tasks import ModuleTask
from modrelease.workflow import ModulePipeline, ModuleReport

console = Console()

PipelineFactory = Callable[[ModuleTask], ModulePipeline]


class RunStatus(Enum):
    """Overall outcome of a run."""

    SUCCESS = "Successful Completion"
    STOPPED = "Stopped on Error"
    PARTIAL = "Partial Completion"


@dataclass(frozen=True)
class LedgerEntry:
    module: str
    reason: str
    step: str | None = None


@dataclass
class FailureLedger:
    """Failed modules in the order they failed."""

    entries: list[LedgerEntry] = field(default_factory=list)

    def record(self, report: ModuleReport) -> None:
        self.entries.append(LedgerEntry(report.task.name, report.reason, report.failed_step))

    @property
    def modules(self) -> list[str]:
        return [entry.module for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)


@dataclass
class RunReport:
    """Result of releasing a list of modules."""

    status: RunStatus
    ledger: FailureLedger
    reports: list[ModuleReport]
    finished_at: datetime

    @property
    def success(self) -> bool:
        return self.status is RunStatus.SUCCESS


@dataclass
class Orchestrator:
    """Runs the release pipeline for each module.

    Attributes:
        tasks: Modules to release, in order
        pipeline_factory: Creates the pipeline of one module
        continue_on_error: Keep going after a module fails
    """

    tasks: Sequence[ModuleTask]
    pipeline_factory: PipelineFactory
    continue_on_error: bool = False
    ledger: FailureLedger = field(default_factory=FailureLedger)

    def run(self) -> RunReport:
        reports: list[ModuleReport] = []
        stopped = False

        for task in self.tasks:
            report = self.pipeline_factory(task).run()
            reports.append(report)
            if report.success:
                continue

            console.print(f'[red]Error:[/red] processing module "{escape(task.name)}" failed.')
            self.ledger.record(report)
            if not self.continue_on_error:
                stopped = True
                break

        if not self.ledger:
            status = RunStatus.SUCCESS
        elif stopped:
            status = RunStatus.STOPPED
        else:
            status = RunStatus.PARTIAL

        result = RunReport(
            status=status,
            ledger=self.ledger,
            reports=reports,
            finished_at=datetime.now(),
        )
        print_summary(result)
        return result


def print_summary(report: RunReport) -> None:
    """Print the run status and the failed modules."""
    style = "green" if report.success else "red"
    timestamp = report.finished_at.strftime("%a %b %d %H:%M:%S %Y")
    console.print()
    console.print(
        Panel(
            f"[bold {style}]{report.status.value}[/bold {style}] at {timestamp}",
            title="Release Summary",
        )
    )
    if not report.ledger:
        return

    table = Table(title="Failed Modules")
    table.add_column("Module", style="cyan")
    table.add_column("Step")
    table.add_column("Reason")
    for entry in report.ledger.entries:
        table.add_row(escape(entry.module), entry.step or "", escape(entry.reason))
    console.print(table)
