"""Console reporting for vitalrec commands.

Commands report through ``Output``, which renders Rich text for people and,
under the global ``--json`` flag, collects the same facts into one JSON
object printed at the end of the command:

    out = Output(console=console, json_mode=get_json_mode())
    out.success("Generated 2664 persons", counts=dataset.counts())
    out.record_counts(dataset.counts())
    raise typer.Exit(out.finish())
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr
from rich.console import Console
from rich.table import Table


class ExitCode:
    """Process exit codes of the vitalrec CLI.

    0 = Success
    1 = Invalid argument (bad count, unknown locale, malformed corpus)
    2 = Generation error
    3 = File not found
    4 = Output error (could not write results)
    """

    SUCCESS = 0
    INVALID_ARGUMENT = 1
    GENERATION_ERROR = 2
    FILE_NOT_FOUND = 3
    OUTPUT_ERROR = 4


def _entry(message: str, **fields: Any) -> dict[str, Any]:
    entry: dict[str, Any] = {"message": message}
    entry.update({k: v for k, v in fields.items() if v is not None})
    return entry


class Output(BaseModel):
    """Human or JSON reporting for one command invocation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    console: Console
    json_mode: bool = False

    _data: dict[str, Any] = PrivateAttr()
    _exit_code: int = PrivateAttr(default=ExitCode.SUCCESS)

    def model_post_init(self, __context: Any) -> None:
        self._data = {"status": "success", "warnings": [], "errors": []}

    @property
    def exit_code(self) -> int:
        return self._exit_code

    def success(self, message: str, **data: Any) -> None:
        """Report a finished step; ``data`` only shows up in JSON mode."""
        if self.json_mode:
            self._data.update(data)
            return
        self.console.print(f"[green]✓[/green] {message}")

    def warning(
        self,
        message: str,
        *,
        step: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Report a non-fatal problem, e.g. a record type cut short."""
        if self.json_mode:
            self._data["warnings"].append(
                _entry(message, step=step, suggestion=suggestion)
            )
            return
        self.console.print(f"[yellow]⚠[/yellow] {message}")
        if suggestion:
            self.console.print(f"  [dim]→ {suggestion}[/dim]")

    def error(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        suggestion: str | None = None,
        exit_code: int = ExitCode.INVALID_ARGUMENT,
    ) -> None:
        """Report a fatal problem and remember the exit code."""
        self._exit_code = exit_code
        self._data["status"] = "error"

        if self.json_mode:
            self._data["errors"].append(
                _entry(
                    message,
                    path=str(path) if path is not None else None,
                    suggestion=suggestion,
                )
            )
            return
        self.console.print(f"[red]✗[/red] {message}")
        if suggestion:
            self.console.print(f"  [dim]→ {suggestion}[/dim]")

    def text(self, message: str) -> None:
        if not self.json_mode:
            self.console.print(message)

    def blank(self) -> None:
        if not self.json_mode:
            self.console.print()

    def divider(self) -> None:
        if not self.json_mode:
            self.console.print("═" * 60)

    def set_data(self, key: str, value: Any) -> None:
        """Add a key to the JSON result (ignored in human mode)."""
        self._data[key] = value

    def files(self, paths: list[Path | str]) -> None:
        """List written output files."""
        self._data["files"] = [str(p) for p in paths]
        if self.json_mode or not paths:
            return
        self.console.print("[bold]Files[/bold]")
        for path in paths:
            self.console.print(f"  {path}")

    def record_counts(self, counts: dict[str, int], title: str = "Records") -> None:
        """Row count per table.

        JSON mode stores ``{"records": {"persons": 2664, ...}}``.
        """
        if self.json_mode:
            self._data["records"] = dict(counts)
            return

        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("Table", style="cyan")
        table.add_column("Rows", justify="right")
        for name, count in counts.items():
            table.add_row(name, f"{count:,}")
        table.add_section()
        table.add_row("[bold]total[/bold]", f"[bold]{sum(counts.values()):,}[/bold]")
        self.console.print(table)

    def finish(self) -> int:
        """Print the JSON result in JSON mode; return the exit code."""
        if self.json_mode:
            self._data["exit_code"] = self._exit_code
            print(json.dumps(self._data, indent=2, ensure_ascii=False, default=str))
        return self._exit_code


def format_elapsed(seconds: float) -> str:
    """Format elapsed seconds as Xm Ys, Xs, or X.Ys under ten seconds."""
    if seconds >= 60:
        mins, secs = divmod(int(seconds), 60)
        return f"{mins}m {secs}s"
    if seconds < 10:
        return f"{seconds:.1f}s"
    return f"{seconds:.0f}s"
