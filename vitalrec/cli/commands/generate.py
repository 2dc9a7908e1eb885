"""Generate command: build a dataset and write every requested output."""

import logging
import time
from dataclasses import replace
from pathlib import Path

import typer
from rich.logging import RichHandler

from ...config import get_config
from ...core.errors import InvalidArgument, VitalrecError
from ..app import app, console, get_json_mode
from ..utils import ExitCode, Output, format_elapsed


def setup_logging(verbose: bool = False, debug: bool = False):
    """Configure logging for generation."""
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )
    logging.getLogger("vitalrec").setLevel(level)
    # Faker logs every provider lookup at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)


@app.command("generate")
def generate_command(
    records: int | None = typer.Option(
        None,
        "--records",
        "-n",
        help="Target number of marriage + death records (sizes the population)",
    ),
    persons: int | None = typer.Option(
        None, "--persons", "-p", help="Target population size (overrides --records)"
    ),
    marriages: int | None = typer.Option(
        None, "--marriages", help="Number of marriages (default: 1.2x eligible brides)"
    ),
    deaths: int | None = typer.Option(
        None, "--deaths", help="Number of deaths (default: every eligible person)"
    ),
    seed: int | None = typer.Option(
        None, "--seed", help="Random seed for the generators"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output directory"
    ),
    sqlite: Path | None = typer.Option(
        None, "--sqlite", help="Also write all tables to this SQLite database"
    ),
    no_sql: bool = typer.Option(
        False, "--no-sql", help="Skip the INSERT statement file"
    ),
    no_documents: bool = typer.Option(
        False, "--no-documents", help="Skip the marriage and death documents"
    ),
    no_indexes: bool = typer.Option(
        False, "--no-indexes", help="Skip the document index catalog"
    ),
    corpora: Path | None = typer.Option(
        None, "--corpora", help="Custom corpora YAML file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
):
    """
    Generate a synthetic vital-records dataset.

    Builds reference pools, a three-generation population, marriages with
    witnesses and deaths, then writes SQL INSERT statements and denormalized
    marriage/death documents to the output directory.

    EXIT CODES:
        0 = Success
        1 = Invalid argument
        2 = Generation error
        3 = File not found
        4 = Output error

    Examples:
        vitalrec generate
        vitalrec generate -n 3000 --seed 42 -o ./bench
        vitalrec generate --persons 500 --deaths 50 --sqlite out/records.db
    """
    from ...corpora import load_corpora
    from ...emit import save_documents, save_sqlite, write_sql_file
    from ...generator import generate_dataset
    from ...projection import project_documents

    setup_logging(verbose=verbose, debug=debug)

    json_mode = get_json_mode()
    out = Output(console=console, json_mode=json_mode)
    start_time = time.time()
    out.blank()

    config = get_config()
    gen = replace(config.generation)
    if records is not None:
        gen.records_count = records
    if persons is not None:
        gen.person_count = persons
    if marriages is not None:
        gen.marriage_count = marriages
    if deaths is not None:
        gen.death_count = deaths
    if corpora is not None:
        gen.corpora_path = str(corpora)

    out_config = replace(config.output)
    if output is not None:
        out_config.output_dir = str(output)
    if no_indexes:
        out_config.create_indexes = False

    # Corpora
    try:
        corpus = load_corpora(gen.corpora_path or None)
    except FileNotFoundError:
        out.error(
            f"Corpora file not found: {gen.corpora_path}",
            path=gen.corpora_path,
            exit_code=ExitCode.FILE_NOT_FOUND,
        )
        raise typer.Exit(out.finish())
    except InvalidArgument as e:
        out.error(str(e), exit_code=ExitCode.INVALID_ARGUMENT)
        raise typer.Exit(out.finish())

    # Generation
    try:
        if not json_mode:
            with console.status("[cyan]Generating dataset...[/cyan]") as status:

                def on_progress(step: str, message: str):
                    status.update(f"[cyan]{message}[/cyan]")

                dataset = generate_dataset(
                    gen, corpora=corpus, seed=seed, on_progress=on_progress
                )
        else:
            dataset = generate_dataset(gen, corpora=corpus, seed=seed)
    except InvalidArgument as e:
        out.error(str(e), exit_code=ExitCode.INVALID_ARGUMENT)
        raise typer.Exit(out.finish())
    except VitalrecError as e:
        out.error(f"Generation failed: {e}", exit_code=ExitCode.GENERATION_ERROR)
        raise typer.Exit(out.finish())

    meta = dataset.meta
    out.success(
        f"Generated {len(dataset.persons)} persons, {len(dataset.marriages)} "
        f"marriages, {len(dataset.deaths)} deaths "
        f"({format_elapsed(meta['timings']['total'])}, seed={meta['seed']})",
        seed=meta["seed"],
        counts=meta["counts"],
        timings=meta["timings"],
    )
    for note in meta["truncations"]:
        out.warning(
            f"Stopped early, {note}",
            step=note.split(":", 1)[0],
            suggestion="Increase --persons or lower the requested count",
        )

    # Outputs
    written: list[str] = []
    try:
        if not no_sql:
            sql_path = out_config.sql_path
            count = write_sql_file(dataset, sql_path)
            written.append(str(sql_path))
            out.success(f"Wrote {count} INSERT statements to [bold]{sql_path}[/bold]")

        if sqlite is not None:
            save_sqlite(dataset, sqlite)
            written.append(str(sqlite))
            out.success(f"Saved tables to [bold]{sqlite}[/bold]")

        if not no_documents:
            marriage_docs, death_docs = project_documents(dataset)
            paths = save_documents(
                marriage_docs,
                death_docs,
                out_config.output_dir_resolved,
                create_indexes=out_config.create_indexes,
            )
            written.extend(str(p) for p in paths)
            out.success(
                f"Wrote {len(marriage_docs)} marriage and {len(death_docs)} "
                f"death documents to [bold]{out_config.output_dir}[/bold]"
            )
    except OSError as e:
        out.error(
            f"Failed to write output: {e}",
            path=e.filename,
            exit_code=ExitCode.OUTPUT_ERROR,
        )
        raise typer.Exit(out.finish())

    out.blank()
    out.files(written)
    out.blank()
    out.record_counts(meta["counts"])

    elapsed = time.time() - start_time
    out.set_data("total_time_seconds", elapsed)
    out.divider()
    out.text(f"[dim]Total time: {format_elapsed(elapsed)}[/dim]")

    raise typer.Exit(out.finish())