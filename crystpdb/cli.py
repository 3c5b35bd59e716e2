from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from tqdm import tqdm

from crystpdb.config import load_settings
from crystpdb.core.errors import ErrorLevel, PDBErrorException
from crystpdb.core.logging_utils import get_logger
from crystpdb.core.report import DiagnosticsReport
from crystpdb.parsers.dataset import StructureDataset
from crystpdb.parsers.pdb_format import PDBFormatParser

logger = get_logger(__name__)
app = typer.Typer(no_args_is_help=True)


@app.callback()
def main():
    """Read and check legacy PDB files."""
    get_logger("crystpdb", load_settings().log_level)


def _strictness(value: Optional[str]) -> ErrorLevel:
    if value is None:
        return load_settings().strictness
    try:
        return ErrorLevel.from_name(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


@app.command("check")
def check(
    files: list[Path] = typer.Argument(..., help="PDB files to parse."),
    strictness: Optional[str] = typer.Option(
        None, help="Lowest level that fails: general, loose, strict or breaking (default: CRYSTPDB_STRICTNESS)."
    ),
    quiet: bool = typer.Option(False, help="Only print the per file verdict."),
):
    """Parse files and print their diagnostics. Exits 1 if any file fails."""
    settings = load_settings()
    level = _strictness(strictness)
    ds = StructureDataset.from_paths(files, parser=PDBFormatParser(settings))
    failed = 0
    for item in ds:
        if not quiet:
            for error in item.errors:
                typer.echo(str(error))
        verdict = "FAIL" if item.fails(level) else "OK"
        failed += verdict == "FAIL"
        typer.echo(f"{verdict} {item.path} ({len(item.errors)} diagnostic(s))")
    if failed:
        raise typer.Exit(code=1)


@app.command("summary")
def summary(
    file: Path = typer.Argument(..., help="PDB file to summarise."),
):
    """Print a JSON summary of one parsed file."""
    settings = load_settings()
    try:
        pdb, errors = PDBFormatParser(settings).parse(file)
    except PDBErrorException as e:
        typer.echo(str(e.error), err=True)
        raise typer.Exit(code=2)
    out = pdb.to_dict()
    out["path"] = str(file)
    out["diagnostics"] = len(errors)
    typer.echo(json.dumps(out, indent=2))


@app.command("report")
def report(
    files: list[Path] = typer.Argument(..., help="PDB files to parse."),
    out: Path = typer.Option(..., help="Output table (.csv or .parquet)."),
):
    """Write the diagnostics of all files to one table."""
    settings = load_settings()
    ds = StructureDataset.from_paths(files, parser=PDBFormatParser(settings))
    items = tqdm(ds, total=len(ds), desc="Parsing PDB", unit="file")
    rep = DiagnosticsReport.from_errors((str(item.path), item.errors) for item in items)
    rep.save(out)
    logger.info("Wrote %d diagnostic(s) for %d file(s) to %s", rep.count(), len(ds), out)
