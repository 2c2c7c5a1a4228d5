"""CLI entry point for Declbundle."""

import json
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich.console import Console

from declbundle.core import BundlerError, CollectionResult, Reference, SymbolCollector
from declbundle.program import InMemoryProgram, load_snapshot
from declbundle.report import (
    flag_names,
    is_depth_limited,
    reference_to_dict,
    result_to_dict,
    symbol_to_dict,
)

app = typer.Typer(
    name="declbundle",
    help="Collect the symbols a bundled type-declaration file needs.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

SnapshotArg = Annotated[
    Path, typer.Argument(help="Program snapshot (JSON)", exists=True, dir_okay=False)
]
EntryOption = Annotated[str, typer.Option("--entry", "-e", help="Entry file name in the snapshot")]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


def warn(message: str) -> None:
    err_console.print(f"[yellow]warning:[/] {message}")


def fail(error: BundlerError) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(code=1)


def load_program(snapshot: Path) -> InMemoryProgram:
    try:
        return load_snapshot(snapshot)
    except BundlerError as e:
        fail(e)


def run_collection(snapshot: Path, entry: str) -> CollectionResult:
    """Load a snapshot and collect for one entry file, exiting on fatal errors."""
    program = load_program(snapshot)
    try:
        return SymbolCollector(program, on_warning=warn).collect_file(entry)
    except BundlerError as e:
        fail(e)


def print_reference(ref: Reference, prefix: str, is_last: bool, depth: int, max_depth: int) -> None:
    """Print one reference and its subreferences as a tree branch."""
    branch = "└─" if is_last else "├─"
    style = "magenta" if ref.is_import_type else "cyan"
    location = f"{ref.ref.get_source_file().file_name}:{ref.ref.start}"
    suffix = f" [dim]#{ref.declaration_index}[/]" if ref.declaration_index else ""
    console.print(f"{prefix}{branch} [{style}]{ref.label}[/] [dim]{location}[/]{suffix}")

    child_prefix = prefix + ("   " if is_last else "│  ")
    if is_depth_limited(depth, max_depth):
        if ref.subrefs:
            console.print(f"{child_prefix}[dim]… {len(ref) - 1} more[/]")
        return
    for i, subref in enumerate(ref.subrefs):
        print_reference(subref, child_prefix, i == len(ref.subrefs) - 1, depth + 1, max_depth)


@app.command()
def collect(
    snapshot: SnapshotArg,
    entry: EntryOption,
    max_depth: Annotated[int, typer.Option("--depth", "-d", help="Maximum reference depth")] = 10,
    output_json: JsonOption = False,
) -> None:
    """Show ordered exports with their reference trees."""
    result = run_collection(snapshot, entry)

    if output_json:
        print(json.dumps(result_to_dict(result, max_depth)))
        return

    console.print(f"\n[bold]Exports of [cyan]{result.entry_file.file_name}[/cyan][/]\n")
    if not result.export_symbols:
        console.print("  [dim]No exports found[/]")

    for export_symbol, (orig_symbol, references) in result.export_symbols.items():
        kinds = ", ".join(flag_names(orig_symbol.flags)) or "symbol"
        alias = f" [dim]→ {orig_symbol.name}[/]" if orig_symbol is not export_symbol else ""
        console.print(f"[bold cyan]{export_symbol.name}[/]{alias} ({kinds})")
        for i, ref in enumerate(references):
            print_reference(ref, "  ", i == len(references) - 1, 0, max_depth)

    if result.external_star_module_names:
        console.print("\n[green]External modules:[/]")
        for module_name in sorted(result.external_star_module_names):
            console.print(f'  export * from "{module_name}"')

    console.print(
        f"\n[dim]Exports: {len(result.export_symbols)} | "
        f"Globals: {len(result.global_symbols)} | Warnings: {len(result.warnings)}[/]"
    )


@app.command()
def refs(
    snapshot: SnapshotArg,
    name: Annotated[str, typer.Argument(help="Export name")],
    entry: EntryOption,
    max_depth: Annotated[int, typer.Option("--depth", "-d", help="Maximum reference depth")] = 10,
    output_json: JsonOption = False,
) -> None:
    """Show the reference tree of one export."""
    result = run_collection(snapshot, entry)
    export_symbol = result.find_export(name)

    if export_symbol is None:
        if output_json:
            print(json.dumps({"error": f"No export named '{name}'"}))
        else:
            console.print(f"No export named '[cyan]{name}[/cyan]'")
        raise typer.Exit(code=1)

    orig_symbol, references = result.export_symbols[export_symbol]

    if output_json:
        print(
            json.dumps(
                {
                    "export": export_symbol.name,
                    "original": symbol_to_dict(orig_symbol),
                    "references": [reference_to_dict(r, 0, max_depth) for r in references],
                }
            )
        )
        return

    console.print(f"\n[bold]References of [cyan]{export_symbol.name}[/cyan][/]")
    declaration = orig_symbol.declarations[0]
    console.print(f"[dim]{declaration.get_source_file().file_name}:{declaration.start}[/]\n")
    if not references:
        console.print("  [dim]No references[/]")
    for i, ref in enumerate(references):
        print_reference(ref, "", i == len(references) - 1, 0, max_depth)

    total = sum(len(r) for r in references)
    console.print(f"\n[dim]References: {total}[/]")


@app.command(name="globals")
def globals_(snapshot: SnapshotArg, output_json: JsonOption = False) -> None:
    """List symbols of the global scope."""
    from declbundle.core.globals import get_global_symbols

    symbols = get_global_symbols(load_program(snapshot))

    if output_json:
        print(json.dumps([s.name for s in symbols]))
        return

    if not symbols:
        console.print("[dim]No global symbols[/]")
        return
    for symbol in symbols:
        console.print(f"[cyan]{symbol.name}[/cyan]")
    console.print(f"\n[dim]Globals: {len(symbols)}[/]")


if __name__ == "__main__":
    app()
