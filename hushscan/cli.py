import typer
from pathlib import Path
from typing import Optional, List
from enum import Enum
import json
import importlib.metadata
import logging
from rich.markup import escape
from rich.console import Console
from rich.table import Table
from contextlib import contextmanager
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn

from hushscan.core.memory import FindingMemory
from hushscan.core.models import fingerprint
from hushscan.core.scanner import FileScanner, SecretScanner
from hushscan.config.settings import load_config

class OutputFormat(str, Enum):
    text = "text"
    table = "table"
    json = "json"

app = typer.Typer(
    name="hushscan",
    help="A secret scanner that only reports credentials that look real.",
    add_completion=False,
)
console = Console()

# Global flag for debug mode
DEBUG = False

@contextmanager
def _debug_exception_handler():
    """A context manager to handle exceptions based on the global DEBUG flag."""
    try:
        yield
    except Exception as e:
        if DEBUG:
            # In debug mode, re-raise the exception to get a full stack trace
            raise
        else:
            console.print(f"[bold red]An unexpected error occurred:[/bold red] {escape(str(e))}", style="red")
            raise typer.Exit(code=1)

def version_callback(value: bool):
    """Prints the version of the application."""
    if value:
        try:
            version = importlib.metadata.version("hushscan")
            typer.echo(f"hushscan version: {version}")
        except importlib.metadata.PackageNotFoundError:
            typer.echo("hushscan version: (local development build)")
        raise typer.Exit()

@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show the application's version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Path to a file to write logs to.",
        writable=True,
        resolve_path=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging (shows why candidates were dropped).",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode (show full stack traces on errors).",
    ),
):
    """hushscan finds leaked credentials and stays quiet about the rest."""
    global DEBUG
    DEBUG = debug
    log_level = logging.DEBUG if verbose else logging.INFO

    if log_file:
        # When logging to a file, use a detailed format.
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            filename=str(log_file),
            filemode='w',
            force=True,  # This allows re-configuring the logger in tests
        )
        console.log(f"Logging to file: [cyan]{log_file}[/cyan]")
    else:
        # Keep console output clean and use rich for formatting.
        from rich.logging import RichHandler
        logging.basicConfig(
            level=log_level,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(show_path=False, console=Console(stderr=True))],
            force=True,  # This allows re-configuring the logger in tests
        )

def _print_findings(findings, format: OutputFormat):
    if format == OutputFormat.json:
        typer.echo(json.dumps([finding.to_dict() for finding in findings], indent=2))
        return

    if not findings:
        console.print("✅ No secrets found.", style="green")
        return

    console.print(f"🚨 Found {len(findings)} potential secret(s):", style="bold red")
    table = Table(title="Scan Results")
    table.add_column("Type", style="green")
    table.add_column("File", style="cyan")
    table.add_column("Line", style="magenta")
    table.add_column("Score", style="yellow")
    table.add_column("Fingerprint", style="blue")
    for finding in findings:
        table.add_row(
            finding.secret_type.value,
            escape(finding.file),
            str(finding.line),
            f"{finding.score:.1f}",
            finding.fingerprint,
        )
    console.print(table)

@app.command()
def scan(
    path: Path = typer.Argument(
        ".",
        exists=True,
        file_okay=True,
        dir_okay=True,
        readable=True,
        resolve_path=True,
        help="The path to a file or directory to scan.",
    ),
    all_files: bool = typer.Option(
        False,
        "--all",
        help="Treat every file as text, ignoring the extension allowlist.",
    ),
    allow: Optional[List[str]] = typer.Option(
        None,
        "--allow",
        "-a",
        help="Fingerprint of a secret to whitelist for this run. Can be used multiple times.",
    ),
    whitelist: bool = typer.Option(
        False,
        "--whitelist",
        help="Prompt for a fingerprint to whitelist for this run.",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        "-e",
        help="Paths to exclude (glob patterns). Can be used multiple times.",
    ),
    max_file_size: Optional[str] = typer.Option(
        None,
        "--max-file-size",
        help="Override the maximum file size to scan (e.g., '10MB', '1GB').",
    ),
    include_entropy: bool = typer.Option(
        False,
        "--include-entropy",
        help="Also run high-entropy words through the pipeline and report them.",
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        "-f",
        case_sensitive=False,
        help="The output format for the findings.",
    ),
    fail_on_finding: bool = typer.Option(
        False,
        "--fail-on-finding",
        "--fail",
        help="Exit with a non-zero status code if any secrets are found.",
    ),
):
    """Scan a directory or file for secrets."""
    with _debug_exception_handler():
        config = load_config()

        # Apply CLI overrides
        if all_files:
            config["rules"]["scan_all_files"] = True
            logging.info("Scanning all files regardless of extension.")

        if exclude:
            config["rules"]["excluded_paths"].extend(exclude)
            logging.info(f"Adding exclusion patterns: {', '.join(exclude)}")

        if max_file_size:
            value_to_set = max_file_size
            if value_to_set.isdigit():
                value_to_set += "MB"

            config["rules"]["max_file_size"] = value_to_set
            logging.info(f"Overriding max file size to: {value_to_set}")

        if include_entropy:
            config["rules"]["detectors"].setdefault("high_entropy", {})["enabled"] = True

        memory = FindingMemory(whitelist=allow or [])
        if whitelist:
            # Prompt on stderr so stdout stays pure findings output
            memory.allow(typer.prompt("Enter hash to whitelist", err=True))

        if format == OutputFormat.table:
            console.print(f"🔐 Scanning [cyan]{escape(str(path))}[/cyan]...")

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TextColumn("({task.completed} of {task.total} files)"),
            console=console,
            transient=True, # Hides the progress bar upon completion
            disable=format != OutputFormat.table,
        ) as progress:
            scanner = FileScanner(path, config=config, scanner=SecretScanner(config=config, memory=memory))
            if format == OutputFormat.text:
                # Plain lines are printed as each finding is accepted.
                findings = scanner.scan(progress=progress, on_finding=lambda f: typer.echo(f.format_line()))
            else:
                findings = scanner.scan(progress=progress)
                _print_findings(findings, format)

        if findings and fail_on_finding:
            console.print("\n💥 Failing build due to found secrets.", style="bold red")
            raise typer.Exit(code=1)

@app.command()
def entropy(
    path: Path = typer.Argument(
        ".",
        exists=True,
        file_okay=True,
        dir_okay=True,
        readable=True,
        resolve_path=True,
        help="The path to a file or directory to inspect.",
    ),
    all_files: bool = typer.Option(
        False,
        "--all",
        help="Treat every file as text, ignoring the extension allowlist.",
    ),
):
    """
    List long, high-entropy words without scoring or validating them.

    This is a diagnostic pass; nothing it prints is a confirmed finding.
    """
    with _debug_exception_handler():
        config = load_config()
        if all_files:
            config["rules"]["scan_all_files"] = True

        secret_scanner = SecretScanner(config=config)
        file_scanner = FileScanner(path, config=config, scanner=secret_scanner)

        total = 0
        for file_path, content in file_scanner.iter_contents():
            for token in secret_scanner.high_entropy_tokens(content):
                typer.echo(f"{file_path}: {token}")
                total += 1

        logging.info(f"{total} high-entropy word(s) found.")

@app.command("fingerprint")
def show_fingerprint(
    secret: str = typer.Argument(..., help="The exact secret text as reported."),
):
    """Print the fingerprint to pass to --allow for a given secret."""
    typer.echo(fingerprint(secret))
