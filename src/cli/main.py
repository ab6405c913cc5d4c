"""Main CLI entry point for confluence-publish command.

This module provides the Typer application that serves as the entry point
for the confluence-publish command-line tool. A single command publishes one
note; options tune where the vault and configuration live.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.cli.publish_command import PublishCommand
from src.cli.output import OutputHandler

__version__ = "0.1.0"

# Create Typer app
app = typer.Typer(
    name="confluence-publish",
    help="""Publish an Obsidian note to Confluence.

QUICK START:
  confluence-publish Tech/Roadmap.md              # Publish one note
  confluence-publish Tech/Roadmap.md --dry-run    # Show the storage format only
  confluence-publish note.md --vault ~/notes      # Explicit vault root""",
    add_completion=False,
    rich_markup_mode=None,  # Disable Rich markup to avoid compatibility issues
    no_args_is_help=True,
)

# Module logger
logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"confluence-publish_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"confluence-publish version {__version__}")
        raise typer.Exit()


@app.command()
def main_command(
    file: str = typer.Argument(
        ...,
        help="Path of the note to publish",
    ),
    vault: Optional[str] = typer.Option(
        None,
        "--vault",
        help="Vault root (default: nearest folder with .confluence-publish or .obsidian)",
        metavar="DIR",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        help="Configuration file (default: <vault>/.confluence-publish/config.yaml)",
        metavar="PATH",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Print the storage format without publishing",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Publish an Obsidian note to Confluence.

    \b
    The note's folders become a chain of folder pages, the note becomes the
    page under the last folder, and Mermaid diagrams and embedded images are
    uploaded as attachments.

    \b
    EXAMPLES:
      confluence-publish Tech/RnD/Roadmap.md
      confluence-publish Tech/RnD/Roadmap.md --dry-run
      confluence-publish note.md --vault ~/notes --config ~/notes/publish.yaml

    \b
    CREDENTIALS (environment or <vault>/.confluence-publish/.env):
      CONFLUENCE_URL          - Your Confluence base URL
      CONFLUENCE_USER         - Your email address
      CONFLUENCE_API_TOKEN    - API token from Atlassian
    """
    _configure_logging(verbosity, logdir)

    output = OutputHandler(verbosity=verbosity, no_color=no_color)
    publish_cmd = PublishCommand(output_handler=output)

    exit_code = publish_cmd.run(
        file=file,
        vault_root=vault,
        config_path=config,
        dry_run=dry_run,
    )

    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
