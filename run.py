import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from autolog import (
    LEVELS,
    AutoLogger,
    ChatSession,
    LoggingRequest,
    Proposal,
    add_variable_debug_log,
    default_log_file_name,
)
from autolog.proposal import write_locked
from config import get_constant, setup_logging
from utils.diff_view import DiffView
from utils.llm_client import create_llm_client

logger = logging.getLogger(__name__)


@click.group()
@click.option('--verbose', is_flag=True, help='Echo debug logs to the console')
def cli(verbose):
    """Smart Python Logger CLI"""
    load_dotenv()
    setup_logging("DEBUG" if verbose else None)


async def run_auto_logging(source_path: Path, request: LoggingRequest, model: str, view: DiffView, assume_yes: bool = False) -> bool:
    """Ask the model for logging, show the diff and apply or discard it. Returns True if applied."""
    original = source_path.read_text(encoding="utf-8")
    session = ChatSession(create_llm_client(model))
    auto_logger = AutoLogger(session)

    with view.console.status("Processing code with AI..."):
        result = await auto_logger.run(original, request)

    if not result:
        view.error(result.error or "No response from AI.")
        return False

    proposal = Proposal(source_path, original, result.code, session=session)
    proposal.write_temp()
    view.show(proposal)

    if assume_yes or view.ask_apply():
        proposal.apply()
        view.info("Changes applied successfully.")
        return True

    proposal.discard()
    view.info("Changes discarded.")
    return False


@cli.command()
@click.argument('source', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--log-file-name', default=None, help='Log file name (defaults to <source stem>.log)')
@click.option('--log-file-path', default=lambda: get_constant("DEFAULT_LOG_FILE_PATH"), show_default="./", help='Directory of the log file')
@click.option('--level', type=click.Choice(LEVELS, case_sensitive=False), default=lambda: get_constant("DEFAULT_LOG_LEVEL"), show_default="debug")
@click.option('--format', 'fmt', default=lambda: get_constant("DEFAULT_FORMAT"), help='logging format string')
@click.option('--model', default=lambda: get_constant("MAIN_MODEL"), help='Chat model to use')
@click.option('--yes', is_flag=True, help='Apply the proposal without asking')
def autolog(source, log_file_name, log_file_path, level, fmt, model, yes):
    """Add logging statements to SOURCE with the help of an LLM."""
    if source.suffix != ".py":
        raise click.BadParameter("Active file is not a Python file.", param_hint="SOURCE")

    request = LoggingRequest(
        file_name=log_file_name or default_log_file_name(source),
        file_path=log_file_path,
        level=level.lower(),
        fmt=fmt,
    )
    view = DiffView()
    try:
        asyncio.run(run_auto_logging(source, request, model, view, assume_yes=yes))
    except ValueError as e:
        view.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        view.error("Interrupted by user.")
        sys.exit(130)


@cli.command('debug-var')
@click.argument('source', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--line', 'line_number', type=int, required=True, help='1-based line after which to log')
@click.option('--var', 'variable', required=True, help='Variable (or expression) to log')
def debug_var(source, line_number, variable):
    """Insert a logging.debug line for VARIABLE after LINE of SOURCE."""
    view = DiffView()
    code = source.read_text(encoding="utf-8")
    try:
        updated = add_variable_debug_log(code, line_number - 1, variable)
    except ValueError as e:
        view.error(str(e))
        sys.exit(1)
    write_locked(source, updated)
    logger.info("Added debug log for %s at %s:%d", variable, source, line_number)
    view.info(f"Logged {variable} after line {line_number} of {source.name}")


if __name__ == '__main__':
    cli()
