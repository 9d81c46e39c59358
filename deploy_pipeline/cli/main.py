# deploy_pipeline/cli/main.py
"""Main CLI entry point for deploy-pipeline"""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.logging import RichHandler

from .utils.output import console, format_batch_result, format_pending_table
from ..__version__ import __version__
from ..api.deployer import Deployer
from ..api.exceptions import DeployPipelineError
from ..constants import APP_NAME, LOG_FORMAT
from ..services.config_service import ConfigService
from ..services.report import open_report, write_pending_report

logger = logging.getLogger(__name__)

DEPLOY_ARGUMENT = "DEPLOY"

# Exit codes
EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INVALID_ARGUMENTS = 2


def setup_logging(verbose: bool = False, debug: bool = False, quiet: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
        quiet: Only show errors (ERROR level)
    """
    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ],
        force=True
    )

    # Adjust third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def parse_mode(args: Tuple[str, ...]) -> Optional[str]:
    """Map positional arguments to a run mode

    Returns:
        ``report`` for no arguments, ``deploy`` for a single DEPLOY
        argument (any case), None for anything else
    """
    if not args:
        return "report"
    if len(args) == 1 and args[0].upper() == DEPLOY_ARGUMENT:
        return "deploy"
    return None


def run_report(deployer: Deployer, open_file: bool) -> None:
    """List pending projects, write the HTML report and open it"""
    pending = deployer.pending()
    format_pending_table(pending)

    report_path = write_pending_report(pending, deployer.config.report.path)
    console.print(f"[dim]Report written to {report_path}[/dim]")

    if open_file and deployer.config.report.open:
        open_report(report_path)


def run_deploy(deployer: Deployer) -> None:
    """Deploy every pending project"""
    batch = deployer.deploy()
    format_batch_result(batch)


@click.command(name=APP_NAME)
@click.argument('args', nargs=-1)
@click.option('--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Configuration file (default: $DEPLOY_PIPELINE_CONFIG or ./deploy-pipeline.yaml)')
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('--no-open', is_flag=True, help='Do not open the pending deployment report')
@click.option('--no-notify', is_flag=True, help='Do not send the deployment notification')
@click.version_option(__version__, prog_name=APP_NAME)
@click.pass_context
def cli(ctx, args, config_path, verbose, debug, quiet, no_open, no_notify):
    """Deploy Pipeline - pull, build, publish and deploy declared projects

    Run without arguments to list projects pending deployment in an HTML
    report. Run with the single argument DEPLOY to deploy them:

        deploy-pipeline

        deploy-pipeline DEPLOY
    """
    setup_logging(verbose=verbose, debug=debug, quiet=quiet)

    mode = parse_mode(args)
    if mode is None:
        logger.critical(
            f"Invalid arguments passed! Count = {len(args)}, First = {args[0]}"
        )
        ctx.exit(EXIT_INVALID_ARGUMENTS)

    exit_code = EXIT_OK
    try:
        config = ConfigService(config_path).load_config()

        with Deployer(config, notify=not no_notify) as deployer:
            if mode == "deploy":
                run_deploy(deployer)
            else:
                run_report(deployer, open_file=not no_open)

    except DeployPipelineError as e:
        logger.critical(str(e))
        exit_code = EXIT_FATAL

    except Exception as e:
        logger.critical(f"Catastrophic error! {e}", exc_info=True)
        exit_code = EXIT_FATAL

    ctx.exit(exit_code)


def main():
    """Main entry point for the CLI application"""
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
