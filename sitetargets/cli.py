"""
Command-line interface for the site targets toolkit.

This module provides the CLI for choosing web server sites to cover with
one certificate, storing the combined target, and later splitting or
refreshing that target against the current site inventory.
"""

import json
import logging
import sys
from importlib.metadata import version
from typing import NoReturn, Optional

import click
from dotenv import load_dotenv

from sitetargets.config import Options, try_get_required_option
from sitetargets.console import ConsoleInputService
from sitetargets.formatter import OutputFormat, format_results, format_target_summary
from sitetargets.inventory import SiteInventory
from sitetargets.plugin import RunLevel, SiteTargetPlugin, site_choices
from sitetargets.storage import load_target, save_target
from sitetargets.utils import configure_logging, is_valid_file_path

# Set up shared context for CLI commands
CONTEXT_SETTINGS = {
    'help_option_names': ['-h', '--help'],
}

logger = logging.getLogger(__name__)


def _fail(message: str) -> NoReturn:
    logger.error(message)
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _handle_error(ctx: click.Context, error: Exception, action: str) -> NoReturn:
    """Report an exception raised by a command and exit with status 1."""
    if isinstance(error, (FileNotFoundError, PermissionError)):
        _fail(f"File access problem: {str(error)}")
    if isinstance(error, json.JSONDecodeError):
        _fail(f"Invalid JSON: {str(error)}")
    if isinstance(error, ValueError):
        _fail(f"Invalid input: {str(error)}")

    logger.error(f"Error during {action}: {str(error)}")
    if ctx.obj.get('DEBUG', False):
        # In debug mode, reraise to show traceback
        raise error
    click.echo(f"Error: {str(error)}", err=True)
    sys.exit(1)


def _load_plugin(options: Options) -> SiteTargetPlugin:
    inventory_path = try_get_required_option("inventory", options.inventory)
    return SiteTargetPlugin(SiteInventory.from_file(inventory_path))


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="site-targets")
@click.option("--debug", is_flag=True, help="Enable debug mode with verbose output")
@click.option("--quiet", is_flag=True, help="Suppress all console output except errors")
@click.option("--log-file", help="Save logs to specified file")
@click.pass_context
def cli(ctx: click.Context, debug: bool, quiet: bool, log_file: Optional[str]) -> None:
    """
    Choose web server sites to cover with a single certificate.

    Combine the bindings of several sites into one certificate request
    and split a stored request back into its sites for renewal and
    installation.
    """
    ctx.ensure_object(dict)
    ctx.obj['DEBUG'] = debug
    ctx.obj['QUIET'] = quiet

    # Load environment variables from .env file
    load_dotenv()

    log_level = "debug" if debug else None
    if quiet:
        log_level = "error"
    configure_logging(level=log_level, log_file=log_file, console=True)


@cli.command("list-sites")
@click.option("--inventory", help="Site inventory JSON file")
@click.option("--all", "show_all", is_flag=True, help="Include hidden sites")
@click.option("--hide-https", is_flag=True, help="Hide sites that already have https bindings")
@click.pass_context
def list_sites(ctx: click.Context, inventory: Optional[str], show_all: bool, hide_https: bool) -> None:
    """
    List the sites available for selection.

    \b
    Examples:
        sitetargets list-sites --inventory sites.json
        sitetargets list-sites --inventory sites.json --all
    """
    try:
        options = Options.from_env(inventory=inventory, hide_https=hide_https or None)
        plugin = _load_plugin(options)
        sites = plugin.inventory.get_sites(options.hide_https, True)
        if not show_all:
            sites = [site for site in sites if not site.hidden]
        ConsoleInputService(page_size=max(1, len(sites))).write_paged_list(site_choices(sites))
    except Exception as e:
        _handle_error(ctx, e, "site listing")


@cli.command("combine")
@click.option("--inventory", help="Site inventory JSON file")
@click.option("--siteid", "site_id", help="Comma separated site ids, or 'S' for all sites")
@click.option("--exclude", "exclude_bindings", help="Comma separated hostnames to leave out")
@click.option("--common-name", help="Hostname to use as the certificate common name")
@click.option("--hide-https", is_flag=True, help="Hide sites that already have https bindings")
@click.option("--advanced", is_flag=True, help="Also ask for the common name when prompting")
@click.option("--output", required=True, help="File to store the combined target in")
@click.pass_context
def combine(
    ctx: click.Context,
    inventory: Optional[str],
    site_id: Optional[str],
    exclude_bindings: Optional[str],
    common_name: Optional[str],
    hide_https: bool,
    advanced: bool,
    output: str,
) -> None:
    """
    Combine the bindings of several sites into one target.

    Without --siteid the available sites are listed and the selection
    is asked for interactively.

    \b
    Examples:
        sitetargets combine --inventory sites.json --siteid 1,3 --output target.json
        sitetargets combine --inventory sites.json --siteid S --exclude old.example.com --output target.json
        sitetargets combine --inventory sites.json --advanced --output target.json
    """
    if not is_valid_file_path(output):
        click.echo(f"Error: Cannot write to output file path: {output}", err=True)
        click.echo("Please check that the directory exists and is writable.", err=True)
        sys.exit(1)

    try:
        options = Options.from_env(
            inventory=inventory,
            site_id=site_id,
            exclude_bindings=exclude_bindings,
            common_name=common_name,
            hide_https=hide_https or None,
        )
        plugin = _load_plugin(options)

        if options.site_id:
            target = plugin.default(options)
        else:
            run_level = RunLevel.ADVANCED if advanced else RunLevel.SIMPLE
            target = plugin.acquire(options, ConsoleInputService(), run_level)
    except Exception as e:
        _handle_error(ctx, e, "site combination")

    if target is None:
        _fail("No valid target could be created")

    save_target(target, output)
    logger.info(f"Combined target for sites {target.display_host} saved to {output}")
    if not ctx.obj.get('QUIET', False):
        click.echo(format_target_summary(target))
        click.echo(f"\nTarget saved to {output}")


@cli.command("split")
@click.option("--target", "target_file", required=True, help="Stored combined target file")
@click.option("--inventory", help="Site inventory JSON file")
@click.option(
    "--format",
    "format_type",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.JSON.value,
    help="Output format",
)
@click.option("--output", help="Write the result to a file instead of stdout")
@click.pass_context
def split(
    ctx: click.Context,
    target_file: str,
    inventory: Optional[str],
    format_type: str,
    output: Optional[str],
) -> None:
    """
    Split a combined target into one target per site.

    Sites that no longer exist or have no hostnames left after
    exclusions are left out.

    \b
    Examples:
        sitetargets split --target target.json --inventory sites.json
        sitetargets split --target target.json --inventory sites.json --format text
    """
    try:
        plugin = _load_plugin(Options.from_env(inventory=inventory))
        scheduled = load_target(target_file)
        targets = plugin.split(scheduled)
        formatted = format_results(targets, format_type)
    except Exception as e:
        _handle_error(ctx, e, "target split")

    if not targets:
        logger.info(f"Nothing to do for target {scheduled.display_host}")

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(formatted + "\n")
        if not ctx.obj.get('QUIET', False):
            click.echo(f"{len(targets)} site targets saved to {output}", err=True)
    else:
        click.echo(formatted)


@cli.command("refresh")
@click.option("--target", "target_file", required=True, help="Stored combined target file")
@click.option("--inventory", help="Site inventory JSON file")
@click.option("--output", help="File to store the refreshed target in (defaults to --target)")
@click.pass_context
def refresh(ctx: click.Context, target_file: str, inventory: Optional[str], output: Optional[str]) -> None:
    """
    Re-check a stored target against the current sites.

    Removed sites are dropped from the target and the hostnames of the
    remaining sites are updated. When none of the sites exist anymore
    the command fails and the stored target is left untouched.

    \b
    Examples:
        sitetargets refresh --target target.json --inventory sites.json
    """
    try:
        plugin = _load_plugin(Options.from_env(inventory=inventory))
        scheduled = load_target(target_file)
        refreshed = plugin.refresh(scheduled)
    except Exception as e:
        _handle_error(ctx, e, "target refresh")

    if refreshed is None:
        _fail(f"None of the sites of target {scheduled.display_host} exist anymore")

    destination = output or target_file
    save_target(refreshed, destination)
    if not ctx.obj.get('QUIET', False):
        click.echo(format_target_summary(refreshed))
        click.echo(f"\nTarget saved to {destination}")


@cli.command("version")
def version_cmd() -> None:
    """Display detailed version information."""
    click.echo(f"Site-targets version: {version('site-targets')}")
    click.echo(f"Python version: {sys.version.split()[0]}")
    click.echo(f"Click version: {version('click')}")
    click.echo(f"Pydantic version: {version('pydantic')}")
    click.echo(f"Rich version: {version('rich')}")


def main() -> None:
    """Entry point for the CLI."""
    cli()
