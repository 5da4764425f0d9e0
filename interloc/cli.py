"""
Interloc CLI - verify that interface changes are safe for their users.

Commands:
- check: Is the new interface compatible with the (used part of the) old one?
- compare: Where do two interfaces sit relative to each other?
- merge: Combine locators from several consumers into one
- project: Show the part of an interface a set of locators uses
- config: Show or change settings

Exit codes:
- 0: compatible
- 1: incompatible (every problem is printed)
- 2: invalid input (unreadable file, locator that doesn't fit the interface)
"""

import json
import logging
import sys
from typing import Optional, Tuple

import click

from interloc import __version__
from interloc.config import BOTTOM_POLICIES, CheckConfig, load_config, save_config, get_config_path
from interloc.containment import compare as compare_interfaces, try_fit_within
from interloc.diagnostics import CheckResult, format_report, supports_color
from interloc.errors import InterlocError
from interloc.loader import dump_interface, dump_locator, load_interface, load_locator
from interloc.loc import Loc, Tip, merge_all, project as project_interface

logger = logging.getLogger(__name__)


def _fail(message: str, code: int = 2) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def _load_locs(paths: Tuple[str, ...]) -> Loc:
    """Merge the given locator files. No files means the whole interface."""
    if not paths:
        return Tip()
    return merge_all(load_locator(p) for p in paths)


def _resolve_config(config_dir: str, bottom: Optional[str], color: Optional[bool]) -> CheckConfig:
    """Load settings from disk, then apply command-line overrides."""
    config = load_config(config_dir)
    if bottom is not None:
        config.bottom_policy = bottom
    if color is not None:
        config.color = color
    return config


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """Interloc - check that interface changes are backward compatible.

    Compare an old interface against a new one, optionally restricted to
    the paths its consumers actually use.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("-f", "--from", "old_path", required=True, type=click.Path(),
              help="The interface definition file we're coming from")
@click.option("-t", "--to", "new_path", required=True, type=click.Path(),
              help="The interface definition file we're updating to")
@click.option("-l", "--loc", "loc_paths", multiple=True, type=click.Path(),
              help="A locator file of usages of the interface (repeatable)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--bottom", type=click.Choice(BOTTOM_POLICIES), default=None,
              help="What a bottom type on the new side accepts")
@click.option("--color/--no-color", default=None, help="Colorize output")
@click.option("--config-dir", default=".", type=click.Path(),
              help="Directory holding .interloc/config.json")
def check(old_path: str, new_path: str, loc_paths: Tuple[str, ...], as_json: bool,
          bottom: Optional[str], color: Optional[bool], config_dir: str):
    """Check that NEW can replace OLD for every consumer.

    Without locators the whole old interface is checked.

    Examples:
        il check --from v1.yaml --to v2.yaml
        il check -f v1.yaml -t v2.yaml -l web.loc.yaml -l billing.loc.yaml
    """
    config = _resolve_config(config_dir, bottom, color)

    try:
        old = load_interface(old_path)
        new = load_interface(new_path)
        loc = _load_locs(loc_paths)
        used = project_interface(loc, old)
    except InterlocError as e:
        _fail(str(e))

    logger.debug("Checking %s against %s with %d locator(s)", old_path, new_path, len(loc_paths))
    result = CheckResult(
        incompatibilities=list(try_fit_within(used, new, config)),
        locators=len(loc_paths),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        click.echo(format_report(result, color=config.color and supports_color()))

    sys.exit(result.exit_code)


@cli.command()
@click.argument("first", type=click.Path())
@click.argument("second", type=click.Path())
@click.option("--bottom", type=click.Choice(BOTTOM_POLICIES), default=None,
              help="What a bottom type accepts")
@click.option("--config-dir", default=".", type=click.Path(),
              help="Directory holding .interloc/config.json")
def compare(first: str, second: str, bottom: Optional[str], config_dir: str):
    """Compare two interfaces.

    Prints one of: equal, greater (FIRST accepts everything SECOND does
    and more), less, incomparable.
    """
    config = _resolve_config(config_dir, bottom, None)
    try:
        a = load_interface(first)
        b = load_interface(second)
    except InterlocError as e:
        _fail(str(e))

    click.echo(compare_interfaces(a, b, config).value)


@cli.command()
@click.argument("loc_paths", nargs=-1, required=True, type=click.Path())
def merge(loc_paths: Tuple[str, ...]):
    """Merge locator files into one and print it."""
    try:
        combined = merge_all(load_locator(p) for p in loc_paths)
    except InterlocError as e:
        _fail(str(e))

    click.echo(dump_locator(combined), nl=False)


@cli.command()
@click.argument("interface_path", type=click.Path())
@click.option("-l", "--loc", "loc_paths", multiple=True, type=click.Path(),
              help="A locator file (repeatable)")
def project(interface_path: str, loc_paths: Tuple[str, ...]):
    """Print the part of an interface the given locators use."""
    try:
        iface = load_interface(interface_path)
        used = project_interface(_load_locs(loc_paths), iface)
    except InterlocError as e:
        _fail(str(e))

    click.echo(dump_interface(used), nl=False)


@cli.command("config")
@click.option("--bottom", type=click.Choice(BOTTOM_POLICIES), default=None,
              help="What a bottom type on the new side accepts")
@click.option("--color/--no-color", default=None, help="Colorize output")
@click.option("--config-dir", default=".", type=click.Path(),
              help="Directory holding .interloc/config.json")
@click.option("--show", is_flag=True, help="Show current configuration")
def config_cmd(bottom: Optional[str], color: Optional[bool], config_dir: str, show: bool):
    """Show or change settings.

    Examples:
        il config --show
        il config --bottom permissive
    """
    config = load_config(config_dir)

    if show or (bottom is None and color is None):
        click.echo(f"Configuration ({get_config_path(config_dir)}):")
        click.echo(f"  Bottom policy: {config.bottom_policy}")
        click.echo(f"  Color: {'enabled' if config.color else 'disabled'}")
        return

    if bottom is not None:
        config.bottom_policy = bottom
        click.echo(f"Bottom policy: {bottom}")
    if color is not None:
        config.color = color
        click.echo(f"Color: {'enabled' if color else 'disabled'}")

    save_config(config_dir, config)


def main():
    cli()


if __name__ == "__main__":
    main()
