"""
Command-line interface for managing Cloudflare Page Rules.
"""

import json
import logging
import sys
from typing import Any, List, Optional, Tuple

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .client import CloudflareClient
from .config import APIConfig, Settings
from .errors import PageRuleError
from .models import (
    PAGE_RULE_ACTIONS,
    PageRule,
    PageRuleEnvelope,
    PageRuleStatus,
    PageRuleTarget,
    make_action,
)
from .pagerules import PageRulesAPI

# Create console for output
console = Console()


class RichConsoleHandler(logging.Handler):
    """Log handler that prints through the shared rich console."""

    STYLES = {
        "DEBUG": "dim",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "red bold",
    }

    def emit(self, record):
        try:
            msg = self.format(record)
            style = self.STYLES.get(record.levelname)
            if style:
                console.print(f"[{style}]{escape(msg)}[/{style}]", highlight=False)
            else:
                console.print(msg, markup=False, highlight=False)
        except Exception:
            self.handleError(record)


logger = logging.getLogger("cloudflare_pagerules")


def configure_logging(debug: bool) -> None:
    """Attach the console handler once and set the level from --debug."""
    if not any(isinstance(handler, RichConsoleHandler) for handler in logger.handlers):
        handler = RichConsoleHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


@click.group()
@click.version_option(version=__version__)
def cli():
    """Cloudflare Page Rules - list, inspect and manage the Page Rules of a zone."""
    pass


def common_options(function):
    """Credential and connection options shared by every API command."""
    function = click.option(
        "--api-token",
        envvar="CLOUDFLARE_API_TOKEN",
        help="Cloudflare API token (can also be set via CLOUDFLARE_API_TOKEN env var)",
    )(function)
    function = click.option(
        "--api-email",
        envvar="CLOUDFLARE_EMAIL",
        help="Account email for API key auth (can also be set via CLOUDFLARE_EMAIL env var)",
    )(function)
    function = click.option(
        "--api-key",
        envvar="CLOUDFLARE_API_KEY",
        help="Global API key (can also be set via CLOUDFLARE_API_KEY env var)",
    )(function)
    function = click.option(
        "--api-url",
        default="https://api.cloudflare.com/client/v4",
        help="Cloudflare API base URL",
    )(function)
    function = click.option(
        "--debug/--no-debug",
        default=False,
        help="Enable debug mode for more verbose output",
    )(function)
    return function


def build_api(
    api_token: Optional[str],
    api_email: Optional[str],
    api_key: Optional[str],
    api_url: str,
    debug: bool,
) -> PageRulesAPI:
    """
    Create a PageRulesAPI from the command line credentials.

    Without any credential option the CLOUDFLARE_PAGERULES_* settings are
    used instead, including CLOUDFLARE_PAGERULES_DEBUG.
    """
    try:
        if api_token or api_email or api_key:
            config = APIConfig(
                api_token=api_token,
                api_email=api_email,
                api_key=api_key,
                api_url=api_url,
            )
        else:
            settings = Settings()
            config = settings.api
            debug = debug or settings.debug
    except ValidationError:
        raise click.UsageError(
            "Provide --api-token, or both --api-email and --api-key "
            "(or set CLOUDFLARE_PAGERULES_API__API_TOKEN)"
        )
    configure_logging(debug)
    return PageRulesAPI(CloudflareClient(config))


def fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]", highlight=False)
    sys.exit(1)


def check_envelope(response: PageRuleEnvelope) -> None:
    """Exit with the API's own errors when the envelope reports failure."""
    if not response.success:
        fail("; ".join(response.errors) or "the API reported failure without details")


def parse_actions(ctx, param, values: Tuple[str, ...]) -> List[Any]:
    """Turn ID=VALUE pairs into page rule actions. VALUE is read as JSON when it parses."""
    actions = []
    for item in values:
        action_id, sep, raw_value = item.partition("=")
        value = None
        if sep:
            try:
                value = json.loads(raw_value)
            except ValueError:
                value = raw_value
        try:
            actions.append(make_action(action_id.strip(), value))
        except ValidationError as e:
            raise click.BadParameter(f"invalid action {item!r}: {e}")
    return actions


def render_rules(rules: List[PageRule]) -> None:
    table = Table(title="Page Rules")
    table.add_column("ID")
    table.add_column("Targets")
    table.add_column("Actions")
    table.add_column("Priority", justify="right")
    table.add_column("Status")

    for rule in rules:
        targets = ", ".join(target.constraint.value for target in rule.targets)
        action_names = ", ".join(action.display_name for action in rule.actions)
        status = rule.status or ""
        table.add_row(rule.id, targets, action_names, str(rule.priority), status)

    console.print(table)


def render_rule(rule: PageRule) -> None:
    console.print_json(data=rule.model_dump(mode="json"))


@cli.command()
def actions():
    """Show the page rule action ids this client knows about."""
    table = Table(title="Page Rule Actions")
    table.add_column("ID")
    table.add_column("Name")
    for action_id, name in PAGE_RULE_ACTIONS.items():
        table.add_row(action_id, name)
    console.print(table)


@cli.command(name="list")
@common_options
@click.argument("zone_id")
def list_rules(zone_id: str, **kwargs):
    """List the Page Rules of a zone."""
    api = build_api(**kwargs)
    try:
        response = api.list_page_rules_response(zone_id)
    except PageRuleError as e:
        fail(str(e))
    check_envelope(response)
    if not response.result:
        console.print("[yellow]No page rules found[/yellow]")
        return
    render_rules(response.result)


@cli.command()
@common_options
@click.argument("zone_id")
@click.argument("rule_id")
def get(zone_id: str, rule_id: str, **kwargs):
    """Show one Page Rule."""
    api = build_api(**kwargs)
    try:
        response = api.get_page_rule_response(zone_id, rule_id)
    except PageRuleError as e:
        fail(str(e))
    check_envelope(response)
    render_rule(response.result)


@cli.command()
@common_options
@click.argument("zone_id")
@click.option("--url", "url_pattern", required=True, help="URL pattern to match, e.g. '*example.com/images/*'")
@click.option(
    "--action",
    "rule_actions",
    multiple=True,
    required=True,
    callback=parse_actions,
    help="Action as ID=VALUE (can be specified multiple times)",
)
@click.option("--priority", type=int, default=1, help="Rule priority")
@click.option(
    "--status",
    type=click.Choice([status.value for status in PageRuleStatus]),
    default=PageRuleStatus.ACTIVE.value,
    help="Initial rule status",
)
def create(zone_id: str, url_pattern: str, rule_actions, priority: int, status: str, **kwargs):
    """Create a Page Rule for a zone."""
    api = build_api(**kwargs)
    rule = PageRule(
        targets=[PageRuleTarget.url_matches(url_pattern)],
        actions=rule_actions,
        priority=priority,
        status=status,
    )
    try:
        response = api.create_page_rule_response(zone_id, rule)
    except PageRuleError as e:
        fail(str(e))
    check_envelope(response)
    console.print(f"[green]Created page rule {response.result.id}[/green]", highlight=False)
    render_rule(response.result)


@cli.command(name="set-status")
@common_options
@click.argument("zone_id")
@click.argument("rule_id")
@click.argument("status", type=click.Choice([status.value for status in PageRuleStatus]))
def set_status(zone_id: str, rule_id: str, status: str, **kwargs):
    """Activate or pause a Page Rule without touching its other settings."""
    api = build_api(**kwargs)
    try:
        response = api.change_page_rule_response(zone_id, rule_id, PageRule(status=status))
    except PageRuleError as e:
        fail(str(e))
    check_envelope(response)
    console.print(f"[green]Page rule {rule_id} is now {status}[/green]", highlight=False)


@cli.command()
@common_options
@click.argument("zone_id")
@click.argument("rule_id")
def delete(zone_id: str, rule_id: str, **kwargs):
    """Delete a Page Rule."""
    api = build_api(**kwargs)
    try:
        response = api.delete_page_rule_response(zone_id, rule_id)
    except PageRuleError as e:
        fail(str(e))
    check_envelope(response)
    console.print(f"[green]Deleted page rule {rule_id}[/green]", highlight=False)


def main():
    """Entry point for the CLI."""
    try:
        cli()
    except Exception as e:
        logger.exception("Unhandled exception")
        console.print(f"[red]Unhandled error: {str(e)}[/red]")
        sys.exit(1)
