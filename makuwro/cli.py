"""
Makuwro CLI - Command line interface for the Makuwro service.

This module provides the main CLI entry point and commands for:
- Configuration management
- Session management (login, logout, whoami)
- User lookup
- Content listing, retrieval and deletion
- Search
"""

import sys
import logging
from pathlib import Path
from typing import Optional

import click

from . import __version__, __prog_name__
from .api import MakuwroClient
from .config import ConfigManager, ENDPOINTS, get_config_manager
from .exceptions import MakuwroError
from .models import AccountType, ContentType
from .utils import (
    OutputFormat,
    confirm_action,
    format_account,
    format_content_list,
    print_error,
    print_info,
    print_json,
    print_success,
    setup_logging,
)

logger = logging.getLogger(__name__)

CONTENT_TYPE_CHOICES = [t.name.lower() for t in ContentType]
SEARCH_TYPE_CHOICES = CONTENT_TYPE_CHOICES + [t.name.lower() for t in AccountType]


# ============================================================================
# CLI Context and Common Options
# ============================================================================

class MakuwroContext:
    """CLI context object for sharing state between commands."""

    def __init__(self):
        self.config_manager: ConfigManager = None  # type: ignore[assignment]


pass_context = click.make_pass_decorator(MakuwroContext, ensure=True)


def common_options(f):
    """Common options for all commands."""
    f = click.option(
        '-v', '--verbose',
        is_flag=True,
        help='Enable verbose output'
    )(f)
    f = click.option(
        '-q', '--quiet',
        is_flag=True,
        help='Suppress non-essential output'
    )(f)
    f = click.option(
        '-f', '--format',
        'output_format',
        type=click.Choice(['table', 'json']),
        default='table',
        help='Output format'
    )(f)
    return f


def require_config(f):
    """Decorator to require a stored session token."""
    @click.pass_context
    def wrapper(click_ctx, *args, **kwargs):
        ctx = click_ctx.ensure_object(MakuwroContext)
        config = ctx.config_manager.get()

        if not config.is_configured():
            print_error(
                "Makuwro CLI is not authenticated.",
                "Run 'makuwro login' to authenticate with your credentials."
            )
            sys.exit(1)

        return click_ctx.invoke(f, *args, **kwargs)

    wrapper.__name__ = f.__name__
    wrapper.__doc__ = f.__doc__
    return wrapper


def _fail(error: MakuwroError) -> None:
    print_error(str(error), error.details)
    sys.exit(1)


# ============================================================================
# Main CLI Group
# ============================================================================

@click.group()
@click.version_option(version=__version__, prog_name=__prog_name__)
@click.option(
    '--config-dir',
    type=click.Path(path_type=Path),
    envvar='MAKUWRO_CONFIG_DIR',
    help='Custom configuration directory'
)
@click.pass_context
def cli(ctx, config_dir: Optional[Path]):
    """
    Makuwro CLI - Command-line access to the Makuwro service.

    \b
    Quick Start:
      1. Log in:               makuwro login
      2. Show your account:    makuwro whoami
      3. List stories:         makuwro content list story alice

    \b
    Environment Variables:
      MAKUWRO_TOKEN        - Session token (from login)
      MAKUWRO_ENVIRONMENT  - production or development
      MAKUWRO_CONFIG_DIR   - Custom configuration directory
    """
    ctx.ensure_object(MakuwroContext)
    ctx.obj.config_manager = get_config_manager(config_dir)


# ============================================================================
# Configuration Commands
# ============================================================================

@cli.command('configure')
@click.option(
    '--environment', '-e',
    type=click.Choice(list(ENDPOINTS)),
    help='Server environment'
)
@click.option(
    '--timeout', '-t',
    type=float,
    help='Request timeout in seconds'
)
@click.option(
    '--no-verify-ssl',
    is_flag=True,
    help='Disable SSL certificate verification'
)
@click.option(
    '--show',
    is_flag=True,
    help='Show current configuration'
)
@pass_context
def configure(
    ctx: MakuwroContext,
    environment: Optional[str],
    timeout: Optional[float],
    no_verify_ssl: bool,
    show: bool
):
    """
    Configure Makuwro CLI settings.

    \b
    Examples:
      makuwro configure --environment development
      makuwro configure --timeout 30
      makuwro configure --show
    """
    config_manager = ctx.config_manager

    try:
        if show:
            config = config_manager.get()
            click.echo("\nCurrent Configuration:")
            click.echo(f"  Environment:  {config.environment}")
            click.echo(f"  REST URL:     {config.endpoints.rest}")
            click.echo(f"  Gateway URL:  {config.endpoints.gateway}")
            click.echo(f"  Token:        {'*' * 20 + '...' if config.token else '(not authenticated)'}")
            click.echo(f"  Timeout:      {config.timeout}s")
            click.echo(f"  Verify SSL:   {config.verify_ssl}")
            click.echo(f"  Config Path:  {config_manager.get_config_path()}")
            return

        updates = {}
        if environment:
            updates['environment'] = environment
        if timeout is not None:
            updates['timeout'] = timeout
        if no_verify_ssl:
            updates['verify_ssl'] = False

        if not updates:
            print_info("Nothing to change. Use --show to see the current configuration.")
            return

        config_manager.update(**updates)
        print_success("Configuration saved.")
    except MakuwroError as e:
        _fail(e)


# ============================================================================
# Session Commands
# ============================================================================

@cli.command('login')
@click.option('--username', '-u', help='Username')
@click.option('--password', '-p', help='Password (will prompt if not provided)')
@pass_context
def login(ctx: MakuwroContext, username: Optional[str], password: Optional[str]):
    """
    Log in with username and password and store the session token.

    \b
    Examples:
      makuwro login
      makuwro login -u alice
    """
    if not username:
        username = click.prompt("Username")
    if not password:
        password = click.prompt("Password", hide_input=True)

    config_manager = ctx.config_manager

    try:
        config = config_manager.get()
        with MakuwroClient(config) as client:
            token = client.create_session(username, password)
        config_manager.update(token=token)
        print_success(f"Logged in as {username}. Token saved.")
    except MakuwroError as e:
        _fail(e)


@cli.command('logout')
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
@pass_context
@require_config
def logout(ctx: MakuwroContext, yes: bool):
    """
    Revoke the stored session token.
    """
    if not yes and not confirm_action("Revoke the stored session token?"):
        print_info("Cancelled.")
        return

    config_manager = ctx.config_manager

    try:
        with MakuwroClient(config_manager.get()) as client:
            client.delete_session_token()
        config_manager.update(token=None)
        print_success("Logged out successfully.")
    except MakuwroError as e:
        _fail(e)


@cli.command('whoami')
@common_options
@pass_context
@require_config
def whoami(ctx: MakuwroContext, verbose: bool, quiet: bool, output_format: str):
    """
    Show the authenticated account.
    """
    setup_logging(verbose, quiet)

    try:
        with MakuwroClient(ctx.config_manager.get()) as client:
            format_account(client.get_authenticated_user(), OutputFormat(output_format))
    except MakuwroError as e:
        _fail(e)


@cli.command('user')
@common_options
@click.argument('username')
@pass_context
def get_user(ctx: MakuwroContext, verbose: bool, quiet: bool, output_format: str, username: str):
    """
    Show a user's profile.

    \b
    Examples:
      makuwro user alice
      makuwro user alice --format json
    """
    setup_logging(verbose, quiet)

    try:
        with MakuwroClient(ctx.config_manager.get()) as client:
            format_account(client.get_user(username=username), OutputFormat(output_format))
    except MakuwroError as e:
        _fail(e)


# ============================================================================
# Content Commands
# ============================================================================

@cli.group('content')
def content():
    """Content operations."""
    pass


@content.command('list')
@common_options
@click.argument('content_type', type=click.Choice(CONTENT_TYPE_CHOICES))
@click.argument('username')
@pass_context
def list_content(
    ctx: MakuwroContext,
    verbose: bool,
    quiet: bool,
    output_format: str,
    content_type: str,
    username: str
):
    """
    List a user's content of one kind.

    \b
    Examples:
      makuwro content list story alice
      makuwro content list blog_post alice --format json
    """
    setup_logging(verbose, quiet)
    fmt = OutputFormat(output_format)

    try:
        with MakuwroClient(ctx.config_manager.get()) as client:
            items = client.get_all_content(ContentType.parse(content_type), username)
            if not quiet and fmt != OutputFormat.JSON:
                click.echo(f"\n{content_type} by {username} ({len(items)} total):\n")
            format_content_list(items, fmt)
    except MakuwroError as e:
        _fail(e)


@content.command('get')
@common_options
@click.argument('content_type', type=click.Choice(CONTENT_TYPE_CHOICES))
@click.argument('username')
@click.argument('slug')
@pass_context
def get_content(
    ctx: MakuwroContext,
    verbose: bool,
    quiet: bool,
    output_format: str,
    content_type: str,
    username: str,
    slug: str
):
    """
    Show one content item.

    \b
    Examples:
      makuwro content get art alice sunset
    """
    setup_logging(verbose, quiet)

    try:
        with MakuwroClient(ctx.config_manager.get()) as client:
            item = client.get_content(ContentType.parse(content_type), username, slug)
            if OutputFormat(output_format) == OutputFormat.JSON:
                print_json(item)
            else:
                format_content_list([item], OutputFormat.TABLE)
    except MakuwroError as e:
        _fail(e)


@content.command('delete')
@click.argument('content_type', type=click.Choice(CONTENT_TYPE_CHOICES))
@click.argument('username')
@click.argument('slug')
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
@pass_context
@require_config
def delete_content(ctx: MakuwroContext, content_type: str, username: str, slug: str, yes: bool):
    """
    Delete one content item.

    \b
    Examples:
      makuwro content delete story alice my-story
    """
    if not yes and not confirm_action(f"Delete {content_type} '{slug}' by {username}?"):
        print_info("Cancelled.")
        return

    try:
        with MakuwroClient(ctx.config_manager.get()) as client:
            client.delete_content(ContentType.parse(content_type), username, slug)
        print_success(f"Deleted {content_type} '{slug}'.")
    except MakuwroError as e:
        _fail(e)


# ============================================================================
# Search
# ============================================================================

@cli.command('search')
@common_options
@click.argument('query')
@click.option(
    '--type', '-T',
    'search_type',
    type=click.Choice(SEARCH_TYPE_CHOICES),
    required=True,
    help='Kind of result'
)
@pass_context
def search(ctx: MakuwroContext, verbose: bool, quiet: bool, output_format: str, query: str, search_type: str):
    """
    Search Makuwro.

    \b
    Examples:
      makuwro search dragons --type art
      makuwro search alice --type user --format json
    """
    setup_logging(verbose, quiet)
    fmt = OutputFormat(output_format)

    if search_type in (t.name.lower() for t in AccountType):
        kind = AccountType[search_type.upper()]
    else:
        kind = ContentType.parse(search_type)

    try:
        with MakuwroClient(ctx.config_manager.get()) as client:
            results = client.search(query, kind)
            if isinstance(kind, AccountType):
                if fmt == OutputFormat.JSON:
                    print_json(results)
                else:
                    for account in results:
                        format_account(account, fmt)
            else:
                format_content_list(results, fmt)
    except MakuwroError as e:
        _fail(e)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
