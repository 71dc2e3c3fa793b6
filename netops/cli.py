"""
NetOps CLI - operator commands

Run the API, hash and rotate portal passwords, check the backend.
"""
import asyncio

import click
from rich.console import Console
from rich.table import Table

from netops import __version__
from netops.auth.passwords import hash_password, is_bcrypt_hash
from netops.auth.sessions import USERS_TABLE
from netops.config import get_config
from netops.remote.client import ConfigurationError, RemoteError, create_remote_client
from netops.rpc import availability, picklists
from netops.utils import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


# ═══════════════════════════════════════════════════════════════════
# MAIN CLI GROUP
# ═══════════════════════════════════════════════════════════════════

@click.group()
@click.version_option(version=__version__)
def main():
    """
    NetOps - network operations reporting portal

    KPI, map and alarm data from the reporting backend, behind a session gate.
    """
    setup_logging(get_config().log_level)


# ═══════════════════════════════════════════════════════════════════
# SERVER COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.option('--host', default='127.0.0.1', help='Bind address')
@click.option('--port', default=8000, type=int, help='Bind port')
@click.option('--reload', is_flag=True, help='Reload on code changes')
def serve(host, port, reload):
    """Run the API server"""
    import uvicorn

    console.print(f"\n[bold blue]NetOps API[/bold blue] on http://{host}:{port}")
    uvicorn.run("netops.api.main:app", host=host, port=port, reload=reload)


# ═══════════════════════════════════════════════════════════════════
# PASSWORD COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command('hash-password')
@click.password_option(help='Password to hash (prompted when omitted)')
def hash_password_cmd(password):
    """Print a bcrypt hash for a portal password"""
    console.print(hash_password(password))


@main.command('rotate-password')
@click.argument('username')
@click.password_option(help='New password (prompted when omitted)')
def rotate_password(username, password):
    """Replace a user's stored password with a bcrypt hash"""

    async def rotate():
        remote = create_remote_client(get_config())
        user = await remote.maybe_one(USERS_TABLE, "id, password_hash", eq={"username": username})
        if not user:
            return None
        legacy = not is_bcrypt_hash(user.get("password_hash"))
        await remote.update(USERS_TABLE, {"password_hash": hash_password(password)}, eq={"id": user["id"]})
        return legacy

    try:
        with console.status(f"[bold green]Rotating password for {username}..."):
            legacy = asyncio.run(rotate())
    except (ConfigurationError, RemoteError) as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        raise SystemExit(1)

    if legacy is None:
        console.print(f"\n[red]✗ No such user: {username}[/red]")
        raise SystemExit(1)
    note = " (replaced a plain-text value)" if legacy else ""
    console.print(f"\n[green]✓ Password rotated for {username}{note}[/green]")


# ═══════════════════════════════════════════════════════════════════
# STATUS COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
def status():
    """Show configuration"""
    console.print("\n[bold blue]NetOps Configuration[/bold blue]\n")
    config = get_config()

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("Backend URL", config.supabase_url or "[red]<unset>[/red]")
    table.add_row("Backend API key", "set" if config.supabase_api_key else "[red]<unset>[/red]")
    table.add_row("Environment", config.environment)
    table.add_row("Session cookie", config.auth_cookie_name)
    table.add_row("Session TTL", f"{config.session_ttl_hours} h")
    table.add_row("Request timeout", f"{config.request_timeout:.0f} s")
    table.add_row("Chunk size", f"{config.chunk_days} days")
    table.add_row("Log Level", config.log_level)

    console.print(table)


@main.command()
def check():
    """Probe the backend with two cheap procedures"""

    async def check_backend():
        remote = create_remote_client(get_config())
        bounds = await availability.fetch_date_bounds(remote)
        subregions = await picklists.fetch_subregions(remote)
        return bounds, subregions

    try:
        with console.status("[bold green]Contacting backend..."):
            bounds, subregions = asyncio.run(check_backend())
    except (ConfigurationError, RemoteError) as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        raise SystemExit(1)

    table = Table(title="Backend")
    table.add_column("Check", style="cyan")
    table.add_column("Result", style="magenta")
    table.add_row("Availability data", f"{bounds.min_date or '?'} .. {bounds.max_date or '?'}")
    table.add_row("Sub-regions", str(len(subregions)))
    console.print(table)
    console.print("\n[green]✓ Backend reachable[/green]")


if __name__ == '__main__':
    main()
