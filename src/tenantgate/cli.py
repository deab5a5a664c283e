"""Typer CLI for TenantGate."""

from typing import Optional

import typer
from rich.console import Console

app = typer.Typer(name="tenantgate", help="TenantGate: SaaS license verification and API federation")
console = Console()


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind host (defaults to TENANTGATE_HOST)"),
    port: Optional[int] = typer.Option(None, help="Bind port (defaults to TENANTGATE_PORT)"),
):
    """Start the TenantGate API server."""
    import uvicorn
    from tenantgate.app import create_app
    from tenantgate.common.config import get_settings

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port
    console.print(f"[bold green]Starting TenantGate on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


@app.command("generate-license")
def generate_license(
    count: int = typer.Option(1, min=1, help="How many keys to print"),
):
    """Generate license keys (offline; uniqueness is checked at issue time)."""
    from tenantgate.keygen.generator import generate_license_key

    for _ in range(count):
        console.print(f"[bold]{generate_license_key()}[/bold]")


@app.command("generate-api-key")
def generate_api_key():
    """Generate a tenant API key (shared HMAC secret)."""
    from tenantgate.keygen.generator import generate_api_key as new_api_key

    console.print(f"[bold]{new_api_key()}[/bold]")


@app.command()
def sign(
    secret: str = typer.Argument(..., help="Tenant API key"),
    path: str = typer.Option("/api/admin/users", help="Request path"),
    query: str = typer.Option("", help='Search string as sent, e.g. "?limit=10"'),
    timestamp: Optional[str] = typer.Option(None, help="Milliseconds since epoch (default: now)"),
):
    """Print the headers for a signed federation request (for tenant debugging)."""
    from tenantgate.keygen.signing import create_hmac_signature, current_timestamp

    if query and not query.startswith("?"):
        query = f"?{query}"
    timestamp = timestamp or current_timestamp()

    signature = create_hmac_signature(secret, timestamp, path, query)
    # One header per line, unwrapped, so the values can be copied as-is.
    console.print(f"[cyan]x-timestamp[/cyan]: {timestamp}", soft_wrap=True)
    console.print(f"[cyan]x-signature[/cyan]: {signature}", soft_wrap=True)


@app.command()
def health(
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Check TenantGate server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] — v{data['version']}")
    except (httpx.HTTPError, ValueError, KeyError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
