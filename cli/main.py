"""chatrelay CLI: start the server, inspect configuration."""

import json
from pathlib import Path

import typer
import uvicorn

from backend.app.config import settings

app = typer.Typer(
    help="chatrelay - minimal real-time chat backend",
    no_args_is_help=True,
)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@app.command()
def start(
    host: str = typer.Option(settings.host, "--host", help="Interface to bind"),
    port: int = typer.Option(settings.port, "--port", "-p", help="API server port"),
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Uvicorn log level"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Start chatrelay.

    Channels live in memory only: every start begins with the seed
    channels and no history.
    """
    display_host = "localhost" if host == "0.0.0.0" else host

    typer.echo("")
    typer.secho("chatrelay is starting up", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  API:      http://{display_host}:{port}/channels")
    typer.echo(f"  Messages: ws://{display_host}:{port}/messages")
    typer.echo(f"  API docs: http://{display_host}:{port}/docs")
    typer.echo("")

    try:
        uvicorn.run(
            "backend.app.main:app",
            host=host,
            port=port,
            reload=reload,
            reload_dirs=[str(PROJECT_ROOT / "backend")] if reload else None,
            log_level=log_level.lower(),
        )
    except KeyboardInterrupt:
        pass
    finally:
        typer.secho("chatrelay stopped.", fg=typer.colors.GREEN)


@app.command()
def config() -> None:
    """Print the effective configuration as JSON."""
    typer.echo(json.dumps(settings.model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    app()
