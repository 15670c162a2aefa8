# citegraph/cli/main.py

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from citegraph.cli import analytics_cli
from citegraph.cli.analytics_cli import DATA_FILE_HELP, load_service
from citegraph.config.settings import settings

app = typer.Typer(help="CLI tools for citation graph analytics.")

app.add_typer(analytics_cli.app, name="analyze")


@app.command("serve")
def serve(
    host: str = typer.Option(settings.HOST, "--host", help="Interface to bind."),
    port: int = typer.Option(settings.PORT, "--port", "-p", help="Port to listen on."),
    data_file: Optional[Path] = typer.Option(None, "--data-file", "-f", help=DATA_FILE_HELP),
) -> None:
    """
    Load the corpus and serve the HTTP API.
    """
    from citegraph.web.app import create_app

    service = load_service(data_file)
    uvicorn.run(create_app(service), host=host, port=port, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    app()
