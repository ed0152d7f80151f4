"""API server CLI command."""

import typer
import uvicorn

from studio.interfaces.api import create_app
from studio.interfaces.cli.common import get_studio, print_info


def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on"),
) -> None:
    """Serve the REST API with uvicorn."""
    print_info(f"Serving Quantum Studio API on http://{host}:{port}")
    uvicorn.run(create_app(get_studio()), host=host, port=port, log_level="info")
