"""Web server command."""

import click


@click.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", "-p", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(host: str, port: int, reload: bool):
    """Start the dashboard API server.

    Examples:

        # Start on default port (8000)
        mohero-admin serve

        # Expose to network (all interfaces)
        mohero-admin serve --host 0.0.0.0

        # Development mode with auto-reload
        mohero-admin serve --reload
    """
    import uvicorn

    click.echo()
    click.echo(click.style("Starting mohero-admin server...", fg="green"))
    click.echo()
    click.echo(f"  Local:   http://{host}:{port}")
    click.echo()
    click.echo("Press Ctrl+C to stop the server.")
    click.echo()

    uvicorn.run(
        "mohero_admin.web:create_app_from_env",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )
