"""CLI entry point for launching the FastAPI app with uvicorn."""

import uvicorn

from .app import create_app
from .dependencies import config


def main() -> None:
    """Run the server."""
    uvicorn.run(
        create_app(),
        host=config.server.host,
        port=config.server.port,
    )


if __name__ == "__main__":
    main()
