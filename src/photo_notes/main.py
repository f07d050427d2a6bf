"""Console entrypoint that serves the app with uvicorn."""

import uvicorn

from photo_notes.api.app import create_app
from photo_notes.containers import build_container


def main() -> None:
    """Build the container from the environment and serve on its port."""
    container = build_container()
    uvicorn.run(create_app(container), host="0.0.0.0", port=container.settings.port)


if __name__ == "__main__":
    main()
