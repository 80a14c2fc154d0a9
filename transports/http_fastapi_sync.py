"""HTTP transport serving the classifier API with uvicorn."""

from __future__ import annotations

import uvicorn

from scanresult.main import create_app
from scanresult.settings import get_settings

app = create_app()


def run() -> None:  # pragma: no cover - manual run helper
    settings = get_settings()
    uvicorn.run(
        "transports.http_fastapi_sync:app",
        host=settings.host,
        port=settings.port,
        reload=settings.dev_reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":  # pragma: no cover
    run()
