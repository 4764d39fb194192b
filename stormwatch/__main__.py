"""Run the API server: python -m stormwatch"""

import uvicorn

from stormwatch.config import settings


def main() -> None:
    uvicorn.run(
        "stormwatch.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
        timeout_graceful_shutdown=settings.graceful_shutdown_seconds,
    )


if __name__ == "__main__":
    main()
