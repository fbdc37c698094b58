"""Runs the API with uvicorn: `python -m notas_api`."""

import uvicorn

from notas_api.config import settings


def main() -> None:
    uvicorn.run(
        "notas_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        proxy_headers=True,
    )


if __name__ == "__main__":
    main()
