"""Run the server: python -m realscan"""

from __future__ import annotations

import uvicorn

from realscan.config import settings


def main() -> None:
    uvicorn.run(
        "realscan.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
