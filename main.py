from __future__ import annotations

import uvicorn

from src.utils.config import get_settings
from src.utils.logger import setup_logging


def main() -> None:
    setup_logging()
    settings = get_settings()

    uvicorn.run(
        "src.api.webapp:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
