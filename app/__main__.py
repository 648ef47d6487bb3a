"""
Run the book API with uvicorn: ``python -m app``.
"""

from __future__ import annotations

import uvicorn

from app.core.settings import get_app_settings


def main() -> None:
    settings = get_app_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
