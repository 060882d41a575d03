"""Credential service entrypoint.

Run with:
  python -m credential_platform.credential_platform.credential_service
"""

import uvicorn

from .config import settings


def main() -> None:
    uvicorn.run(
        "credential_platform.credential_platform.credential_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
