import os

import uvicorn

from prodialer_backend.config import settings
from prodialer_backend.logging_config import configure_logging


def main() -> None:
    """Serve the admin API; HOST and PORT come from the environment."""
    # uvicorn keeps the root handlers installed here (log_config=None).
    configure_logging()

    uvicorn.run(
        "prodialer_backend.main:app",
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", 8000)),
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()
