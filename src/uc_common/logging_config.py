"""Process-wide logging setup (stdlib logging, configured once at startup)."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )
    # SQL echo is controlled by the engine's echo flag, not the root level.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
