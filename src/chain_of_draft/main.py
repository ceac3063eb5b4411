import logging
from logging.handlers import RotatingFileHandler

from .server import create_server
from .settings import Settings, get_settings


def setup_server_logging(settings: Settings) -> logging.Logger:
    """Configure and return the package logger.

    Records go to stderr; stdout carries the stdio transport.
    """
    logger = logging.getLogger("chain_of_draft")
    if logger.handlers:
        return logger

    logger.setLevel(settings.log_level)
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if settings.log_to_file:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(settings.log_dir / "server.log", maxBytes=5_000_000, backupCount=3)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


def main() -> None:
    settings = get_settings()
    logger = setup_server_logging(settings)
    server = create_server(settings)
    logger.info("Starting Chain of Draft MCP server over stdio")
    try:
        server.run(transport="stdio")
    except Exception as e:
        logger.exception("Failed to start server: %s", e)
        raise


if __name__ == "__main__":
    main()
