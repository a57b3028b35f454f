"""Logging-Einrichtung für CLI und Engine."""

import logging

from config.schema import LoggingConfig


def setup_logging(cfg: LoggingConfig) -> None:
    """Konfiguriert den Root-Logger gemäß LoggingConfig.

    Mit cfg.rich=True werden Log-Zeilen über rich.logging.RichHandler
    ausgegeben, sonst als schlichter Text auf stderr.
    """
    if cfg.rich:
        from rich.logging import RichHandler
        handler: logging.Handler = RichHandler(
            rich_tracebacks=True, show_path=False, markup=False,
        )
        fmt = "%(message)s"
    else:
        handler = logging.StreamHandler()
        fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

    logging.basicConfig(
        level=cfg.level,
        format=fmt,
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
