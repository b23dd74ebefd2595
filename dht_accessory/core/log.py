import logging
from logging.handlers import RotatingFileHandler


def configure_logging(level: str = "INFO", log_file: str = "dht_accessory.log") -> None:
    logger = logging.getLogger()
    logger.setLevel(logging.getLevelName(level.upper()))

    # Installed once per process
    if getattr(configure_logging, "_configured", False):
        return

    fmt = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s - %(message)s"
    )

    # Console
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # Rotating file (avoid filling SD card)
    if log_file:
        fh = RotatingFileHandler(
            log_file, maxBytes=2_000_000, backupCount=5
        )
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    # Silence per-request access logging
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    configure_logging._configured = True
