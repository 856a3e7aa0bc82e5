import logging


def get_logger(name: str) -> logging.Logger:
    """Console logger for app modules; messages carry their own [TAG] prefix."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
