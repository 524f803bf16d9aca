import logging

LOGGER_NAME = "pointset"

logger = logging.getLogger(LOGGER_NAME)

#san vivliothiki den grafoume tipota, to handler to vazei to main
logger.addHandler(logging.NullHandler())


def configure(debug: bool = False) -> logging.Logger:
    "Προσθέτει stream handler (μία φορά) για χρήση από τη γραμμή εντολών."
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s: %(message)s"))
        logger.addHandler(handler)
    set_debug(debug)
    return logger


def set_debug(enabled: bool) -> None:
    logger.setLevel(logging.DEBUG if enabled else logging.INFO)
