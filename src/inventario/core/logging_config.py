import logging
import sys

from . import config


class NamespaceFilter(logging.Filter):
    def __init__(self, allowed_namespaces=None):
        super().__init__()
        self.allowed_namespaces = allowed_namespaces if allowed_namespaces is not None else []

    def filter(self, record):
        if not self.allowed_namespaces:
            return True # If no namespaces are specified, allow all records
        # Allow record if its name starts with any of the allowed namespaces
        return any(record.name.startswith(ns) for ns in self.allowed_namespaces)


log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def setup_logging(level: str = config.LOG_LEVEL, namespaces=None) -> logging.Logger:
    """Attach a stdout handler to the ``inventario`` logger.

    Modules log through ``logging.getLogger(__name__)``, so every logger in the
    package ("inventario.features.lots.service", ...) inherits this handler and
    level unless a namespace is configured on its own. Calling this twice does
    not add a second handler.
    """
    app_logger = logging.getLogger("inventario")
    app_logger.setLevel(level)

    if namespaces is None:
        namespaces = config.LOG_NAMESPACES

    console_handler = next(
        (h for h in app_logger.handlers if getattr(h, "name", None) == "inventario-console"),
        None,
    )
    if console_handler is None:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.set_name("inventario-console")
        console_handler.setFormatter(log_formatter)
        app_logger.addHandler(console_handler)

    console_handler.filters = []
    if namespaces:
        console_handler.addFilter(NamespaceFilter(namespaces))

    # SQL issued by Tortoise is noisy at DEBUG; keep it quiet unless asked for.
    logging.getLogger("tortoise").setLevel(logging.WARNING)
    return app_logger
