# storefront/utils/logging.py
import logging
import sys

from storefront.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_configured = False


def _configure():
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))

    root = logging.getLogger("storefront")
    root.addHandler(handler)
    root.setLevel(LOG_LEVEL)
    root.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    _configure()
    if not name.startswith("storefront"):
        name = f"storefront.{name}"
    return logging.getLogger(name)
