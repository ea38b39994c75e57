# sciencesnippets/logging_setup.py
import logging

from sciencesnippets.config import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_configured = False


def setup(level: str = None):
    """Configure the root logger once; later calls only adjust the level."""
    global _configured
    lvl = getattr(logging, (level or LOG_LEVEL or "INFO").upper(), logging.INFO)
    if not _configured:
        logging.basicConfig(level=lvl, format=_FORMAT)
        _configured = True
    else:
        logging.getLogger().setLevel(lvl)
    return logging.getLogger()
