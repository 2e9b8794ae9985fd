"""Root logger setup for the fotogalerie entry points.

The bot runs for days, so records carry a full date. discord.py is capped at
WARNING because its gateway chatter would otherwise drown catalog activity.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
NOISY_LOGGERS = ("discord",)


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Install a stderr handler on the root logger.

    Calling it again is a no-op unless ``force`` is set.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT, force=force)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
