import logging
import sys

from core.settings import settings

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'


def setup_logger(name: str = 'company_hierarchy') -> logging.Logger:
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    log.setLevel(settings.LOG_LEVEL.upper())
    return log


logger = setup_logger()
