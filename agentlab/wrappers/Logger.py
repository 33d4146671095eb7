import logging
import os

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


def get(name=None) -> logging.Logger:
    """
    AGENTLAB_LOG_LEVEL takes a level name, DEBUG, INFO, WARNING or ERROR
    """
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    logger = logging.getLogger(name)
    log_level = os.environ.get('AGENTLAB_LOG_LEVEL')
    if log_level is None:
        return logger

    try:
        logger.setLevel(log_level.upper())
    except (TypeError, ValueError) as err:
        logger.warning("Ignoring AGENTLAB_LOG_LEVEL={}: {}".format(log_level, err))

    return logger
