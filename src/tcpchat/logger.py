import logging

LOG_FORMAT = '[%(asctime)s] %(message)s'
DATE_FORMAT = '%H:%M'

ROOT_LOGGER = 'tcpchat'


def setup_logging(log_file=None, level=logging.INFO):
    """Configures the ``tcpchat`` logger.

    Every record is written as ``[HH:MM] <message>`` to the console and,
    when ``log_file`` is given, appended to that file. Calling it again
    replaces the handlers instead of stacking them.

    Args:
        log_file (str): Path of the log file, or None for console only.
        level (int): Minimum level to emit.

    Returns:
        logging.Logger: The configured logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logger
