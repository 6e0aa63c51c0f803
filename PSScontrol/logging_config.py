"""
Package logger.

Modules log DEBUG records (composed dimensions, loop rcond) through
``logging.getLogger(__name__)``. The ``PSScontrol`` logger only carries a
NullHandler, so nothing is printed unless the application configures
logging or calls setup_logging().
"""
import logging

LOGGER_NAME = "PSScontrol"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def setup_logging(level=logging.INFO, log_file=None):
    """
    Send package records to stderr, and optionally to a file.

    Existing handlers of the package logger are replaced, so repeated calls
    do not duplicate records.

    Parameters
    ----------
    level : int
        Logging level of the package logger and its handlers
    log_file : str, optional
        Path of a log file, overwritten on each call

    Returns
    -------
    logger : logging.Logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    formatter = logging.Formatter('%(levelname)s %(name)s: %(message)s')
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
