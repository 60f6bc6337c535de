import logging
import os

LOG_MODE_ENV = "STREAM_TRANSLATOR_LOG_MODE"
LOG_FILE_ENV = "STREAM_TRANSLATOR_LOG_FILE"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Cache for log mode to avoid repeated environment reads
_log_mode_cache = None

# Names of loggers handed out by get_logger()
_managed_loggers = set()


def _get_log_mode():
    """Get log mode from the environment ('off', 'info' or 'debug')."""
    global _log_mode_cache
    if _log_mode_cache is not None:
        return _log_mode_cache

    log_mode = os.environ.get(LOG_MODE_ENV, 'off').strip().lower()
    if log_mode not in ('off', 'info', 'debug'):
        log_mode = 'off'
    _log_mode_cache = log_mode
    return log_mode


def _levels_for_mode(log_mode):
    """Return (logger_level, console_level) for a log mode."""
    if log_mode == 'debug':
        return logging.DEBUG, logging.DEBUG
    if log_mode == 'off':
        # Off mode: a level higher than CRITICAL disables all output
        return logging.CRITICAL + 1, logging.CRITICAL + 1
    return logging.INFO, logging.INFO


def _configure(logger: logging.Logger, log_mode: str) -> None:
    logger_level, console_level = _levels_for_mode(log_mode)
    logger.setLevel(logger_level)
    log_format = logging.Formatter(LOG_FORMAT)

    log_file = os.environ.get(LOG_FILE_ENV, '').strip()
    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]

    # Add or remove FileHandler based on log_mode
    if log_mode != 'off' and log_file and not file_handlers:
        f_handler = logging.FileHandler(log_file, encoding='utf-8')
        f_handler.setLevel(logging.DEBUG)
        f_handler.setFormatter(log_format)
        logger.addHandler(f_handler)
    elif (log_mode == 'off' or not log_file) and file_handlers:
        for handler in file_handlers:
            handler.close()
            logger.removeHandler(handler)

    console_handlers = [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]
    if not console_handlers and log_mode != 'off':
        c_handler = logging.StreamHandler()
        c_handler.setFormatter(log_format)
        logger.addHandler(c_handler)
        console_handlers = [c_handler]

    for handler in console_handlers:
        handler.setLevel(console_level)


def clear_log_mode_cache():
    """Clear the log mode cache and update all loggers created by get_logger()."""
    global _log_mode_cache
    _log_mode_cache = None

    log_mode = _get_log_mode()
    for logger_name in list(_managed_loggers):
        _configure(logging.getLogger(logger_name), log_mode)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    _configure(logger, _get_log_mode())
    _managed_loggers.add(name)
    return logger
