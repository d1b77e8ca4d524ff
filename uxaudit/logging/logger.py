import logging
import sys

# Client libraries that log every request at INFO.
_CHATTY_LOGGERS = ("httpx", "openai", "psycopg.pool")


class Log:
    """Centralized logging for the worker and its detector threads."""

    _logger: logging.Logger = logging.getLogger("uxaudit")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler.

        Unless the level is DEBUG, chatty client libraries are raised to WARNING.
        """
        level = log_level.upper()
        cls._logger.setLevel(level)
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] [%(threadName)s] %(message)s")
            )
            cls._logger.addHandler(handler)
        third_party_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(third_party_level)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)
