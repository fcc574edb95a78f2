import logging
import sys

from invoicer.settings import settings

TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s " + TEXT_FORMAT


def _formatter(text_format: str) -> logging.Formatter:
    if settings.log_json:
        from pythonjsonlogger.json import JsonFormatter

        return JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    return logging.Formatter(text_format)


def configure_logging(interactive: bool = False) -> None:
    """Install the root handlers from settings.

    With ``interactive`` the stderr handler only shows warnings and errors, so
    service chatter does not break up the menus; ``log_file`` still receives
    every record at ``log_level``.

    Call ``reconfigure()`` after Alembic runs, since its ``fileConfig`` resets
    the root logger.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_formatter(TEXT_FORMAT))
    if interactive:
        console.setLevel(max(level, logging.WARNING))
    handlers: list[logging.Handler] = [console]

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.setFormatter(_formatter(FILE_FORMAT))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.setLevel(level)
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()
    for handler in handlers:
        root.addHandler(handler)

    # Alembic reports every migration step at INFO.
    logging.getLogger("alembic").setLevel(logging.WARNING)


reconfigure = configure_logging
