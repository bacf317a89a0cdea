import json
import logging
import time

_CONFIGURED = False


class TextFormatter(logging.Formatter):
    """Formats records as `time | level | logger | message`, in UTC."""

    def __init__(self):
        super().__init__("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        self.converter = time.gmtime


class JsonFormatter(logging.Formatter):
    """Formats records as one JSON object per line."""

    def __init__(self):
        super().__init__()
        self.converter = time.gmtime

    def format(self, record: logging.LogRecord):
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _resolve_level(level: str | int | None):
    if isinstance(level, int):
        return level
    if level is None:
        return logging.INFO
    return logging._nameToLevel.get(str(level).upper(), logging.INFO)


def configure_logging(*, level: str | int | None = None, fmt: str = "text"):
    """Sets up the root logger once; later calls do nothing."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    if not root.handlers:
        handler = logging.StreamHandler()
        if fmt.lower() == "json":
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(TextFormatter())
        root.addHandler(handler)

    _CONFIGURED = True


def log_event(logger: logging.Logger, message: str, *, level: int = logging.INFO, **fields):
    """Log a structured message with JSON fields."""
    if not logger.isEnabledFor(level):
        return
    if fields:
        payload = json.dumps(fields, sort_keys=True, ensure_ascii=False)
        logger.log(level, "%s | %s", message, payload)
    else:
        logger.log(level, "%s", message)
