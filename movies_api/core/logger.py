import logging
import sys
from logging.handlers import QueueHandler, QueueListener
from queue import Queue

from pythonjsonlogger import jsonlogger

from movies_api.core.config import settings
from movies_api.core.trace import get_trace_id

LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s %(message)s "
    "%(pathname)s %(lineno)d %(trace_id)s %(service)s %(env)s"
)


class TraceContextFilter(logging.Filter):
    """Проставляет trace_id/service/env в каждую запись."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = (getattr(record, "trace_id", None)
                           or get_trace_id() or "-")
        record.service = getattr(record, "service", None) or settings.app_name
        record.env = getattr(record, "env", None) or settings.env
        return True


_listener: QueueListener | None = None


def build_formatter() -> logging.Formatter:
    return jsonlogger.JsonFormatter(LOG_FORMAT)


def setup_json_logging(service: str = "movies_api",
                       level: int = logging.INFO) -> None:
    global _listener
    if _listener is not None:
        # повторный вызов (например, reload) не плодит листенеры
        return

    root = logging.getLogger()
    root.setLevel(level)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(build_formatter())
    stream_handler.addFilter(TraceContextFilter())

    q: Queue = Queue(-1)
    queue_handler = QueueHandler(q)
    # обогащаем record ДО помещения в очередь: contextvar живёт в потоке
    # запроса, а не в потоке листенера
    queue_handler.addFilter(TraceContextFilter())

    _listener = QueueListener(q, stream_handler, respect_handler_level=True)
    _listener.start()

    root.handlers = [queue_handler]

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True

    logging.getLogger(__name__).info(
        "logger_initialized",
        extra={"service": service})


def shutdown_logging() -> None:
    """Аккуратно остановить listener при выключении приложения."""
    global _listener
    if _listener:
        _listener.stop()
        _listener = None
