import logging
import json
import datetime
import traceback
import os
from typing import Any, Dict, Optional


class StructuredLogger:
    """
    JSON event logger for the scraper lifecycle.
    Events go to the "audit" logger; with LOG_SINK_FILE set they are also
    appended to that file as JSON lines.
    """

    def __init__(self, sink: Optional[str] = None):
        self._logger = logging.getLogger("audit")
        self.sink = sink

    @staticmethod
    def _format_event(level: str, event_type: str, data: Dict[str, Any]) -> str:
        entry = {
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "level": level,
            "event_type": event_type,
            "data": data
        }
        return json.dumps(entry, default=str, ensure_ascii=False)

    def _persist(self, payload: str):
        sink = self.sink or os.getenv("LOG_SINK_FILE")
        if not sink:
            return
        directory = os.path.dirname(sink)
        if directory:
            os.makedirs(directory, exist_ok=True)
        try:
            with open(sink, "a", encoding="utf-8") as handle:
                handle.write(payload + "\n")
        except OSError as e:
            self._logger.warning(f"Could not write audit sink {sink}: {e}")

    def _emit(self, level: int, event_type: str, data: Dict[str, Any]):
        payload = self._format_event(logging.getLevelName(level), event_type, data)
        self._logger.log(level, payload)
        self._persist(payload)

    def info(self, event_type: str, **kwargs):
        self._emit(logging.INFO, event_type, kwargs)

    def error(self, event_type: str, error: Exception = None, **kwargs):
        if error:
            kwargs['error_msg'] = str(error)
            kwargs['traceback'] = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        self._emit(logging.ERROR, event_type, kwargs)

    def warning(self, event_type: str, **kwargs):
        self._emit(logging.WARNING, event_type, kwargs)

    def debug(self, event_type: str, **kwargs):
        self._emit(logging.DEBUG, event_type, kwargs)


# Global Instance
audit_logger = StructuredLogger()
