import json
import logging

from alert_data.utils.structured_log import StructuredLogger


def test_events_are_json_on_audit_logger(caplog):
    audit = StructuredLogger()
    with caplog.at_level(logging.INFO, logger="audit"):
        audit.info("HISTORY_DONE", applied=3)

    entry = json.loads(caplog.records[-1].getMessage())
    assert entry["event_type"] == "HISTORY_DONE"
    assert entry["level"] == "INFO"
    assert entry["data"] == {"applied": 3}


def test_sink_file_gets_json_lines(tmp_path):
    sink = tmp_path / "logs" / "audit.jsonl"
    audit = StructuredLogger(sink=str(sink))
    audit.info("SCRAPER_START", channel_id=-1)
    audit.error("SCRAPER_FAILED", error=RuntimeError("boom"))

    lines = sink.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    failed = json.loads(lines[1])
    assert failed["data"]["error_msg"] == "boom"
    assert "RuntimeError" in failed["data"]["traceback"]
