import json
import logging

from scanadvisor.core.logging_config import EnrichmentLogFormatter, configure_logging


def _record(**extra):
    record = logging.LogRecord("scanadvisor.enrichment", logging.WARNING, __file__, 1, "attempt %d failed", (2,), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestEnrichmentLogFormatter:
    def test_structured_fields(self):
        entry = json.loads(
            EnrichmentLogFormatter().format(
                _record(event="provider_attempt_failed", attempt=2, fingerprint="abcd1234", error="429")
            )
        )
        assert entry["message"] == "attempt 2 failed"
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "scanadvisor.enrichment"
        assert entry["event"] == "provider_attempt_failed"
        assert entry["attempt"] == 2
        assert entry["fingerprint"] == "abcd1234"

    def test_unknown_extras_ignored(self):
        entry = json.loads(EnrichmentLogFormatter().format(_record(secret="x")))
        assert "secret" not in entry


class TestConfigureLogging:
    def test_plain(self):
        configure_logging("debug")
        logger = logging.getLogger("scanadvisor")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, EnrichmentLogFormatter)

    def test_json_and_file(self, tmp_path):
        log_file = tmp_path / "scanadvisor.log"
        configure_logging("INFO", json_format=True, log_file=str(log_file))
        logger = logging.getLogger("scanadvisor")

        assert len(logger.handlers) == 2
        assert all(isinstance(h.formatter, EnrichmentLogFormatter) for h in logger.handlers)

        logging.getLogger("scanadvisor.cache").info("stored", extra={"event": "cache_store"})
        for handler in logger.handlers:
            handler.flush()
        entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert entry["event"] == "cache_store"

        for handler in logger.handlers:
            handler.close()

    def test_reconfigure_replaces_handlers(self):
        configure_logging()
        configure_logging()
        assert len(logging.getLogger("scanadvisor").handlers) == 1
