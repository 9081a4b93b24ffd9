import json
import logging

from apartment_registry.logging_utils import (
    RegistryLoggerAdapter,
    StructuredJsonFormatter,
    configure_structured_logging,
    get_registry_logger,
)


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("apartment_registry.test", logging.INFO, __file__, 1, "hello %s", ("x",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredJsonFormatter:
    def test_standard_fields(self):
        output = json.loads(StructuredJsonFormatter().format(make_record()))
        assert output["level"] == "INFO"
        assert output["logger"] == "apartment_registry.test"
        assert output["message"] == "hello x"
        assert "timestamp" in output

    def test_extra_fields(self):
        output = json.loads(StructuredJsonFormatter().format(make_record(block_id="block:A:1")))
        assert output["block_id"] == "block:A:1"

    def test_unserializable_extra_is_stringified(self):
        output = json.loads(StructuredJsonFormatter().format(make_record(obj=object())))
        assert output["obj"].startswith("<object object")


class TestConfigureStructuredLogging:
    def test_replaces_handlers(self):
        logger = configure_structured_logging(logging.DEBUG, "apartment_registry.test_cfg")
        configure_structured_logging(logging.DEBUG, "apartment_registry.test_cfg")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredJsonFormatter)
        assert logger.level == logging.DEBUG

    def test_plain_text(self):
        logger = configure_structured_logging("INFO", "apartment_registry.test_plain", json_output=False)
        assert not isinstance(logger.handlers[0].formatter, StructuredJsonFormatter)


class TestRegistryLogger:
    def test_naming(self):
        assert get_registry_logger("operations").name == "apartment_registry.operations"

    def test_adapter_adds_context(self, caplog):
        adapter = RegistryLoggerAdapter(get_registry_logger("test_adapter"), {"block_id": "b1"})
        with caplog.at_level(logging.INFO):
            adapter.info("created", extra={"operation": "createBlock"})
        record = caplog.records[-1]
        assert record.block_id == "b1"
        assert record.operation == "createBlock"
