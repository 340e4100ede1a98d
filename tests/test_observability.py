"""Tests for structured logging and the logging event sink."""

import io
import logging

import pytest

from holdem_table.engine.events import BlindPosted, HoleCardsDealt, LoggingEventSink
from holdem_table.observability.logger import StructuredFormatter, get_logger, setup_logging


class TestLogger:
    """Tests for the context logger."""

    def test_bound_context_in_record(self, caplog):
        caplog.set_level(logging.INFO, logger="holdem_table")
        log = get_logger("engine.test", table=1).bind(hand=7)

        log.info("Dealing", extra={"extra_fields": {"stage": "flop"}})

        record = caplog.records[-1]
        assert record.name == "holdem_table.engine.test"
        assert record.extra_fields == {"table": 1, "hand": 7, "stage": "flop"}

    def test_structured_format(self, caplog):
        caplog.set_level(logging.INFO, logger="holdem_table")
        get_logger("fmt", hand=3).info("Pot awarded")

        line = StructuredFormatter().format(caplog.records[-1])

        assert "level=INFO" in line
        assert "message=Pot awarded" in line
        assert "hand=3" in line

    def test_table_context_leads(self, caplog):
        """Hand, stage and seat come right after the message."""
        caplog.set_level(logging.INFO, logger="holdem_table")
        get_logger("fmt", seat=2, hand=3).info(
            "Action", extra={"extra_fields": {"paid": 50, "stage": "turn"}}
        )

        line = StructuredFormatter().format(caplog.records[-1])

        assert line.split(" | ")[3:] == [
            "message=Action", "hand=3", "stage=turn", "seat=2", "paid=50",
        ]

    def test_setup_logging_writes_to_stream(self):
        stream = io.StringIO()
        table_logger = logging.getLogger("holdem_table")
        try:
            setup_logging("debug", stream=stream)
            get_logger("engine").debug("Reveal acknowledged", extra={"extra_fields": {"hand": 1}})
        finally:
            table_logger.handlers.clear()
            table_logger.setLevel(logging.NOTSET)

        assert "level=DEBUG" in stream.getvalue()
        assert "message=Reveal acknowledged | hand=1" in stream.getvalue()

    def test_setup_logging_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging("LOUD")


class TestLoggingEventSink:
    """Tests for LoggingEventSink."""

    def test_hole_cards_hidden(self, caplog, cards):
        caplog.set_level(logging.INFO, logger="holdem_table")
        sink = LoggingEventSink()

        sink.emit(HoleCardsDealt(1, seat=2, cards=tuple(cards("AsAd"))))

        record = caplog.records[-1]
        assert record.getMessage() == "HoleCardsDealt"
        assert record.extra_fields["cards"] == "hidden"

    def test_event_fields_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="holdem_table")

        LoggingEventSink().emit(BlindPosted(4, seat=1, blind="small", amount=25))

        fields = caplog.records[-1].extra_fields
        assert fields == {"hand_number": 4, "seat": 1, "blind": "small", "amount": 25}
