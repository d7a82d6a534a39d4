"""Tests for the card export flow."""

from lyricard.core.export_state import CardExportFlow, ExportState


class TestCardExportFlow:
    def test_happy_path(self):
        flow = CardExportFlow()
        assert flow.state is ExportState.CLOSED
        assert not flow.can_save

        flow.open()
        assert flow.state is ExportState.PREVIEWING
        assert flow.can_save

        assert flow.request_save() is True
        assert flow.state is ExportState.GENERATING

        flow.finish(True)
        assert flow.state is ExportState.PREVIEWING
        assert flow.last_error is None

        assert flow.close() is True
        assert flow.state is ExportState.CLOSED

    def test_save_disabled_while_generating(self):
        flow = CardExportFlow()
        flow.open()
        flow.request_save()

        assert not flow.can_save
        assert flow.request_save() is False
        assert flow.close() is False
        assert flow.state is ExportState.GENERATING

    def test_failure_is_retryable(self):
        flow = CardExportFlow()
        flow.open()
        flow.request_save()
        flow.finish(False, "disk full")

        assert flow.state is ExportState.PREVIEWING
        assert flow.last_error == "disk full"
        assert flow.request_save() is True
        assert flow.last_error is None

    def test_cannot_save_when_closed(self):
        flow = CardExportFlow()

        assert flow.request_save() is False
        flow.finish(True)
        assert flow.state is ExportState.CLOSED
