from flowlog.config import Settings, get_settings
from flowlog.models.schemas import LocationInfo
from flowlog.operations import FlowLog


def test_settings_defaults() -> None:
    settings = get_settings()
    assert settings.logger_name == "flowlog"
    assert settings.line_number_separator == ""
    assert settings.json_logs is True


def test_line_number_separator_from_environment(monkeypatch, sink) -> None:
    monkeypatch.setenv("FLOWLOG_LINE_NUMBER_SEPARATOR", ".")
    flowlog = FlowLog(sink=sink, settings=Settings())

    context = flowlog.new({"x-transaction-id": "T1"}, LocationInfo(container_name="f", line_number=9))
    assert context["new.lineNumber"] == "9"


def test_default_sink_uses_configured_logger_name(fresh_logging, monkeypatch) -> None:
    monkeypatch.setenv("FLOWLOG_LOGGER_NAME", "pipeline.steps")
    get_settings.cache_clear()
    assert FlowLog().router.sink.name == "pipeline.steps"
