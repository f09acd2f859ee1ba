from __future__ import annotations

import pytest

from flowlog.models.schemas import LocationInfo

from conftest import split_line


@pytest.mark.parametrize("headers", [None, {}, {"content-type": "application/json"}])
def test_new_generates_transaction_id_when_missing(flowlog, sink, headers) -> None:
    context = flowlog.new(headers, LocationInfo(container_name="api-main"))

    assert context["x-transaction-id"]
    assert context["new.flow"] == "api-main"
    assert sink.lines[0][0] == "INFO"
    assert len(sink.lines) == 1
    message, logged = split_line(sink.lines[0][1])
    assert message == "Generated x-transaction-id"
    assert logged["x-transaction-id"] == context["x-transaction-id"]


def test_new_keeps_inbound_transaction_id(flowlog, sink) -> None:
    context = flowlog.new({"x-transaction-id": "T1"}, None)

    assert context == {"x-transaction-id": "T1"}
    assert sink.lines == []


def test_new_accepts_underscore_variant(flowlog, sink) -> None:
    context = flowlog.new({"x_transaction_id": "T2"}, None)
    assert context["x-transaction-id"] == "T2"
    assert sink.lines == []


def test_new_prefers_hyphen_variant(flowlog) -> None:
    context = flowlog.new({"x_transaction_id": "T2", "x-transaction-id": "T1"}, None)
    assert context["x-transaction-id"] == "T1"


def test_new_copies_client_id_and_takes_first_list_value(flowlog) -> None:
    location = LocationInfo(container_name="api-main")
    context = flowlog.new({"client_id": ["abc", "def"], "x-transaction-id": "T1"}, location)

    assert list(context) == ["new.flow", "client_id", "x-transaction-id"]
    assert context["client_id"] == "abc"


def test_generated_ids_are_unique(flowlog) -> None:
    first = flowlog.new()["x-transaction-id"]
    second = flowlog.new()["x-transaction-id"]
    assert first != second


def test_new_job_adds_job_id_without_touching_input(flowlog, sink) -> None:
    context = {"x-transaction-id": "T1"}
    minted = flowlog.new_job(context, LocationInfo(container_name="batch", line_number=12))

    assert context == {"x-transaction-id": "T1"}
    assert minted["x-transaction-id"] == "T1"
    assert minted["x-job-id"]
    assert minted["new-job.flow"] == "batch"
    assert minted["new-joblineNumber"] == "12"
    assert sink.lines[0][0] == "DEBUG"
    assert sink.lines[0][1].startswith("Generated x-job-id ")


def test_new_job_twice_overwrites_job_id_and_logs_twice(flowlog, sink) -> None:
    first = flowlog.new_job({"x-transaction-id": "T1"})
    second = flowlog.new_job(first)

    assert second["x-job-id"] != first["x-job-id"]
    assert list(second).count("x-job-id") == 1
    assert len(sink.messages("DEBUG")) == 2


def test_new_record_from_nothing(flowlog, sink) -> None:
    minted = flowlog.new_record(None, None)

    assert list(minted) == ["x-record-id"]
    assert sink.messages("DEBUG")[0].startswith("Generated x-record-id ")
