from unittest.mock import MagicMock

import pytest
import requests

from rise.errors import ConfigurationError, UpstreamError
from rise.services import record_store
from rise.services.record_store import AirtableRecordStore, build_formula


def http_error(status, reason):
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    return requests.HTTPError(f"{status} {reason}", response=response)


@pytest.fixture
def api(monkeypatch):
    api_class = MagicMock()
    monkeypatch.setattr(record_store, "Api", api_class)
    return api_class


def test_case_insensitive_formula_lowers_both_sides():
    formula = build_formula({"Email": " Jane@Example.com "}, ignore_case=True)
    assert "LOWER({Email})" in formula
    assert "'jane@example.com'" in formula


def test_multi_field_formula_uses_and():
    formula = build_formula({"Program ID": "P-1", "Week": "2024-06-17 to 2024-06-23"})
    assert formula.startswith("AND(")
    assert "{Program ID}" in formula
    assert "{Week}" in formula
    assert build_formula({}) is None


def test_only_reads_are_retried(api, config):
    AirtableRecordStore(config)
    args, kwargs = api.call_args
    assert args == ("test-token",)
    assert kwargs["timeout"] == (10.0, 10.0)
    retry = kwargs["retry_strategy"]
    assert set(retry.allowed_methods) == {"GET"}
    assert retry.total == config.AIRTABLE_GET_RETRIES


def test_fetch_passes_formula(api, config):
    table = api.return_value.table.return_value
    table.all.return_value = [{"id": "rec1", "fields": {}}]
    store = AirtableRecordStore(config)
    records = store.fetch("appX", "Students", match={"Email": "a@b.c"}, ignore_case=True)
    assert records == [{"id": "rec1", "fields": {}}]
    api.return_value.table.assert_called_with("appX", "Students")
    assert "LOWER({Email})" in table.all.call_args.kwargs["formula"]


def test_server_error_becomes_retryable_upstream_error(api, config):
    api.return_value.table.return_value.all.side_effect = http_error(503, "Service Unavailable")
    with pytest.raises(UpstreamError) as excinfo:
        AirtableRecordStore(config).fetch("appX", "Students")
    assert excinfo.value.upstream_status == 503
    assert excinfo.value.retryable is True
    assert "503 Service Unavailable" in excinfo.value.message


def test_client_error_is_not_retryable(api, config):
    api.return_value.table.return_value.create.side_effect = http_error(422, "Unprocessable Entity")
    with pytest.raises(UpstreamError) as excinfo:
        AirtableRecordStore(config).create("appX", "Student Availability", {"Week": "x"})
    assert excinfo.value.upstream_status == 422
    assert excinfo.value.retryable is False


def test_network_failure_is_retryable(api, config):
    api.return_value.table.return_value.update.side_effect = requests.ConnectionError("reset")
    with pytest.raises(UpstreamError) as excinfo:
        AirtableRecordStore(config).update("appX", "Classes", "rec1", {})
    assert excinfo.value.upstream_status is None
    assert excinfo.value.retryable is True


def test_unconfigured_base_is_a_configuration_error(api, config):
    with pytest.raises(ConfigurationError):
        AirtableRecordStore(config).fetch("", "Students")


def test_missing_token_is_a_configuration_error(api, config):
    config.AIRTABLE_PERSONAL_ACCESS_TOKEN = ""
    with pytest.raises(ConfigurationError) as excinfo:
        AirtableRecordStore(config).fetch("appX", "Students")
    assert "AIRTABLE_PERSONAL_ACCESS_TOKEN" in excinfo.value.message
