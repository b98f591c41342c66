"""Tests for the reports registry."""

import pytest

from shop_reports.container import RegistryContainer
from shop_reports.data.endpoint import Endpoint, EndpointRef, EndpointView
from shop_reports.data.report import Report
from shop_reports.data.reports_registry import ReportsRegistry
from shop_reports.exceptions import DuplicateItemError, Failure, NotFoundError, ValidationError


def _sales(**kwargs):
    return 42


def _endpoint_attributes(**overrides) -> dict:
    attributes = {
        "label": "Total Sales",
        "views": {"tiles": {"data_callback": _sales}},
    }
    attributes.update(overrides)
    return attributes


def _registry() -> ReportsRegistry:
    container = RegistryContainer()
    reports = container.reports
    reports.register_endpoint("sales_total", _endpoint_attributes())
    return reports


def test_register_applies_defaults():
    reports = ReportsRegistry()
    assert reports.register_report(
        "overview", {"label": "Overview", "endpoints": {"tiles": ["sales_total"]}}
    )

    record = reports.get_report("overview")
    assert record["id"] == "overview"
    assert record["priority"] == 10
    assert record["capability"] == "view_shop_reports"
    assert record["filters"] == ["dates"]
    assert record["endpoints"] == {"tiles": [EndpointRef.from_id("sales_total")]}


def test_supplied_values_win_over_defaults():
    reports = ReportsRegistry()
    reports.register_report(
        "taxes",
        {
            "label": "Taxes",
            "priority": 3,
            "capability": "view_tax_reports",
            "filters": ["dates", "taxes"],
            "endpoints": {"tiles": ["tax_total"]},
            "id": "ignored",
        },
    )
    record = reports.get_report("taxes")
    assert record["id"] == "taxes"
    assert record["priority"] == 3
    assert record["capability"] == "view_tax_reports"
    assert record["filters"] == ["dates", "taxes"]


def test_default_filters_not_shared():
    reports = ReportsRegistry()
    reports.register_report("a", {"label": "A", "endpoints": {"tiles": ["x"]}})
    reports.register_report("b", {"label": "B", "endpoints": {"tiles": ["x"]}})
    assert reports.get_report("a")["filters"] is not reports.get_report("b")["filters"]
    assert reports.get_report("b")["filters"] == ["dates"]


def test_get_report_returns_copy():
    reports = ReportsRegistry()
    reports.register_report("r", {"label": "R", "endpoints": {"tiles": ["x"]}})

    record = reports.get_report("r")
    record["label"] = "Changed"
    record["filters"].append("taxes")
    record["endpoints"]["tiles"].append(EndpointRef.from_id("y"))
    record["endpoints"]["charts"] = []
    reports.list_reports()[0]["filters"].append("products")

    stored = reports.get_report("r")
    assert stored["label"] == "R"
    assert stored["filters"] == ["dates"]
    assert stored["endpoints"] == {"tiles": [EndpointRef.from_id("x")]}


def test_empty_label_rejected():
    reports = ReportsRegistry()
    with pytest.raises(ValidationError, match="label"):
        reports.register_report("bad", {"label": "", "endpoints": {"tiles": ["x"]}})
    assert len(reports) == 0


def test_missing_endpoints_rejected():
    reports = ReportsRegistry()
    with pytest.raises(ValidationError, match="endpoints"):
        reports.register_report("bad", {"label": "Bad"})
    assert len(reports) == 0


def test_invalid_endpoint_rejected():
    reports = ReportsRegistry()
    reports.register_report("good", {"label": "Good", "endpoints": {"tiles": ["x"]}})

    with pytest.raises(ValidationError, match="'bad' report contains one or more invalidly defined endpoints"):
        reports.register_report("bad", {"label": "Bad", "endpoints": {"tiles": ["x", 7]}})
    assert len(reports) == 1
    assert not reports.exists("bad")


def test_endpoint_group_must_be_a_list():
    reports = ReportsRegistry()
    with pytest.raises(ValidationError):
        reports.register_report("bad", {"label": "Bad", "endpoints": {"tiles": "x"}})
    with pytest.raises(ValidationError):
        reports.register_report("bad", {"label": "Bad", "endpoints": ["x"]})
    assert len(reports) == 0


def test_endpoint_objects_accepted():
    endpoint = Endpoint(
        id="inline",
        label="Inline",
        view_group="tiles",
        view=EndpointView(data_callback=_sales),
    )
    reports = ReportsRegistry()
    reports.register_report("r", {"label": "R", "endpoints": {"tiles": [endpoint, "other"]}})

    refs = reports.get_report("r")["endpoints"]["tiles"]
    assert refs[0].is_resolved
    assert refs[0].endpoint is endpoint
    assert not refs[1].is_resolved


def test_invalid_filter_rejected():
    reports = ReportsRegistry()
    with pytest.raises(ValidationError, match="invalid filters"):
        reports.register_report(
            "bad", {"label": "Bad", "endpoints": {"tiles": ["x"]}, "filters": ["dates", "moon_phase"]}
        )
    assert len(reports) == 0


def test_custom_filter_validator():
    reports = ReportsRegistry(filter_validator=lambda f: f == "custom")
    reports.register_report("r", {"label": "R", "endpoints": {"tiles": ["x"]}, "filters": ["custom"]})
    with pytest.raises(ValidationError):
        reports.register_report("s", {"label": "S", "endpoints": {"tiles": ["x"]}})
    assert len(reports) == 1


def test_duplicate_report_rejected():
    reports = ReportsRegistry()
    reports.register_report("r", {"label": "R", "endpoints": {"tiles": ["x"]}})
    with pytest.raises(DuplicateItemError):
        reports.register_report("r", {"label": "Again", "endpoints": {"tiles": ["x"]}})
    assert reports.get_report("r")["label"] == "R"


def test_add_report_alias():
    reports = ReportsRegistry()
    assert reports.add_report("r", {"label": "R", "endpoints": {"tiles": ["x"]}})
    assert reports.exists("r")


def test_get_report():
    reports = ReportsRegistry()
    with pytest.raises(NotFoundError):
        reports.get_report("missing")

    reports.register_report("r", {"label": "R", "endpoints": {"tiles": ["x"]}})
    first = reports.get_report("r")
    assert reports.get_report("r") == first
    assert first["label"] == "R"


def test_remove_report():
    reports = ReportsRegistry()
    reports.register_report("r", {"label": "R", "endpoints": {"tiles": ["x"]}})
    reports.remove_report("r")
    reports.remove_report("r")
    assert len(reports) == 0
    with pytest.raises(NotFoundError):
        reports.get_report("r")


def test_non_mapping_attributes_rejected():
    reports = ReportsRegistry()
    with pytest.raises(ValidationError, match="must be a mapping"):
        reports.register_report("r", "just-a-string")
    with pytest.raises(ValidationError, match="must be a mapping"):
        reports.register_report("r", ["label", "R"])
    assert len(reports) == 0


def test_non_integer_priority_rejected():
    reports = ReportsRegistry()
    reports.register_report("a", {"label": "A", "priority": 5, "endpoints": {"tiles": ["x"]}})

    for priority in ("high", None, 2.5, False):
        with pytest.raises(ValidationError, match="priority"):
            reports.register_report("b", {"label": "B", "priority": priority, "endpoints": {"tiles": ["x"]}})

    assert len(reports) == 1
    assert [r["id"] for r in reports.list_reports("priority")] == ["a"]


def test_list_reports_by_priority():
    reports = ReportsRegistry()
    reports.register_report("A", {"label": "A", "priority": 20, "endpoints": {"tiles": ["x"]}})
    reports.register_report("B", {"label": "B", "priority": 10, "endpoints": {"tiles": ["x"]}})
    reports.register_report("C", {"label": "C", "priority": 10, "endpoints": {"tiles": ["x"]}})

    assert [r["id"] for r in reports.list_reports("priority")] == ["B", "C", "A"]
    assert [r["id"] for r in reports.list_reports()] == ["A", "B", "C"]


# --- Endpoints ---


def test_register_endpoint_without_container():
    reports = ReportsRegistry()
    assert reports.register_endpoint("sales_total", _endpoint_attributes()) is False
    reports.unregister_endpoint("sales_total")


def test_register_endpoint_when_registry_unavailable():
    container = RegistryContainer()
    container.remove_factory("reports:endpoints")

    assert container.reports.register_endpoint("sales_total", _endpoint_attributes()) is False
    container.reports.unregister_endpoint("sales_total")


def test_register_and_unregister_endpoint():
    container = RegistryContainer()
    assert container.reports.register_endpoint("sales_total", _endpoint_attributes()) is True
    assert container.endpoints.exists("sales_total")

    container.reports.unregister_endpoint("sales_total")
    assert not container.endpoints.exists("sales_total")


def test_register_endpoint_propagates_validation_errors():
    container = RegistryContainer()
    with pytest.raises(ValidationError):
        container.reports.register_endpoint("bad", _endpoint_attributes(label=""))


# --- Building ---


def test_build_report():
    reports = _registry()
    reports.register_report("overview", {"label": "Overview", "endpoints": {"tiles": ["sales_total"]}})

    report = reports.build_report("overview")
    assert isinstance(report, Report)
    assert report.id == "overview"
    assert report.built
    assert [e.id for e in report.get_endpoints("tiles")] == ["sales_total"]
    assert not report.has_errors()


def test_build_report_without_endpoints():
    reports = _registry()
    reports.register_report("overview", {"label": "Overview", "endpoints": {"tiles": ["sales_total"]}})

    report = reports.build_report("overview", build_endpoints=False)
    assert not report.built
    assert not report.has_endpoints()


def test_build_report_returns_report_unchanged():
    reports = _registry()
    reports.register_report("overview", {"label": "Overview", "endpoints": {"tiles": ["sales_total"]}})

    report = reports.build_report("overview")
    assert reports.build_report(report) is report
    assert reports.build_report(reports.build_report(report)) is report


def test_build_unknown_report_returns_failure(caplog):
    reports = _registry()

    with caplog.at_level("DEBUG", logger="shop_reports"):
        result = reports.build_report("nope")

    assert isinstance(result, Failure)
    assert not result
    assert result.code == "invalid_report"
    assert result.data == "nope"
    assert "'nope' report does not exist" in result.message
    assert any("NotFoundError" in r.getMessage() for r in caplog.records)


def test_build_report_records_unknown_endpoints():
    reports = _registry()
    reports.register_report(
        "overview", {"label": "Overview", "endpoints": {"tiles": ["sales_total", "not_registered"]}}
    )

    report = reports.build_report("overview")
    assert [e.id for e in report.get_endpoints("tiles")] == ["sales_total"]
    assert [e.code for e in report.get_errors()] == ["invalid_endpoint"]
    assert not report.is_valid()


def test_build_report_with_inline_endpoints_without_container():
    tile = Endpoint(id="tile", label="Tile", view_group="tiles", view=EndpointView(data_callback=_sales))
    table = Endpoint(id="table", label="Table", view_group="tables", view=EndpointView(data_callback=_sales))
    reports = ReportsRegistry()
    reports.register_report("r", {"label": "R", "endpoints": {"tiles": [tile], "tables": [table]}})

    report = reports.build_report("r")
    assert [e.id for e in report.get_endpoints("tiles")] == ["tile"]
    assert [e.id for e in report.get_endpoints("tables")] == ["table"]
    assert report.get_endpoints("tiles")[0].get_data() == 42
    assert not report.has_errors()
    assert report.is_valid()


def test_shared_inline_endpoint_registers_for_each_report():
    calls = []
    shared = Endpoint(
        id="shared",
        label="Shared",
        view_group="tiles",
        view=EndpointView(data_callback=_sales, register_callback=lambda e, report_id: calls.append(report_id)),
    )
    reports = ReportsRegistry()
    reports.register_report("r1", {"label": "R1", "endpoints": {"tiles": [shared]}})
    reports.register_report("r2", {"label": "R2", "endpoints": {"tiles": [shared]}})

    first = reports.build_report("r1")
    second = reports.build_report("r2")

    assert calls == ["r1", "r2"]
    assert first.get_endpoints("tiles")[0].report_id == "r1"
    assert second.get_endpoints("tiles")[0].report_id == "r2"
    assert not shared.initialized
