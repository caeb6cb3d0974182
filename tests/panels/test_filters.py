"""Tests for panel filters and the visibility predicate."""

from dataclasses import dataclass

import pytest

from logdeck.panels.filters import (
    ALL_SERVICES,
    NO_TEXT_FILTERS,
    ServiceFilter,
    TextFilters,
    matches,
    normalize_filter_token,
    normalize_service_token,
)


@dataclass
class FakePanel:
    service_filter: ServiceFilter = ALL_SERVICES
    text_filters: TextFilters = NO_TEXT_FILTERS


class TestServiceFilter:
    """Tests for the ALL / set collapse rules."""

    def test_default_is_all(self):
        assert ServiceFilter().is_all
        assert ALL_SERVICES.allows("anything")

    def test_toggle_from_all_selects_one(self):
        assert ALL_SERVICES.toggle("api").names == ("api",)

    def test_toggle_adds_in_insertion_order(self):
        f = ALL_SERVICES.toggle("db").toggle("api")

        assert f.names == ("db", "api")

    def test_toggle_removes(self):
        f = ServiceFilter(("db", "api")).toggle("db")

        assert f.names == ("api",)

    def test_removing_last_collapses_to_all(self):
        """An emptied selection becomes ALL, never an empty set."""
        f = ALL_SERVICES.toggle("api").toggle("api")

        assert f.is_all
        assert f == ALL_SERVICES

    def test_of_drops_duplicates_and_blanks(self):
        assert ServiceFilter.of(["api", "", "api", "db"]).names == ("api", "db")

    def test_of_empty_is_all(self):
        assert ServiceFilter.of([]).is_all

    def test_exact_case_sensitive_match(self):
        f = ServiceFilter(("api",))

        assert f.allows("api")
        assert not f.allows("API")
        assert not f.allows("api-gateway")


class TestTextFilters:
    """Tests for token normalization."""

    def test_parse_trims_lowercases_and_drops_blanks(self):
        filters = TextFilters.parse(include=["  Error ", ""], exclude=["HealthCheck", "   "])

        assert filters.include == ("error",)
        assert filters.exclude == ("healthcheck",)

    def test_is_empty(self):
        assert NO_TEXT_FILTERS.is_empty
        assert not TextFilters(include=("x",)).is_empty

    def test_normalizers(self):
        assert normalize_filter_token("  MiXeD ") == "mixed"
        assert normalize_filter_token(None) == ""
        assert normalize_service_token("  Api ") == "Api"
        assert normalize_service_token("") == ""


class TestMatches:
    """Tests for matches()."""

    @pytest.fixture
    def error_not_healthcheck(self):
        return FakePanel(text_filters=TextFilters(include=("error",), exclude=("healthcheck",)))

    def test_exclude_wins_over_include(self, error_not_healthcheck, make_event):
        event = make_event(1, line="ERROR healthcheck failed")

        assert matches(error_not_healthcheck, event) is False

    def test_include_match_accepted(self, error_not_healthcheck, make_event):
        assert matches(error_not_healthcheck, make_event(1, line="error: disk full")) is True

    def test_include_missing_rejected(self, error_not_healthcheck, make_event):
        assert matches(error_not_healthcheck, make_event(1, line="info: ok")) is False

    def test_no_filters_accepts_everything(self, make_event):
        assert matches(FakePanel(), make_event(1, service="x", line="")) is True

    def test_service_filter_rejects_other_services(self, make_event):
        panel = FakePanel(service_filter=ServiceFilter(("db",)))

        assert matches(panel, make_event(1, service="db")) is True
        assert matches(panel, make_event(2, service="api")) is False

    def test_service_checked_before_text(self, make_event):
        panel = FakePanel(
            service_filter=ServiceFilter(("db",)),
            text_filters=TextFilters(include=("error",)),
        )

        assert matches(panel, make_event(1, service="api", line="error")) is False

    def test_include_tokens_are_ored(self, make_event):
        panel = FakePanel(text_filters=TextFilters(include=("timeout", "refused")))

        assert matches(panel, make_event(1, line="Connection REFUSED"))
        assert matches(panel, make_event(2, line="read timeout"))
        assert not matches(panel, make_event(3, line="ok"))

    def test_exclude_only(self, make_event):
        panel = FakePanel(text_filters=TextFilters(exclude=("debug", "trace")))

        assert matches(panel, make_event(1, line="INFO start"))
        assert not matches(panel, make_event(2, line="TRACE span"))
