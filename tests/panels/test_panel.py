"""Tests for Panel windows and derived labels."""

from logdeck.panels.filters import ServiceFilter, TextFilters
from logdeck.panels.panel import Panel, PanelConfig
from logdeck.stream.history import HistoryBuffer


class TestPanelDefaults:
    """Tests for Panel.create."""

    def test_defaults(self):
        panel = Panel.create(3, line_limit=10)

        assert panel.id == "panel-3"
        assert panel.title == "Panel 3"
        assert panel.service_filter.is_all
        assert panel.text_filters.is_empty
        assert panel.auto_scroll is True
        assert panel.line_limit == 10
        assert panel.lines() == []


class TestPanelWindow:
    """Tests for render/append bounds."""

    def test_append_evicts_oldest(self, make_event):
        panel = Panel.create(1, line_limit=3)
        for seq in range(5):
            panel.append(make_event(seq))

        assert [e.seq for e in panel.lines()] == [2, 3, 4]

    def test_render_filters_history(self, make_event):
        history = HistoryBuffer(capacity=10)
        history.append(make_event(1, service="api"))
        history.append(make_event(2, service="db"))
        history.append(make_event(3, service="api"))
        panel = Panel.create(1)
        panel.service_filter = ServiceFilter(("api",))

        panel.render(history)

        assert [e.seq for e in panel.lines()] == [1, 3]

    def test_render_keeps_most_recent_matches(self, make_event):
        history = HistoryBuffer(capacity=20)
        for seq in range(10):
            history.append(make_event(seq))
        panel = Panel.create(1, line_limit=4)

        panel.render(history)

        assert [e.seq for e in panel.lines()] == [6, 7, 8, 9]

    def test_render_clears_previous_window(self, make_event):
        panel = Panel.create(1)
        panel.append(make_event(42))

        panel.render(HistoryBuffer(capacity=5))

        assert panel.lines() == []


class TestMetaLabel:
    """Tests for the derived display label."""

    def test_all_services(self):
        assert Panel.create(1).meta_label == "ALL SERVICES"

    def test_single_service_uppercased(self):
        panel = Panel.create(1)
        panel.service_filter = ServiceFilter(("api",))

        assert panel.meta_label == "API"

    def test_counts(self):
        panel = Panel.create(1)
        panel.service_filter = ServiceFilter(("api", "db", "cache"))
        panel.text_filters = TextFilters(include=("a", "b"), exclude=("c",))

        assert panel.meta_label == "3 SERVICES | +2 include | -1 exclude"


class TestPanelConfig:
    """Tests for config projection."""

    def test_to_config(self):
        panel = Panel.create(1)
        panel.service_filter = ServiceFilter(("db",))
        panel.text_filters = TextFilters(exclude=("noise",))
        panel.auto_scroll = False

        assert panel.to_config() == PanelConfig(
            services=("db",), include=(), exclude=("noise",), follow=False
        )

    def test_all_services_projects_to_none(self):
        assert Panel.create(1).to_config().services is None

    def test_apply_config(self):
        panel = Panel.create(1)

        panel.apply_config(PanelConfig(services=("api", "db"), include=("err",), follow=False))

        assert panel.service_filter.names == ("api", "db")
        assert panel.text_filters.include == ("err",)
        assert panel.auto_scroll is False

    def test_apply_empty_services_is_all(self):
        panel = Panel.create(1)
        panel.service_filter = ServiceFilter(("x",))

        panel.apply_config(PanelConfig(services=()))

        assert panel.service_filter.is_all
