"""Tests for debounced, idempotent URL write-back."""

import asyncio

import pytest

from logdeck.panels.registry import PanelRegistry
from logdeck.urlstate.scheduler import (
    MemoryAddressBar,
    ScheduledTask,
    UrlSyncScheduler,
)


class TestScheduledTask:
    """Tests for ScheduledTask."""

    def test_fires_after_delay(self, timer):
        calls = []
        task = ScheduledTask(0.2, lambda: calls.append(1), timer=timer)

        task.schedule()
        timer.advance(0.1)
        assert calls == []
        timer.advance(0.1)

        assert calls == [1]
        assert not task.pending

    def test_reschedule_supersedes(self, timer):
        """Only the last schedule within the window fires."""
        calls = []
        task = ScheduledTask(0.2, lambda: calls.append(1), timer=timer)

        task.schedule()
        timer.advance(0.15)
        task.schedule()
        timer.advance(0.15)
        assert calls == []
        timer.advance(0.1)

        assert calls == [1]

    def test_cancel(self, timer):
        calls = []
        task = ScheduledTask(0.2, lambda: calls.append(1), timer=timer)

        task.schedule()
        task.cancel()
        timer.advance(1)

        assert calls == []
        assert timer.pending == 0

    def test_fire_now(self, timer):
        calls = []
        task = ScheduledTask(0.2, lambda: calls.append(1), timer=timer)

        task.schedule()
        task.fire_now()
        timer.advance(1)

        assert calls == [1]

    async def test_default_timer_uses_event_loop(self):
        fired = asyncio.Event()
        task = ScheduledTask(0.01, fired.set)

        task.schedule()

        await asyncio.wait_for(fired.wait(), timeout=1)
        assert not task.pending

    def test_default_timer_outside_loop_waits_for_flush(self):
        calls = []
        task = ScheduledTask(0.01, lambda: calls.append(1))

        task.schedule()
        assert task.pending
        assert calls == []

        task.fire_now()
        assert calls == [1]
        assert not task.pending


class TestUrlSyncScheduler:
    """Tests for UrlSyncScheduler."""

    @pytest.fixture
    def address_bar(self):
        return MemoryAddressBar("http://logs.local/?theme=dark")

    @pytest.fixture
    def scheduler(self, registry, address_bar, timer):
        scheduler = UrlSyncScheduler(registry, address_bar, delay=0.2, timer=timer)
        registry.add_listener(scheduler.request)
        return scheduler

    def test_debounced_write(self, scheduler, registry, address_bar, timer):
        """A burst of changes produces one write after the delay."""
        panel = registry.create()
        registry.toggle_service(panel.id, "api")
        registry.toggle_follow(panel.id)
        assert address_bar.replace_count == 0

        timer.advance(0.2)

        assert address_bar.replace_count == 1
        assert address_bar.url == "http://logs.local/?theme=dark&panels=svc=api;follow=0&active=1"

    def test_sync_is_idempotent(self, scheduler, registry, address_bar):
        """Two syncs without a change in between write once."""
        registry.create()

        assert scheduler.sync() is True
        assert scheduler.sync() is False
        assert address_bar.replace_count == 1

    def test_reverting_change_is_not_rewritten(self, scheduler, registry, address_bar, timer):
        panel = registry.create()
        timer.advance(0.2)

        registry.toggle_follow(panel.id)
        registry.toggle_follow(panel.id)
        timer.advance(0.2)

        assert address_bar.replace_count == 1

    def test_active_change_is_written(self, scheduler, registry, address_bar, timer):
        registry.create()
        second = registry.create()
        timer.advance(0.2)

        registry.set_active(second.id)
        timer.advance(0.2)

        assert address_bar.url.endswith("panels=svc=all~svc=all&active=2")
        assert address_bar.replace_count == 2

    def test_disabled_never_writes(self, registry, address_bar, timer):
        scheduler = UrlSyncScheduler(registry, address_bar, enabled=False, timer=timer)
        registry.add_listener(scheduler.request)

        registry.create()
        timer.advance(1)

        assert scheduler.sync() is False
        assert address_bar.replace_count == 0
        assert timer.pending == 0

    def test_requests_suppressed_during_bulk_restore(self, scheduler, registry, timer):
        with registry.bulk_restore():
            scheduler.request()
            assert scheduler.sync() is False

        assert timer.pending == 0

    def test_flush(self, scheduler, registry, address_bar):
        registry.create()

        scheduler.flush()

        assert address_bar.replace_count == 1
        assert not scheduler.pending


class TestRestoreFromUrl:
    """Tests for restore_from_url."""

    def _scheduler(self, history, timer, url):
        registry = PanelRegistry(history)
        address_bar = MemoryAddressBar(url)
        scheduler = UrlSyncScheduler(registry, address_bar, timer=timer)
        registry.add_listener(scheduler.request)
        return registry, address_bar, scheduler

    def test_no_panels_param(self, history, timer):
        registry, _, scheduler = self._scheduler(history, timer, "http://logs.local/?active=1")

        assert scheduler.restore_from_url() is False
        assert len(registry) == 0

    def test_empty_panels_param(self, history, timer):
        registry, _, scheduler = self._scheduler(history, timer, "http://logs.local/?panels=&active=1")

        assert scheduler.restore_from_url() is False

    def test_exact_url_not_rewritten(self, history, timer):
        """Restoring a canonical URL schedules one sync that writes nothing."""
        url = "http://logs.local/?panels=svc=api;inc=timeout~svc=all&active=2"
        registry, address_bar, scheduler = self._scheduler(history, timer, url)

        assert scheduler.restore_from_url() is True
        assert timer.pending == 1
        timer.advance(0.2)

        assert address_bar.replace_count == 0
        assert address_bar.url == url
        assert registry.active_index == 1

    def test_non_canonical_url_rewritten_once(self, history, timer):
        url = "http://logs.local/?panels=svc=API+;inc=TimeOut&active=7&x=1"
        registry, address_bar, scheduler = self._scheduler(history, timer, url)

        scheduler.restore_from_url()
        timer.advance(0.2)

        assert address_bar.replace_count == 1
        assert address_bar.url == "http://logs.local/?x=1&panels=svc=API;inc=timeout&active=1"

    def test_restore_replaces_existing_panels(self, history, timer):
        registry, _, scheduler = self._scheduler(history, timer, "http://logs.local/?panels=svc=db")
        for _ in range(3):
            registry.create()

        scheduler.restore_from_url()

        assert [p.id for p in registry] == ["panel-1"]
        assert registry.panels[0].service_filter.names == ("db",)
