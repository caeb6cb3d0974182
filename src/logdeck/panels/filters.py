"""Panel filters and the visibility predicate.

A panel shows an event when the event's service passes the panel's service
filter and its line passes the include/exclude text filters. Service names
match exactly; text tokens match case-insensitively as substrings.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from logdeck.stream.events import LogEvent


def normalize_filter_token(value: str | None) -> str:
    """Trim and lowercase a text filter token."""
    if not value:
        return ""
    return value.strip().lower()


def normalize_service_token(value: str | None) -> str:
    """Trim a service name; case is significant."""
    if not value:
        return ""
    return value.strip()


@dataclass(frozen=True)
class ServiceFilter:
    """Either ALL services or a non-empty, insertion-ordered set of names.

    An empty ``names`` tuple means ALL, so an explicitly empty selection
    cannot be represented.
    """

    names: tuple[str, ...] = ()

    @classmethod
    def of(cls, names: Iterable[str]) -> "ServiceFilter":
        # dict.fromkeys keeps first-seen order while dropping duplicates
        return cls(tuple(dict.fromkeys(name for name in names if name)))

    @property
    def is_all(self) -> bool:
        return not self.names

    def allows(self, service: str) -> bool:
        return self.is_all or service in self.names

    def toggle(self, service: str) -> "ServiceFilter":
        """Add or remove one service.

        Toggling from ALL selects just that service; removing the last
        selected service collapses back to ALL.
        """
        if self.is_all:
            return ServiceFilter((service,))
        if service in self.names:
            return ServiceFilter(tuple(name for name in self.names if name != service))
        return ServiceFilter((*self.names, service))


ALL_SERVICES = ServiceFilter()


@dataclass(frozen=True)
class TextFilters:
    """Include/exclude substring tokens, already normalized."""

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    @classmethod
    def parse(cls, include: Iterable[str] = (), exclude: Iterable[str] = ()) -> "TextFilters":
        """Build filters from raw user input (trim, lowercase, drop blanks)."""
        return cls(
            include=tuple(t for t in map(normalize_filter_token, include) if t),
            exclude=tuple(t for t in map(normalize_filter_token, exclude) if t),
        )

    @property
    def is_empty(self) -> bool:
        return not self.include and not self.exclude


NO_TEXT_FILTERS = TextFilters()


class Filterable(Protocol):
    """Anything carrying a panel's filter configuration."""

    service_filter: ServiceFilter
    text_filters: TextFilters


def matches(panel: Filterable, event: LogEvent) -> bool:
    """Decide whether ``event`` is visible in ``panel``.

    Include tokens are OR-matched (one must be present); exclude tokens are
    OR-matched (any one rejects). Exclude wins over include.
    """
    if not panel.service_filter.allows(event.service):
        return False

    include = panel.text_filters.include
    exclude = panel.text_filters.exclude
    if not include and not exclude:
        return True

    line = event.line.lower()
    if include and not any(token in line for token in include):
        return False
    if exclude and any(token in line for token in exclude):
        return False
    return True
