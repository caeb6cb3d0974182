"""Panel layout <-> URL query codec.

Wire format of the ``panels`` query parameter::

    svc=api,db;inc=error;exc=healthcheck;follow=0~svc=all
    |_____________ panel 1 ______________________| |panel 2|

- panels are separated by ``~``
- fields (``key=value``) by ``;``, in the order svc, inc, exc, follow
- list values by ``,``

Fields equal to their default are omitted, except ``svc`` which is always
written (``all`` when unfiltered). ``follow`` only appears as ``follow=0``.
Tokens are URI-component encoded with ``~`` additionally escaped, so the
three separators never occur inside a token.

The ``active`` query parameter holds the 1-based index of the active panel.
Other query parameters are left untouched.
"""

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from urllib.parse import quote, unquote, unquote_plus, urlsplit, urlunsplit

from logdeck.panels.filters import normalize_filter_token, normalize_service_token
from logdeck.panels.panel import PanelConfig

logger = logging.getLogger(__name__)

URL_STATE_KEY = "panels"
URL_ACTIVE_KEY = "active"

PANEL_SEPARATOR = "~"
GROUP_SEPARATOR = ";"
LIST_SEPARATOR = ","

ALL_TOKEN = "all"

# Characters encodeURIComponent leaves alone besides A-Z a-z 0-9 - _ . ~
_URI_COMPONENT_SAFE = "!*'()"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class UrlState:
    """Panel layout decoded from a URL.

    Attributes:
        panels: Decoded panel configs, or None when the URL carries none.
        active_index: 0-based active panel index, or None if absent/invalid.

    """

    panels: list[PanelConfig] | None
    active_index: int | None


# -- tokens ----------------------------------------------------------------


def encode_token(value: str) -> str:
    """URI-component encode one token, escaping ``~`` as well."""
    return quote(value, safe=_URI_COMPONENT_SAFE).replace("~", "%7E")


def decode_token(value: str | None) -> str:
    """Reverse encode_token; ``+`` is read as a space.

    A token that is not valid percent-encoded UTF-8 is returned with only
    the ``+`` substitution applied.
    """
    if not value:
        return ""
    sanitized = value.replace("+", " ")
    try:
        return unquote(sanitized, errors="strict")
    except UnicodeDecodeError:
        return sanitized


def encode_token_list(tokens: Iterable[str]) -> str:
    return LIST_SEPARATOR.join(encode_token(token) for token in tokens)


def decode_token_list(
    value: str | None,
    normalizer: Callable[[str], str] = normalize_service_token,
) -> list[str]:
    if not value:
        return []
    tokens = (normalizer(decode_token(token)) for token in value.split(LIST_SEPARATOR))
    return [token for token in tokens if token]


# -- panels ----------------------------------------------------------------


def serialize_panel(config: PanelConfig) -> str:
    """Encode one panel's fields."""
    parts = []
    if config.services:
        parts.append(f"svc={encode_token_list(config.services)}")
    else:
        parts.append(f"svc={ALL_TOKEN}")

    include = [token for token in config.include if token]
    if include:
        parts.append(f"inc={encode_token_list(include)}")
    exclude = [token for token in config.exclude if token]
    if exclude:
        parts.append(f"exc={encode_token_list(exclude)}")

    if not config.follow:
        parts.append("follow=0")
    return GROUP_SEPARATOR.join(parts)


def serialize_panels(configs: Sequence[PanelConfig]) -> str:
    """Encode all panels; an empty layout encodes to an empty string."""
    return PANEL_SEPARATOR.join(serialize_panel(config) for config in configs)


def parse_panel(raw: str | None) -> PanelConfig:
    """Decode one panel's fields; unknown keys are ignored."""
    services: list[str] | None = None
    include: list[str] = []
    exclude: list[str] = []
    follow = True

    for part in (raw or "").split(GROUP_SEPARATOR):
        if not part:
            continue
        key, _, value = part.partition("=")
        if key == "svc":
            if not value or value == ALL_TOKEN:
                services = None
            else:
                services = decode_token_list(value, normalize_service_token) or None
        elif key == "inc":
            include = decode_token_list(value, normalize_filter_token)
        elif key == "exc":
            exclude = decode_token_list(value, normalize_filter_token)
        elif key == "follow":
            follow = value != "0"
        else:
            logger.debug("Ignoring unknown panel key: %s", key)

    return PanelConfig(
        services=tuple(services) if services else None,
        include=tuple(include),
        exclude=tuple(exclude),
        follow=follow,
    )


def parse_panels(raw: str | None) -> list[PanelConfig] | None:
    """Decode the ``panels`` parameter; None when it is absent or empty."""
    if not raw:
        return None
    entries = [entry.strip() for entry in raw.split(PANEL_SEPARATOR)]
    return [parse_panel(entry) for entry in entries if entry]


# -- query string ----------------------------------------------------------


def get_raw_query_param(query: str, name: str) -> str | None:
    """Return the undecoded value of the first ``name=`` pair.

    Args:
        query: Query string, with or without the leading ``?``.
        name: Literal parameter name.

    Returns:
        Everything after the first ``=`` of the matching pair, or None.

    """
    query = query.removeprefix("?")
    if not query:
        return None
    for pair in query.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        if key == name:
            return value
    return None


def parse_active_index(raw: str | None, panel_count: int | None = None) -> int | None:
    """Decode the 1-based ``active`` value into a 0-based index.

    Leading-integer parsing: ``"2"`` and ``"2x"`` both give 1. Zero,
    negative, non-numeric and out-of-range values give None.
    """
    if not raw:
        return None
    match = _LEADING_INT.match(decode_token(raw))
    if not match:
        return None
    index = int(match.group(1)) - 1
    if index < 0:
        return None
    if panel_count is not None and index >= panel_count:
        return None
    return index


def read_url_state(url: str) -> UrlState:
    """Decode panel layout and active index from a full URL."""
    query = urlsplit(url).query
    panels = parse_panels(get_raw_query_param(query, URL_STATE_KEY))
    active_index = parse_active_index(
        get_raw_query_param(query, URL_ACTIVE_KEY),
        len(panels) if panels is not None else None,
    )
    return UrlState(panels=panels, active_index=active_index)


def url_signature(panels_value: str, active: str | int | None) -> str:
    """Composite value compared to decide whether a URL write is needed."""
    return f"{panels_value}|{'' if active is None else active}"


def raw_url_signature(url: str) -> str:
    """Signature of the ``panels``/``active`` values currently in ``url``."""
    query = urlsplit(url).query
    return url_signature(
        get_raw_query_param(query, URL_STATE_KEY) or "",
        get_raw_query_param(query, URL_ACTIVE_KEY),
    )


def _is_state_param(pair: str) -> bool:
    key = unquote_plus(pair.partition("=")[0])
    return key in (URL_STATE_KEY, URL_ACTIVE_KEY)


def build_search(query: str, panels_value: str, active_index: int | None) -> str:
    """Build the new search string (``?...`` or empty).

    Args:
        query: Current query string; its other parameters are kept verbatim.
        panels_value: Output of serialize_panels.
        active_index: 0-based active index, or None to omit ``active``.

    """
    query = query.removeprefix("?")
    parts = [pair for pair in query.split("&") if pair and not _is_state_param(pair)]
    if panels_value:
        parts.append(f"{URL_STATE_KEY}={panels_value}")
    if active_index is not None:
        parts.append(f"{URL_ACTIVE_KEY}={active_index + 1}")
    if not parts:
        return ""
    return "?" + "&".join(parts)


def build_url(url: str, panels_value: str, active_index: int | None) -> str:
    """Return ``url`` with its panel state replaced; path and fragment kept."""
    parts = urlsplit(url)
    search = build_search(parts.query, panels_value, active_index)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, search.removeprefix("?"), parts.fragment))
