"""Command construction from positional-placeholder templates.

Templates use `str.format` slots (`{0}`, `{1}`, ...). Each argument either
becomes a bound parameter, whose driver-native marker replaces the slot, or
is a `RawLiteral` whose text replaces the slot verbatim.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

import structlog

from .contracts import PlaceholderRenderer
from .errors import InvalidTemplate, UnsupportedDriver
from .types import DBNull, RawLiteral

logger = structlog.get_logger(__name__)

DISCOVERY_INDEX = 42
COMMAND_TYPE_TEXT = "text"


@dataclass(frozen=True)
class Parameter:
    """One bound parameter: generated marker, template slot, and value."""

    name: str
    index: int
    value: Any


@dataclass(frozen=True)
class Command:
    """Immutable command text plus ordered bound parameters."""

    text: str
    parameters: Tuple[Parameter, ...] = ()
    command_type: str = COMMAND_TYPE_TEXT


class PlaceholderSyntaxCache:
    """Per-instance memo of the driver's placeholder format.

    The driver renders a marker for a known index once; the index is then
    abstracted out into a `str.format` template. A failed discovery is kept
    and re-raised on every later call.
    """

    def __init__(self, driver: PlaceholderRenderer):
        self._driver = driver
        self._format: Optional[str] = None
        self._failure: Optional[UnsupportedDriver] = None
        self._lock = threading.Lock()

    @property
    def format(self) -> str:
        """Return the cached format, discovering it on first access."""

        if self._format is not None:
            return self._format
        if self._failure is not None:
            raise self._failure
        with self._lock:
            if self._format is None and self._failure is None:
                try:
                    self._format = _discover_format(self._driver)
                except UnsupportedDriver as exc:
                    self._failure = exc
                    logger.warning("placeholder_discovery_failed", error=str(exc))
                else:
                    logger.info("placeholder_discovered", format=self._format)
            if self._failure is not None:
                raise self._failure
            return self._format

    def get(self, index: int) -> str:
        """Return the driver-native marker for parameter `index`."""

        return self.format.format(index)


def _discover_format(driver: PlaceholderRenderer) -> str:
    render = getattr(driver, "render_placeholder", None)
    if not callable(render):
        raise UnsupportedDriver(
            f"{type(driver).__name__} does not expose render_placeholder(index)."
        )
    try:
        marker = render(DISCOVERY_INDEX)
    except UnsupportedDriver:
        raise
    except Exception as exc:
        raise UnsupportedDriver(
            f"{type(driver).__name__} failed to render a placeholder: {exc}"
        ) from exc

    token = str(DISCOVERY_INDEX)
    if not isinstance(marker, str) or token not in marker:
        raise UnsupportedDriver(
            f"Placeholder {marker!r} rendered by {type(driver).__name__} "
            "does not carry the parameter index."
        )
    escaped = marker.replace("{", "{{").replace("}", "}}")
    return escaped.replace(token, "{0}")


class CommandBuilder:
    """Expands templates and arguments into `Command` objects."""

    def __init__(self, placeholders: PlaceholderSyntaxCache):
        self.placeholders = placeholders

    def build(self, template: str, args: Sequence[Any] = ()) -> Command:
        """Build a command from `template` and positional `args`.

        Args:
            template: Command text with `{i}` slots.
            args: One argument per slot. `RawLiteral` values are spliced
                verbatim; `None` is bound as `DBNull`.

        Returns:
            The built command.

        Raises:
            InvalidTemplate: If the template references a missing slot or is
                not a valid format string.
        """

        if not isinstance(template, str):
            raise TypeError(f"Command template must be str, got {type(template).__name__}.")
        if not args:
            return Command(template)

        substitutions = []
        parameters = []
        for index, arg in enumerate(args):
            if isinstance(arg, RawLiteral):
                substitutions.append(arg.value)
                continue
            name = self.placeholders.get(index)
            parameters.append(Parameter(name, index, DBNull if arg is None else arg))
            substitutions.append(name)

        try:
            text = template.format(*substitutions)
        except IndexError as exc:
            raise InvalidTemplate(
                f"Template references a slot beyond the {len(args)} supplied argument(s)."
            ) from exc
        except KeyError as exc:
            raise InvalidTemplate(
                f"Template uses named slot {exc.args[0]!r}; only positional slots are supported."
            ) from exc
        except (ValueError, AttributeError, TypeError) as exc:
            raise InvalidTemplate(f"Malformed command template: {exc}") from exc

        logger.debug("command_built", parameters=len(parameters))
        return Command(text, tuple(parameters))
