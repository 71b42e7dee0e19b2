"""In-memory owner of the test configuration."""

from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from bridge_tester.common import setup_logging
from bridge_tester.controller.exceptions import (
    ConfigurationValidationError,
    NoBridgesConfigured,
)

from .locales import LocaleRegistry
from .models import Bridge, BridgeTestConfiguration, Mode, Repeat

logger = setup_logging()

ConfigurationListener = Callable[[BridgeTestConfiguration, BridgeTestConfiguration], None]


def _describe_errors(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in e['loc']) or 'configuration'}: {e['msg']}"
        for e in error.errors()
    )


def _parse_enum(enum_cls, value: Any, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigurationValidationError(
            f"{field}: invalid value {value!r} (expected one of {allowed})"
        ) from None


class ConfigurationStore:
    """
    Holds the scheduling mode, repeat policy, interval and bridge list.

    Every setter validates before writing and leaves the configuration
    untouched when it fails. Listeners are told about each successful
    change with the previous and the new configuration.
    """

    def __init__(
        self,
        registry: LocaleRegistry,
        initial: BridgeTestConfiguration | None = None,
    ):
        self._registry = registry
        self._config = initial or BridgeTestConfiguration()
        self._cursor = 0
        self._listeners: list[ConfigurationListener] = []
        logger.info(
            "Tester configuration initialized",
            extra=self._config.model_dump(mode="json", exclude={"bridges"}),
        )

    @property
    def configuration(self) -> BridgeTestConfiguration:
        return self._config

    @property
    def bridges(self) -> tuple[Bridge, ...]:
        return self._config.bridges

    def add_listener(self, listener: ConfigurationListener) -> None:
        self._listeners.append(listener)

    def set_mode(self, mode: Mode | str) -> BridgeTestConfiguration:
        return self._update(mode=_parse_enum(Mode, mode, "mode"))

    def set_repeat(self, repeat: Repeat | str) -> BridgeTestConfiguration:
        return self._update(repeat=_parse_enum(Repeat, repeat, "repeat"))

    def set_interval_ms(self, interval_ms: int | str) -> BridgeTestConfiguration:
        return self._update(interval_ms=interval_ms)

    def set_all(
        self,
        mode: Mode | str,
        repeat: Repeat | str,
        interval_ms: int | str,
    ) -> BridgeTestConfiguration:
        """Replaces mode, repeat and interval together, or none of them."""
        return self._update(
            mode=_parse_enum(Mode, mode, "mode"),
            repeat=_parse_enum(Repeat, repeat, "repeat"),
            interval_ms=interval_ms,
        )

    def add_bridge(
        self,
        number: str,
        pin: str | None = None,
        locale: str | None = None,
    ) -> Bridge:
        """
        Appends a bridge to the list.

        Unknown locale codes are stored as the default locale; the registry
        logs a warning for them.

        Raises:
            ConfigurationValidationError: If the bridge number is empty.
        """
        try:
            bridge = Bridge(
                number=number,
                pin=pin or None,
                locale=self._registry.normalize(locale),
            )
        except ValidationError as e:
            raise ConfigurationValidationError(_describe_errors(e)) from e
        self._update(bridges=self._config.bridges + (bridge,))
        logger.info("Bridge added", extra=bridge.model_dump())
        return bridge

    def next_bridge(self) -> Bridge:
        """
        Returns the bridge under the cursor and advances it with wraparound.

        Raises:
            NoBridgesConfigured: If the bridge list is empty.
        """
        bridges = self._config.bridges
        if not bridges:
            raise NoBridgesConfigured()
        if self._cursor >= len(bridges):
            self._cursor = 0
        bridge = bridges[self._cursor]
        self._cursor = (self._cursor + 1) % len(bridges)
        return bridge

    def describe(self) -> str:
        """Formats the configuration for display in the conversation."""
        config = self._config
        lines = [
            f"Mode: {config.mode.value}",
            f"Repeat: {config.repeat.value}",
            f"Interval (ms): {config.interval_ms}",
        ]
        if config.bridges:
            lines.append("Bridges:")
            lines.extend(
                f"  {b.number} pin={b.pin or '-'} locale={b.locale}"
                for b in config.bridges
            )
        else:
            lines.append("Bridges: none")
        return "\n".join(lines)

    def _update(self, **changes: Any) -> BridgeTestConfiguration:
        previous = self._config
        try:
            updated = BridgeTestConfiguration.model_validate(
                {**dict(previous), **changes}
            )
        except ValidationError as e:
            logger.warning(
                "Configuration change rejected",
                extra={"changes": list(changes), "error": str(e)},
            )
            raise ConfigurationValidationError(_describe_errors(e)) from e

        self._config = updated
        for listener in self._listeners:
            listener(previous, updated)
        return updated
