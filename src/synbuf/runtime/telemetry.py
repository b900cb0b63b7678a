"""Telemetry for the buffer core, backed by telelog.

Logging is described by a flat ``LogSettings`` record. The record comes from
one of the named presets or from ``SYNBUF_*`` environment variables and is
turned into a ``telelog.Config`` in one place. ``SYNBUF_LOG_PRESET`` selects
a preset from the environment; the demo app exposes the same choice as
``--log-preset``.

Buffer code only uses ``record_event`` and ``span``.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "SYNBUF_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "synbuf")
LOG_PRESETS = ("development", "production", "performance")

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str, default: bool = False) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _format_pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


@dataclass(frozen=True, slots=True)
class LogSettings:
    """Everything synbuf sets on a telelog config. Profiling is always on."""

    level: str = "WARNING"
    console: bool = True
    colored: bool = True
    json: bool = False
    log_file: str = ""
    buffered: bool = False
    buffer_size: int = 2048

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level.upper())
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        if self.json:
            config.with_json_format(True)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffered:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        config.with_profiling(True)
        return config


def preset_settings(preset: str) -> LogSettings:
    """Settings for a named preset; ``SYNBUF_LOG_FILE`` overrides the file."""

    log_file = _env("LOG_FILE") or ""
    key = preset.lower()
    if key == "development":
        return LogSettings(level="DEBUG")
    if key == "production":
        return LogSettings(
            level="INFO",
            console=False,
            log_file=log_file or "synbuf.log",
            buffered=True,
        )
    if key == "performance":
        # Classification passes are the hot path; keep them out of the console.
        return LogSettings(
            level="DEBUG",
            console=False,
            json=True,
            log_file=log_file or "synbuf-performance.log",
            buffered=True,
        )
    raise ValueError(f"Unknown preset '{preset}'.")


def settings_from_env() -> LogSettings:
    preset = _env("LOG_PRESET")
    if preset:
        return preset_settings(preset)
    return LogSettings(
        level=_env("LOG_LEVEL") or "WARNING",
        console=not _env_flag("DISABLE_CONSOLE"),
        colored=not _env_flag("NO_COLOR"),
        json=_env_flag("LOG_JSON"),
        log_file=_env("LOG_FILE") or "",
        buffered=_env_flag("LOG_BUFFERED"),
        buffer_size=int(_env("LOG_BUFFER_SIZE") or "2048"),
    )


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration and drop cached loggers.

    ``config`` is an explicit ``telelog.Config`` (profiling is switched on for
    it), ``preset`` is one of ``LOG_PRESETS``. With neither, settings are read
    from the environment again.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        config = preset_settings(preset).to_config()
    elif config is None:
        config = settings_from_env().to_config()
    else:
        config.with_profiling(True)

    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = settings_from_env().to_config()
    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
    return _LOGGER_CACHE[logger_name]


def _level_method(logger: Any, level: Any) -> Tuple[Any, bool]:
    """Prefer the ``<level>_with`` variant that takes key/value pairs."""

    name = str(level).lower()
    with_data = getattr(logger, f"{name}_with", None)
    if with_data is not None:
        return with_data, True
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return plain, False


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    method, accepts_data = _level_method(logger, level)
    if accepts_data:
        method(message, _format_pairs(payload))
    else:
        method(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by ``span`` so callers can attach results to the record."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def fail(self, reason: str) -> None:
        payload = {"span": self.span_name, **self.metadata, "reason": reason}
        if self.component_name:
            payload["component"] = self.component_name
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block, optionally tracked as a telelog component.

    ``component=True`` reuses ``name`` as the component id. ``metadata`` is
    pushed as logger context for the block. Exceptions are recorded as
    ``span::fail`` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None
    context = {key: _stringify(value) for key, value in (metadata or {}).items()}

    with ExitStack() as stack:
        for key, value in context.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))

        handle = SpanHandle(
            logger=log,
            span_name=name,
            component_name=component_name,
            metadata=dict(context),
        )
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "LOG_PRESETS",
    "LogSettings",
    "SpanHandle",
    "configure",
    "get_logger",
    "preset_settings",
    "record_event",
    "settings_from_env",
    "span",
]
