"""ContextVar-based table configuration for mesita.

Provides context-local configuration using Python's ContextVars (PEP 567).
Config is set by a TableSession for the duration of each command and read by
the formatting, sorting and projection code underneath it.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so sessions for different documents never see each other's settings.

Usage:
    from mesita.config import TableConfig, table_config_context

    with table_config_context(TableConfig(syntax="markdown")):
        result = align_table(lines, line=3, character=4)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Literal

type Syntax = Literal["org", "markdown"]

DEFAULT_TODO_KEYWORDS: tuple[str, ...] = (
    "TODO",
    "NEXT",
    "WAIT",
    "WAITING",
    "HOLD",
    "SOMEDAY",
    "IN-PROGRESS",
    "DONE",
    "CANCELLED",
    "CANCELED",
)


@dataclass(frozen=True, slots=True)
class TableConfig:
    """Immutable table engine configuration.

    Attributes:
        syntax: Default table syntax when a call does not name one. Controls
            the separator joint (``+`` for org, ``|`` for markdown) and the
            heading marker used by entry sorting (``*`` vs ``#``).
        marker_glyph: Glyph inserted after truncated cell content.
        todo_keywords: Keywords stripped from heading titles before sorting.
        todo_sequence: Ordered TODO states for the "by TODO order" sort.
        export_format: Format used when an export command names none.

    """

    syntax: Syntax = "org"
    marker_glyph: str = "…"
    todo_keywords: tuple[str, ...] = DEFAULT_TODO_KEYWORDS
    todo_sequence: tuple[str, ...] = ("TODO", "DONE")
    export_format: str = "csv"

    @classmethod
    def from_dict(cls, config_dict: dict) -> "TableConfig":
        """Create TableConfig from dictionary.

        Useful for host integration where settings come from an editor's
        configuration store. Unknown keys are silently ignored; list values
        for the tuple fields are converted.

        Args:
            config_dict: Dictionary with config values. Keys should match
                TableConfig attribute names.

        Returns:
            New TableConfig instance with values from dict.

        Example:
            >>> config = TableConfig.from_dict({
            ...     "syntax": "markdown",
            ...     "todo_sequence": ["TODO", "NEXT", "DONE"],
            ...     "unknown_key": "ignored",
            ... })
            >>> config.todo_sequence
            ('TODO', 'NEXT', 'DONE')

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        for key in ("todo_keywords", "todo_sequence"):
            if key in filtered:
                filtered[key] = tuple(filtered[key])
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: TableConfig = TableConfig()

_table_config: ContextVar[TableConfig] = ContextVar(
    "table_config",
    default=_DEFAULT_CONFIG,
)


def get_table_config() -> TableConfig:
    """Get the active table configuration for this context."""
    return _table_config.get()


def set_table_config(config: TableConfig) -> None:
    """Set table configuration for the current context.

    Args:
        config: TableConfig instance to use for this context.

    """
    _table_config.set(config)


def reset_table_config() -> None:
    """Reset to the module-level default configuration."""
    _table_config.set(_DEFAULT_CONFIG)


@contextmanager
def table_config_context(config: TableConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: TableConfig to use within the context.

    Yields:
        None

    Example:
        >>> with table_config_context(TableConfig(marker_glyph=">")):
        ...     get_table_config().marker_glyph
        '>'

    Thread Safety:
        Only affects the current context. Restores the previous config even
        if an exception is raised.

    """
    previous = _table_config.get()
    _table_config.set(config)
    try:
        yield
    finally:
        _table_config.set(previous)


def resolve_syntax(syntax: Syntax | None) -> Syntax:
    """Return ``syntax`` or, when None, the syntax of the active config."""
    return syntax if syntax is not None else _table_config.get().syntax


__all__ = [
    "DEFAULT_TODO_KEYWORDS",
    "Syntax",
    "TableConfig",
    "get_table_config",
    "set_table_config",
    "reset_table_config",
    "resolve_syntax",
    "table_config_context",
]
