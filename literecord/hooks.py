"""
Lifecycle callbacks for records.

Each hook is an optional capability: a record type implements none, some or
all of them, and the dispatcher probes for each one with a runtime-checkable
Protocol before calling it. A before-hook returning exactly ``False`` vetoes
the operation; anything else, ``None`` included, lets it proceed. After-hooks
run only once the operation succeeded and their result is ignored.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Protocol, runtime_checkable

from literecord.utils.logging import get_logger

log = get_logger(__name__)

Event = Literal["create", "update", "save"]


@runtime_checkable
class BeforeCreate(Protocol):
    def before_create(self) -> Optional[bool]: ...


@runtime_checkable
class AfterCreate(Protocol):
    def after_create(self) -> Any: ...


@runtime_checkable
class BeforeUpdate(Protocol):
    def before_update(self) -> Optional[bool]: ...


@runtime_checkable
class AfterUpdate(Protocol):
    def after_update(self) -> Any: ...


@runtime_checkable
class BeforeSave(Protocol):
    def before_save(self) -> Optional[bool]: ...


@runtime_checkable
class AfterSave(Protocol):
    def after_save(self) -> Any: ...


_BEFORE: Dict[str, type] = {
    "create": BeforeCreate,
    "update": BeforeUpdate,
    "save": BeforeSave,
}

_AFTER: Dict[str, type] = {
    "create": AfterCreate,
    "update": AfterUpdate,
    "save": AfterSave,
}


def run_before(record: Any, event: Event) -> bool:
    """
    Invoke the before-hook of `event` if the record has one.

    Returns
    -------
    bool
        False when the hook vetoed the operation.
    """
    if not isinstance(record, _BEFORE[event]):
        return True
    if getattr(record, f"before_{event}")() is False:
        log.debug(
            "Operation vetoed by hook",
            extra={"event": event, "record_type": type(record).__name__},
        )
        return False
    return True


def run_after(record: Any, event: Event) -> None:
    if isinstance(record, _AFTER[event]):
        getattr(record, f"after_{event}")()


__all__ = [
    "BeforeCreate",
    "AfterCreate",
    "BeforeUpdate",
    "AfterUpdate",
    "BeforeSave",
    "AfterSave",
    "run_before",
    "run_after",
]
