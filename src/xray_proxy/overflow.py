"""Overflow handler discovery and delegation.

A target opts into catch-all handling by declaring one of the slot methods
below. Slots are looked up on the target class and its ancestors, and the
handler is called through ordinary attribute access:

``_get_missing(name)``
    Read of a property that is not declared (instance x-rays only).
``_set_missing(name, value)``
    Write of a property that is not declared (instance x-rays only).
``_call_missing(name, *args, **kwargs)``
    Call of an instance method that is not declared.
``_call_static_missing(name, *args, **kwargs)``
    Call of a static or class method that is not declared (static x-rays only).
"""

import inspect
import logging
from collections.abc import Callable
from typing import Literal

_LOGGER: logging.Logger = logging.getLogger(__name__)
_MISSING: object = object()
OverflowSlot = Literal["_get_missing", "_set_missing", "_call_missing", "_call_static_missing"]
GET_MISSING_SLOT: OverflowSlot = "_get_missing"
SET_MISSING_SLOT: OverflowSlot = "_set_missing"
CALL_MISSING_SLOT: OverflowSlot = "_call_missing"
CALL_STATIC_MISSING_SLOT: OverflowSlot = "_call_static_missing"


def has_overflow_handler(target_type: type, slot: OverflowSlot | None) -> bool:
    """Report whether ``target_type`` declares the overflow ``slot``.

    :param target_type: Class to query, ancestors included.
    :param slot: Slot name, or ``None`` when the variant has no such slot.
    :returns: ``True`` when the slot is declared.
    """
    if slot is None:
        return False
    declared: object = inspect.getattr_static(target_type, slot, _MISSING)
    return declared is not _MISSING


def find_overflow_handler(
    target: object,
    target_type: type,
    slot: OverflowSlot | None,
) -> Callable[..., object] | None:
    """Return the bound overflow handler for ``slot``, if declared.

    :param target: Wrapped instance or class the handler binds to.
    :param target_type: Class that declares the slot.
    :param slot: Slot name, or ``None`` when the variant has no such slot.
    :returns: Bound handler, or ``None``.
    """
    if has_overflow_handler(target_type, slot) is False:
        return None
    handler: Callable[..., object] = getattr(target, slot)  # type: ignore[arg-type]
    return handler


def delegate_get(handler: Callable[..., object], name: str) -> object:
    """Read an undeclared property through a get-miss handler.

    :param handler: Bound ``_get_missing`` handler.
    :param name: Requested property name.
    :returns: Handler result, unchanged.
    """
    _LOGGER.debug("Delegating read of %r to %s", name, GET_MISSING_SLOT)
    return handler(name)


def delegate_set(handler: Callable[..., object], name: str, value: object) -> None:
    """Write an undeclared property through a set-miss handler.

    :param handler: Bound ``_set_missing`` handler.
    :param name: Requested property name.
    :param value: Value to write.
    """
    _LOGGER.debug("Delegating write of %r to %s", name, SET_MISSING_SLOT)
    handler(name, value)


def delegate_call(
    handler: Callable[..., object],
    name: str,
    args: tuple[object, ...],
    kwargs: dict[str, object],
) -> object:
    """Invoke an undeclared method through a call-miss handler.

    :param handler: Bound ``_call_missing`` or ``_call_static_missing`` handler.
    :param name: Requested method name.
    :param args: Positional arguments of the original call.
    :param kwargs: Keyword arguments of the original call.
    :returns: Handler result, unchanged.
    """
    _LOGGER.debug("Delegating call of %r to overflow handler %r", name, handler)
    return handler(name, *args, **kwargs)
