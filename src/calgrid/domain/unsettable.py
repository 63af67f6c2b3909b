"""Tri-state handling for event patch fields.

This module defines the ``UNSET`` sentinel, the `Unsettable` type alias,
and the `resolve` helper for applying partial updates to events.

A field of type ``Unsettable[T]`` can take three states:

* ``UNSET``: the field is left unchanged by the patch.
* ``None``: the field is explicitly cleared (only if allowed).
* concrete ``T``: the field is explicitly updated to a new value.

Unset fields are simply absent from the change set of a patch.
"""

from dataclasses import dataclass
from typing import Literal, TypeVar, overload

from .errors import InvalidPatchError


def _get_unset() -> "_UnsetType":
    # Factory used by pickle to retrieve the one true instance.
    return UNSET


@dataclass(frozen=True)
class _UnsetType:
    """Sentinel to mark patch fields intentionally left untouched.

    This is distinct from `None`, which indicates an explicit clearing of a value.
    """

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __reduce__(self):  # keep singleton on pickle
        return (_get_unset, ())


UNSET = _UnsetType()

T = TypeVar("T")
type Unsettable[T] = T | _UnsetType | None


def is_unset(value: object) -> bool:
    """Return True if `value` is the ``UNSET`` sentinel."""
    return isinstance(value, _UnsetType)


@overload
def resolve(
    value: T | None | _UnsetType,
    current: T,
    *,
    clearable: Literal[False],
    field: str,
    event_id: str,
) -> T: ...
@overload
def resolve(
    value: T | None | _UnsetType,
    current: T,
    *,
    clearable: Literal[True],
    field: str,
    event_id: str,
) -> T | None: ...
def resolve(
    value: T | None | _UnsetType,
    current: T,
    *,
    clearable: bool,
    field: str,
    event_id: str,
) -> T | None:
    """Resolve a tri-state patch value against the current value.

    Args:
        value: The new value from the patch (may be UNSET, None, or a concrete value).
        current: The current value on the event.
        clearable: Whether this field is allowed to be cleared (set to None).
        field: The name of the field (for error messages).
        event_id: The id of the event being patched (for error messages).

    Returns:
        The concrete value if one is given, the current value if `value` is
        UNSET, or None when clearing is allowed.

    Raises:
        InvalidPatchError: If attempting to clear a non-clearable field.
    """
    if isinstance(value, _UnsetType):
        return current
    if value is None and not clearable:
        raise InvalidPatchError(event_id, field, "cannot be cleared")
    return value
