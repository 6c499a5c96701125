"""
Helmsman utilities

Small helpers shared by the entry, definition, input and command layers.

Contents
- Unset: the "nothing was given" marker. None stays a legitimate value for
  defaults and bound inputs, so it cannot play that role.
- coalesce(value, fallback): resolve Unset to a fallback.
- mirror(field): read-only property over a private "_field" slot, handing out
  frozen copies of containers.
- pluralize(text) / counted(count, text): wording for fault messages.
- typename(name): class name to command label ("DbSeed" → "db-seed").

    >>> coalesce(Unset, 3)
    3
    >>> counted(2, "missing argument")
    'missing arguments'
"""
import functools
import re
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance; calling the type hands it back. The marker
    is falsy, prints as "Unset" and refuses to be subclassed.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


def coalesce(value, fallback=None, /):
    """
    Return `value`, or `fallback` when `value` is Unset.

    Only the marker is replaced: None, 0 and empty containers pass through.
    """
    if value is Unset:
        return fallback
    return value


def _frozen(value):
    # Strings are sequences too, leave them be.
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return {key: _frozen(item) for key, item in value.items()}
    if isinstance(value, Set):
        return frozenset(_frozen(item) for item in value)
    if isinstance(value, Sequence):
        return tuple(_frozen(item) for item in value)
    return value


def mirror(field, /):
    """
    Build a read-only property exposing ``self._<field>``.

    Lists come back as tuples and sets as frozensets, so what a caller receives
    can never alias the instance state.
    """
    if not isinstance(field, str):
        raise TypeError("mirror() expects a field name, got %s" % type(field).__name__)
    slot = "_" + field

    def read(self):
        return _frozen(getattr(self, slot))

    read.__name__ = read.__qualname__ = field
    return property(read)


_SIBILANT = ("s", "x", "z", "ch", "sh")


@functools.cache
def pluralize(text, /):
    """
    Pluralize the final word of `text` ("required option" → "required options").

    Handles the sibilant and consonant-y endings; the capitalisation of the
    word is carried over.
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() expects a string, got %s" % type(text).__name__)
    head, _, word = text.rpartition(" ")
    if not word:
        return text

    lower = word.lower()
    if lower.endswith(_SIBILANT):
        plural = lower + "es"
    elif lower.endswith("y") and lower[-2:-1] not in ("", "a", "e", "i", "o", "u"):
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if word.isupper() and len(word) > 1:
        plural = plural.upper()
    elif word[0].isupper():
        plural = plural.capitalize()
    return (head + " " if head else "") + plural


def counted(count, text, /):
    return text if count == 1 else pluralize(text)


@functools.cache
def typename(name, /):
    """Hyphenated lower-case label for a class name, used for default command names."""
    if not isinstance(name, str):
        raise TypeError("typename() expects a string, got %s" % type(name).__name__)
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "-", name).lower()


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "mirror",
    "pluralize",
    "counted",
    "typename",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
