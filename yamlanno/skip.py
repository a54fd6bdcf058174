"""Skip predicates decide whether a property is left out of the dump."""

import abc
import array
from collections.abc import Mapping, Sequence, Set


class SkipAtDumpPredicate(abc.ABC):
    """Base class for skip predicates.

    A predicate is created with no arguments, possibly once per emitted
    property, so it must be cheap to construct and free of side effects.
    Subclasses that keep no state may set ``stateless = True`` to let a
    representer reuse a single instance.

    Referencing this class itself in YamlProperty.skip_at_dump_if means
    "no predicate".
    """
    stateless = False

    @abc.abstractmethod
    def skip(self, data, prop, value, tag):
        """Return True if ``prop`` of ``data`` should not be dumped.

        Args:
            data: Object that owns the property
            prop: The Property being represented
            value: Current value of the property
            tag: Tag registered for the value's type, or None
        """
        raise NotImplementedError


def is_null(value):
    return value is None


def is_empty(value):
    """True for None and for strings, arrays and collections of size 0."""
    if value is None:
        return True
    if isinstance(value, (str, bytes, bytearray, array.array, Sequence, Set, Mapping)):
        return len(value) == 0
    return False


class SkipIfNull(SkipAtDumpPredicate):
    """Skips properties whose value is None."""
    stateless = True
    _instance = None

    @classmethod
    def get_instance(cls):
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def skip(self, data, prop, value, tag):
        return is_null(value)


class SkipIfEmpty(SkipAtDumpPredicate):
    """Skips None, empty strings, empty arrays and empty collections."""
    stateless = True
    _instance = None

    @classmethod
    def get_instance(cls):
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def skip(self, data, prop, value, tag):
        return is_empty(value)
