"""Metadata records that can be attached to properties.

Records are attached with typing.Annotated::

    @dataclasses.dataclass
    class Server:
        name: Annotated[str, YamlProperty(order=10)]
        labels: Annotated[dict, YamlAnyGetter()] = dataclasses.field(default_factory=dict)

or through dataclass field metadata under METADATA_KEY::

    port: int = dataclasses.field(default=0, metadata={METADATA_KEY: YamlProperty(order=5)})
"""

import dataclasses
from typing import Optional, Union

from yamlanno.skip import SkipAtDumpPredicate

METADATA_KEY = 'yamlanno'


@dataclasses.dataclass(frozen=True)
class YamlProperty:
    """Ordering, skipping and renaming of a single property.

    Attributes:
        order: Priority of the property; higher values are emitted first
        skip_at_dump: Never emit the property
        skip_at_dump_if: Skip predicate class, or the name of a predicate
            registered on the representer. None (or SkipAtDumpPredicate
            itself) means no predicate.
        key: Emit the property under this key instead of its attribute name
    """
    order: int = 0
    skip_at_dump: bool = False
    skip_at_dump_if: Union[type, str, None] = None
    key: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.order, bool) or not isinstance(self.order, int):
            raise TypeError("YamlProperty.order must be an int, not %r" % (self.order,))
        if not isinstance(self.skip_at_dump, bool):
            raise TypeError("YamlProperty.skip_at_dump must be a bool, not %r" % (self.skip_at_dump,))
        predicate = self.skip_at_dump_if
        if predicate is not None and not isinstance(predicate, (type, str)):
            raise TypeError("YamlProperty.skip_at_dump_if must be a class or a registered "
                            "predicate name, not %r" % (predicate,))
        if isinstance(predicate, type) and not issubclass(predicate, SkipAtDumpPredicate):
            raise TypeError("YamlProperty.skip_at_dump_if must be a subclass of "
                            "SkipAtDumpPredicate, not %s" % predicate.__qualname__)
        if self.key is not None and not isinstance(self.key, str):
            raise TypeError("YamlProperty.key must be a str, not %r" % (self.key,))

    @property
    def has_predicate(self):
        """True if skip_at_dump_if names an actual predicate."""
        return self.skip_at_dump_if is not None and self.skip_at_dump_if is not SkipAtDumpPredicate


@dataclasses.dataclass(frozen=True)
class YamlAnyGetter:
    """Marks the property whose mapping is merged into the enclosing mapping.

    At most one property per class may carry this marker.
    """
    pass


ANNOTATION_KINDS = (YamlProperty, YamlAnyGetter)
