"""
yamlanno - annotation driven YAML dumping on top of PyYAML

Properties of dataclasses and annotated classes are dumped as mapping
entries, and typing.Annotated records control how:

- YamlProperty(order=...) emits higher orders first
- YamlProperty(skip_at_dump=True) or skip_at_dump_if=<predicate> leaves a
  property out; empty and None values are left out unless skip_empty=False
- YamlAnyGetter() merges a mapping valued property into its parent mapping

Example:
    >>> import dataclasses
    >>> from typing import Annotated
    >>> import yamlanno
    >>> @dataclasses.dataclass
    ... class Node:
    ...     name: Annotated[str, yamlanno.YamlProperty(order=1)]
    ...     extra: Annotated[dict, yamlanno.YamlAnyGetter()]
    >>> yamlanno.AnnotationAwareDumper.add_class_tag(Node, 'tag:yaml.org,2002:map')
    >>> print(yamlanno.dump(Node('n', {'k1': 'v1'})), end='')
    name: n
    k1: v1
"""

import functools

import yaml

from yamlanno.annotations import METADATA_KEY, YamlAnyGetter, YamlProperty
from yamlanno.dumper import AnnotationAwareDumper
from yamlanno.error import AnnotationError, ConfigurationError, SchemaError
from yamlanno.introspector import Property, PropertyUtils
from yamlanno.representer import AnnotationAwareRepresenter, BeanRepresenter, property_order_key
from yamlanno.skip import SkipAtDumpPredicate, SkipIfEmpty, SkipIfNull, is_empty, is_null

__version__ = "1.0.0"

# Keyword arguments taken by AnnotationAwareDumper but not by yaml.dump_all().
_DUMPER_OPTIONS = (
    'skip_empty',
    'predicate_overrides_skip_empty',
    'skip_predicates',
    'property_utils',
)


def dump_all(documents, stream=None, Dumper=AnnotationAwareDumper, **kwds):
    """
    Serialize a sequence of documents to YAML.

    Args:
        documents: Iterable of objects to serialize
        stream: File-like object to write to, or None to return a string
        Dumper: Dumper class, AnnotationAwareDumper by default
        **kwds: yaml.dump_all() options, plus skip_empty,
            predicate_overrides_skip_empty, skip_predicates and
            property_utils which are passed to the dumper

    Returns:
        The YAML text if stream is None, otherwise None
    """
    options = {name: kwds.pop(name) for name in _DUMPER_OPTIONS if name in kwds}
    if options:
        Dumper = functools.partial(Dumper, **options)
    return yaml.dump_all(documents, stream, Dumper=Dumper, **kwds)


def dump(data, stream=None, Dumper=AnnotationAwareDumper, **kwds):
    """
    Serialize a single object to YAML.

    See dump_all() for the arguments.
    """
    return dump_all([data], stream, Dumper=Dumper, **kwds)


__all__ = [
    "AnnotationAwareDumper",
    "AnnotationAwareRepresenter",
    "AnnotationError",
    "BeanRepresenter",
    "ConfigurationError",
    "METADATA_KEY",
    "Property",
    "PropertyUtils",
    "SchemaError",
    "SkipAtDumpPredicate",
    "SkipIfEmpty",
    "SkipIfNull",
    "YamlAnyGetter",
    "YamlProperty",
    "dump",
    "dump_all",
    "is_empty",
    "is_null",
    "property_order_key",
]
