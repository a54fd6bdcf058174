"""Property discovery for classes dumped as YAML mappings.

A class exposes as properties:
    - its dataclass fields, or for other classes the public names in its
      (inherited) type annotations, ClassVar excluded
    - its public ``property`` descriptors that have a setter, plus read-only
      ones when allow_read_only_properties is set

Annotation records (YamlProperty, YamlAnyGetter) are collected from
typing.Annotated metadata and from dataclass field metadata.
"""

import dataclasses
import inspect
import logging
import typing
from collections.abc import Iterable
from typing import Annotated, ClassVar

from yamlanno.annotations import ANNOTATION_KINDS, METADATA_KEY, YamlAnyGetter, YamlProperty
from yamlanno.error import ConfigurationError

log = logging.getLogger(__name__)


class Property:
    """A named, readable value of an object.

    Attributes:
        name: Key the value is emitted under (after YamlProperty.key renaming)
        attribute: Python attribute the value is read from
        declared_type: Annotated type with the metadata stripped, or None
        annotations: Mapping of record class to record
        readable, writable: Whether the attribute can be read and assigned
    """

    def __init__(self, name, attribute=None, declared_type=None, annotations=None,
                 readable=True, writable=True):
        self.name = name
        self.attribute = name if attribute is None else attribute
        self.declared_type = declared_type
        self.annotations = dict(annotations or {})
        self.readable = readable
        self.writable = writable

    def get(self, obj):
        return getattr(obj, self.attribute)

    def get_annotation(self, kind):
        """Return the record of class ``kind``, or None when absent."""
        return self.annotations.get(kind)

    def __eq__(self, other):
        if not isinstance(other, Property):
            return NotImplemented
        return self.name == other.name

    def __lt__(self, other):
        if not isinstance(other, Property):
            return NotImplemented
        return self.name < other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return 'Property(%r, attribute=%r, annotations=%r)' % (
            self.name, self.attribute, list(self.annotations.values()))


def _split_annotated(hint):
    """Return (bare type, annotation records) for a type hint."""
    if typing.get_origin(hint) is Annotated:
        records = [m for m in hint.__metadata__ if isinstance(m, ANNOTATION_KINDS)]
        return typing.get_args(hint)[0], records
    return hint, []


def _is_classvar(hint):
    if isinstance(hint, str):
        return hint.startswith(('ClassVar', 'typing.ClassVar'))
    bare, _ = _split_annotated(hint)
    return bare is ClassVar or typing.get_origin(bare) is ClassVar


def _type_hints(obj, fallback):
    try:
        return typing.get_type_hints(obj, include_extras=True)
    except (NameError, TypeError) as exc:
        # Unresolvable forward references; the raw annotations still name
        # the properties but carry no records.
        log.debug("cannot resolve type hints of %r: %s", obj, exc)
        return fallback()


def _raw_class_annotations(data_type):
    hints = {}
    for klass in reversed(data_type.__mro__):
        hints.update(inspect.get_annotations(klass))
    return hints


def _metadata_records(field):
    records = field.metadata.get(METADATA_KEY)
    if records is None:
        return []
    if isinstance(records, ANNOTATION_KINDS):
        return [records]
    if isinstance(records, Iterable):
        return list(records)
    raise ConfigurationError("field metadata %r must be an annotation record or a "
                             "sequence of them" % METADATA_KEY,
                             property_name=field.name)


class PropertyUtils:
    """Builds and caches the property list of each class."""

    def __init__(self, allow_read_only_properties=False):
        self.allow_read_only_properties = allow_read_only_properties
        self._properties = {}

    def get_properties(self, data_type):
        """Return the properties of ``data_type`` sorted by name."""
        properties = self._properties.get(data_type)
        if properties is None:
            properties = self._create_property_list(data_type)
            self._properties[data_type] = properties
            log.debug("introspected %d properties of %s", len(properties), data_type.__qualname__)
        return properties

    def _create_property_list(self, data_type):
        found = {}
        hints = _type_hints(data_type, lambda: _raw_class_annotations(data_type))

        if dataclasses.is_dataclass(data_type):
            for field in dataclasses.fields(data_type):
                hint = hints.get(field.name, field.type)
                bare, records = _split_annotated(hint)
                records.extend(_metadata_records(field))
                found[field.name] = self._make_property(data_type, field.name, bare, records)
        else:
            for attribute, hint in hints.items():
                if attribute.startswith('_') or _is_classvar(hint):
                    continue
                bare, records = _split_annotated(hint)
                found[attribute] = self._make_property(data_type, attribute, bare, records)

        for klass in data_type.__mro__:
            for attribute, member in vars(klass).items():
                if not isinstance(member, property) or attribute.startswith('_'):
                    continue
                if attribute in found:
                    continue
                readable = member.fget is not None
                writable = member.fset is not None
                if not readable or not (writable or self.allow_read_only_properties):
                    # Still mark the name so a base class property is not picked up.
                    found[attribute] = None
                    continue
                hint = _type_hints(member.fget, lambda: inspect.get_annotations(member.fget)).get('return')
                bare, records = _split_annotated(hint)
                found[attribute] = self._make_property(data_type, attribute, bare, records,
                                                       readable=readable, writable=writable)

        properties = [p for p in found.values() if p is not None]
        self._check(data_type, properties)
        return tuple(sorted(properties))

    def _make_property(self, data_type, attribute, declared_type, records,
                       readable=True, writable=True):
        annotations = {}
        for record in records:
            if not isinstance(record, ANNOTATION_KINDS):
                raise ConfigurationError("unsupported annotation record %r" % (record,),
                                         property_name=attribute, data_type=data_type)
            kind = type(record)
            if kind in annotations:
                raise ConfigurationError("duplicate %s annotation" % kind.__name__,
                                         property_name=attribute, data_type=data_type)
            annotations[kind] = record

        name = attribute
        yaml_property = annotations.get(YamlProperty)
        if yaml_property is not None and yaml_property.key is not None:
            name = yaml_property.key
        return Property(name, attribute=attribute, declared_type=declared_type,
                        annotations=annotations, readable=readable, writable=writable)

    def _check(self, data_type, properties):
        names = {}
        any_getters = []
        for prop in properties:
            if prop.name in names:
                raise ConfigurationError("attributes '%s' and '%s' are both dumped as '%s'"
                                         % (names[prop.name], prop.attribute, prop.name),
                                         property_name=prop.name, data_type=data_type)
            names[prop.name] = prop.attribute
            if prop.get_annotation(YamlAnyGetter) is not None:
                any_getters.append(prop.name)
        if len(any_getters) > 1:
            raise ConfigurationError("more than one YamlAnyGetter property: %s"
                                     % ", ".join(sorted(any_getters)), data_type=data_type)
