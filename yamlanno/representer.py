"""Representers that dump objects as mappings of their properties.

BeanRepresenter adds property based object representation on top of
PyYAML's Representer. AnnotationAwareRepresenter builds on it to order,
skip and flatten properties according to their annotation records.
"""

import logging

from yaml.nodes import MappingNode, ScalarNode
from yaml.representer import Representer

from yamlanno.annotations import YamlAnyGetter, YamlProperty
from yamlanno.error import ConfigurationError, SchemaError, qualified_name
from yamlanno.introspector import PropertyUtils
from yamlanno.skip import SkipIfEmpty, SkipIfNull

log = logging.getLogger(__name__)

OBJECT_TAG_PREFIX = 'tag:yaml.org,2002:python/object:'


class BeanRepresenter(Representer):
    """Represents objects with properties as mappings, one entry per property.

    Objects whose class has no properties are represented by PyYAML's
    represent_object.
    """
    yaml_class_tags = {}

    def __init__(self, default_style=None, default_flow_style=False, sort_keys=True,
                 property_utils=None):
        Representer.__init__(self, default_style=default_style,
                             default_flow_style=default_flow_style, sort_keys=sort_keys)
        self.property_utils = property_utils if property_utils is not None else PropertyUtils()

    @classmethod
    def add_class_tag(cls, data_type, tag):
        """Use ``tag`` for mappings representing instances of ``data_type``."""
        if 'yaml_class_tags' not in cls.__dict__:
            cls.yaml_class_tags = cls.yaml_class_tags.copy()
        cls.yaml_class_tags[data_type] = tag

    def get_class_tag(self, data_type):
        tag = self.yaml_class_tags.get(data_type)
        if tag is None:
            tag = OBJECT_TAG_PREFIX + '%s.%s' % (data_type.__module__, data_type.__qualname__)
        return tag

    def get_properties(self, data_type):
        return self.property_utils.get_properties(data_type)

    def represent_bean_object(self, data):
        properties = self.get_properties(type(data))
        if not properties:
            return self.represent_object(data)
        return self.represent_bean(properties, data)

    def represent_bean(self, properties, data):
        """Build the mapping node of ``data`` from ``properties``, in order."""
        value = []
        node = MappingNode(self.get_class_tag(type(data)), value)
        # Register before the children so that cycles come out as aliases.
        if self.alias_key is not None:
            self.represented_objects[self.alias_key] = node
        best_style = True
        for prop in properties:
            prop_value = prop.get(data)
            custom_tag = self.yaml_class_tags.get(type(prop_value))
            node_tuple = self.represent_property(data, prop, prop_value, custom_tag)
            if node_tuple is None:
                continue
            value_node = node_tuple[1]
            if not (isinstance(value_node, ScalarNode) and not value_node.style):
                best_style = False
            value.append(node_tuple)
        if self.default_flow_style is not None:
            node.flow_style = self.default_flow_style
        else:
            node.flow_style = best_style
        return node

    def represent_property(self, data, prop, value, custom_tag):
        """Return the (key node, value node) tuple of one property, or None to omit it."""
        key_node = self.represent_data(prop.name)
        value_node = self.represent_data(value)
        return key_node, value_node


BeanRepresenter.add_multi_representer(object, BeanRepresenter.represent_bean_object)


def property_order_key(prop):
    """Sort key putting higher YamlProperty.order first, then natural order."""
    yaml_property = prop.get_annotation(YamlProperty)
    order = yaml_property.order if yaml_property is not None else 0
    return -order, prop


class AnnotationAwareRepresenter(BeanRepresenter):
    """Representer honouring YamlProperty and YamlAnyGetter annotations.

    With skip_empty set, properties whose value is None or empty are never
    dumped, whatever their skip predicate says, unless
    predicate_overrides_skip_empty lets a property's own predicate decide.

    Skip predicates referenced by name are looked up in the predicates added
    with add_skip_predicate() and those passed as skip_predicates.
    """
    yaml_skip_predicates = {}

    def __init__(self, default_style=None, default_flow_style=False, sort_keys=True,
                 skip_empty=True, predicate_overrides_skip_empty=False,
                 skip_predicates=None, property_utils=None):
        BeanRepresenter.__init__(self, default_style=default_style,
                                 default_flow_style=default_flow_style, sort_keys=sort_keys,
                                 property_utils=property_utils)
        self.skip_empty = skip_empty
        self.predicate_overrides_skip_empty = predicate_overrides_skip_empty
        self.skip_predicates = dict(self.yaml_skip_predicates)
        for name, predicate in (skip_predicates or {}).items():
            _check_predicate(name, predicate)
            self.skip_predicates[name] = predicate
        self._ordered_properties = {}
        self._predicate_instances = {}

    @classmethod
    def add_skip_predicate(cls, name, predicate):
        """Register a predicate instance under ``name`` for YamlProperty.skip_at_dump_if."""
        _check_predicate(name, predicate)
        if 'yaml_skip_predicates' not in cls.__dict__:
            cls.yaml_skip_predicates = cls.yaml_skip_predicates.copy()
        cls.yaml_skip_predicates[name] = predicate

    def get_properties(self, data_type):
        properties = self._ordered_properties.get(data_type)
        if properties is None:
            properties = tuple(sorted(set(BeanRepresenter.get_properties(self, data_type)),
                                      key=property_order_key))
            self._ordered_properties[data_type] = properties
        return properties

    def represent_bean(self, properties, data):
        node = BeanRepresenter.represent_bean(self, properties, data)
        for prop in properties:
            if prop.get_annotation(YamlAnyGetter) is not None:
                self.flatten_any_getter(node, prop, type(data))
                break
        return node

    def flatten_any_getter(self, node, prop, data_type):
        """Replace the entry of ``prop`` in ``node`` by the entries of its mapping.

        The merged entries are appended after the remaining entries; keys
        already present in ``node`` are not deduplicated. Scalar nodes are
        copied, so a mapping shared between objects does not anchor its keys
        and values; shared collection values still come out as aliases.
        """
        for index, (key_node, value_node) in enumerate(node.value):
            if isinstance(key_node, ScalarNode) and key_node.value == prop.name:
                break
        else:
            return node
        if not isinstance(value_node, MappingNode):
            raise SchemaError("YamlAnyGetter value must be represented as a mapping, not a %s"
                              % value_node.id, property_name=prop.name, data_type=data_type)
        del node.value[index]
        node.value.extend((_copy_scalar(key), _copy_scalar(item)) for key, item in value_node.value)
        return node

    def represent_property(self, data, prop, value, custom_tag):
        yaml_property = prop.get_annotation(YamlProperty)
        has_predicate = yaml_property is not None and yaml_property.has_predicate

        if self.skip_empty and not (has_predicate and self.predicate_overrides_skip_empty):
            if SkipIfEmpty.get_instance().skip(data, prop, value, custom_tag):
                return None
            if SkipIfNull.get_instance().skip(data, prop, value, custom_tag):
                return None

        if yaml_property is not None:
            if yaml_property.skip_at_dump:
                return None
            if has_predicate:
                predicate = self.get_skip_predicate(yaml_property.skip_at_dump_if, prop, type(data))
                if predicate.skip(data, prop, value, custom_tag):
                    return None

        return BeanRepresenter.represent_property(self, data, prop, value, custom_tag)

    def get_skip_predicate(self, reference, prop, data_type):
        """Resolve a YamlProperty.skip_at_dump_if reference to a predicate instance."""
        if isinstance(reference, str):
            try:
                return self.skip_predicates[reference]
            except KeyError:
                raise ConfigurationError("no skip predicate registered as '%s'" % reference,
                                         property_name=prop.name, data_type=data_type,
                                         predicate=reference) from None

        predicate = self._predicate_instances.get(reference)
        if predicate is not None:
            return predicate
        try:
            predicate = reference()
        except Exception as exc:
            raise ConfigurationError("cannot create an instance of %s" % qualified_name(reference),
                                     property_name=prop.name, data_type=data_type,
                                     predicate=reference) from exc
        log.debug("created skip predicate %s for property '%s'", reference.__qualname__, prop.name)
        if getattr(reference, 'stateless', False):
            self._predicate_instances[reference] = predicate
        return predicate


def _copy_scalar(node):
    if isinstance(node, ScalarNode):
        return ScalarNode(node.tag, node.value, node.start_mark, node.end_mark, node.style)
    return node


def _check_predicate(name, predicate):
    if not isinstance(name, str):
        raise TypeError("skip predicate name must be a str, not %r" % (name,))
    if isinstance(predicate, type) or not callable(getattr(predicate, 'skip', None)):
        raise TypeError("skip predicate '%s' must be an instance with a skip() method, not %r"
                        % (name, predicate))
