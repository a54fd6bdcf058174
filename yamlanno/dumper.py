"""Dumper assembling PyYAML's emitter, serializer and resolver around
AnnotationAwareRepresenter."""

from yaml.emitter import Emitter
from yaml.resolver import Resolver
from yaml.serializer import Serializer

from yamlanno.representer import AnnotationAwareRepresenter


class AnnotationAwareDumper(Emitter, Serializer, AnnotationAwareRepresenter, Resolver):
    """Drop-in replacement for yaml.Dumper that honours YAML annotations.

    Accepts the keyword arguments of yaml.Dumper plus skip_empty,
    predicate_overrides_skip_empty, skip_predicates and property_utils.
    """

    def __init__(self, stream, default_style=None, default_flow_style=False,
                 canonical=None, indent=None, width=None, allow_unicode=None,
                 line_break=None, encoding=None, explicit_start=None,
                 explicit_end=None, version=None, tags=None, sort_keys=True,
                 skip_empty=True, predicate_overrides_skip_empty=False,
                 skip_predicates=None, property_utils=None):
        Emitter.__init__(self, stream, canonical=canonical, indent=indent, width=width,
                         allow_unicode=allow_unicode, line_break=line_break)
        Serializer.__init__(self, encoding=encoding, explicit_start=explicit_start,
                            explicit_end=explicit_end, version=version, tags=tags)
        AnnotationAwareRepresenter.__init__(self, default_style=default_style,
                                            default_flow_style=default_flow_style,
                                            sort_keys=sort_keys, skip_empty=skip_empty,
                                            predicate_overrides_skip_empty=predicate_overrides_skip_empty,
                                            skip_predicates=skip_predicates,
                                            property_utils=property_utils)
        Resolver.__init__(self)
