"""Error classes raised while representing annotated objects.

All of them derive from PyYAML's RepresenterError, so code that already
catches yaml.YAMLError around a dump keeps working.
"""

from yaml.representer import RepresenterError


class AnnotationError(RepresenterError):
    """Base class for errors caused by YAML annotations.

    Attributes:
        message: Human readable description of the problem
        property_name: Name of the offending property, if any
        data_type: Class that declares the property, if known
    """

    def __init__(self, message, property_name=None, data_type=None):
        super().__init__(message)
        self.message = message
        self.property_name = property_name
        self.data_type = data_type

    def __str__(self):
        where = []
        if self.data_type is not None:
            where.append("type %s" % qualified_name(self.data_type))
        if self.property_name is not None:
            where.append("property '%s'" % self.property_name)
        if where:
            return "%s (%s)" % (self.message, ", ".join(where))
        return self.message


class ConfigurationError(AnnotationError):
    """Annotations are inconsistent or a skip predicate cannot be created."""

    def __init__(self, message, property_name=None, data_type=None, predicate=None):
        super().__init__(message, property_name=property_name, data_type=data_type)
        self.predicate = predicate


class SchemaError(AnnotationError):
    """A value does not have the node shape its annotation requires."""
    pass


def qualified_name(obj):
    module = getattr(obj, '__module__', None)
    name = getattr(obj, '__qualname__', None) or getattr(obj, '__name__', None)
    if name is None:
        return repr(obj)
    if module and module != 'builtins':
        return '%s.%s' % (module, name)
    return name
