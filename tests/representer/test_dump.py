"""End-to-end tests for yamlanno.dump() and AnnotationAwareDumper."""

import dataclasses
import io
from typing import Annotated, Optional

import pytest
import yaml

import yamlanno
from yamlanno import (
    AnnotationAwareDumper, ConfigurationError, SkipAtDumpPredicate, YamlAnyGetter, YamlProperty,
)

MAP_TAG = 'tag:yaml.org,2002:map'


class AlwaysSkip(SkipAtDumpPredicate):
    def skip(self, data, prop, value, tag):
        return True


class Broken(SkipAtDumpPredicate):

    def __init__(self, required):
        self.required = required

    def skip(self, data, prop, value, tag):
        return False


@dataclasses.dataclass
class Prioritized:
    a: Annotated[int, YamlProperty(order=10)]
    b: Annotated[int, YamlProperty(order=0)]
    c: Annotated[int, YamlProperty(order=-5)]


@dataclasses.dataclass
class Reversed:
    a: Annotated[int, YamlProperty(order=-1)]
    z: Annotated[int, YamlProperty(order=1)]


@dataclasses.dataclass
class Empties:
    x: str
    y: list


@dataclasses.dataclass
class WithExtra:
    name: str
    extra: Annotated[dict, YamlAnyGetter()]


@dataclasses.dataclass
class AlwaysSkipped:
    p: Annotated[str, YamlProperty(skip_at_dump_if=AlwaysSkip)]


@dataclasses.dataclass
class BrokenSkip:
    p: Annotated[str, YamlProperty(skip_at_dump_if=Broken)]


class Link:
    name: str
    next: Optional['Link']

    def __init__(self, name):
        self.name = name
        self.next = None


class Unannotated:

    def __init__(self):
        self.value = 1


class MapDumper(AnnotationAwareDumper):
    """Dumps the test classes as untagged mappings."""
    pass


for _cls in (Prioritized, Reversed, Empties, WithExtra, AlwaysSkipped, BrokenSkip, Link):
    MapDumper.add_class_tag(_cls, MAP_TAG)


def _dump(data, **kwds):
    kwds.setdefault('Dumper', MapDumper)
    return yamlanno.dump(data, **kwds)


def _load(data, **kwds):
    return yaml.safe_load(_dump(data, **kwds))


class TestScenarios:
    """Test ordering, skipping and flattening end to end."""

    def test_order_priority(self):
        loaded = _load(Prioritized(a=1, b=2, c=3))
        assert list(loaded.items()) == [('a', 1), ('b', 2), ('c', 3)]

    def test_order_beats_name(self):
        assert list(_load(Reversed(a=1, z=2))) == ['z', 'a']

    def test_empty_values_skipped(self):
        assert _dump(Empties(x='', y=[])) == '{}\n'

    def test_empty_values_kept_without_skip_empty(self):
        assert _load(Empties(x='', y=[]), skip_empty=False) == {'x': '', 'y': []}

    def test_any_getter(self):
        loaded = _load(WithExtra(name='n', extra={'k1': 'v1', 'k2': 'v2'}))
        assert list(loaded.items()) == [('name', 'n'), ('k1', 'v1'), ('k2', 'v2')]

    def test_skip_predicate(self):
        assert _dump(AlwaysSkipped(p='x')) == '{}\n'

    def test_broken_predicate(self):
        stream = io.StringIO()
        with pytest.raises(ConfigurationError, match='Broken'):
            _dump(BrokenSkip(p='x'), stream=stream)
        assert stream.getvalue() == ''


class TestOutput:
    """Test properties of the produced YAML text."""

    def test_identical_dumps(self):
        data = WithExtra(name='n', extra={'k2': 'v2', 'k1': 'v1'})
        assert _dump(data) == _dump(data)

    def test_text(self):
        assert _dump(Prioritized(a=1, b=2, c=3)) == 'a: 1\nb: 2\nc: 3\n'

    def test_default_object_tag(self):
        first_line = yamlanno.dump(Prioritized(a=1, b=2, c=3)).splitlines()[0]
        assert first_line.startswith('!!python/object:')
        assert first_line.endswith('.Prioritized')

    def test_unannotated_object_uses_pyyaml_representation(self):
        text = yamlanno.dump(Unannotated())
        assert text == yaml.dump(Unannotated())

    def test_cycle_uses_alias(self):
        link = Link('self')
        link.next = link
        text = _dump(link)
        assert '*id001' in text
        loaded = yaml.safe_load(text)
        assert loaded['next'] is loaded

    @pytest.mark.parametrize('shared_with_plain_entry', [False, True])
    def test_shared_any_getter_mapping_has_no_anchors(self, shared_with_plain_entry):
        """A mapping merged into several parents is written out in full each time."""
        shared = {'k1': 'v1'}
        data = [WithExtra('a', shared), WithExtra('b', shared)]
        expected = [{'name': 'a', 'k1': 'v1'}, {'name': 'b', 'k1': 'v1'}]
        if shared_with_plain_entry:
            data.insert(0, shared)
            expected.insert(0, {'k1': 'v1'})
        text = _dump(data)
        assert '&' not in text
        assert '*' not in text
        assert yaml.safe_load(text) == expected

    def test_nested_objects(self):
        first = Link('first')
        first.next = Link('second')
        assert _load(first) == {'name': 'first', 'next': {'name': 'second'}}

    def test_plain_data_unchanged(self):
        data = {'b': [1, 2], 'a': None}
        assert _dump(data) == yaml.dump(data)


class TestApi:
    """Test dump() and dump_all() arguments."""

    def test_stream(self):
        stream = io.StringIO()
        assert _dump(Prioritized(a=1, b=2, c=3), stream=stream) is None
        assert stream.getvalue() == 'a: 1\nb: 2\nc: 3\n'

    def test_dump_all(self):
        text = yamlanno.dump_all([Reversed(a=1, z=2), Reversed(a=3, z=4)], Dumper=MapDumper)
        assert list(yaml.safe_load_all(text)) == [{'z': 2, 'a': 1}, {'z': 4, 'a': 3}]

    def test_yaml_options_pass_through(self):
        text = _dump(Prioritized(a=1, b=2, c=3), default_flow_style=True)
        assert text == '{a: 1, b: 2, c: 3}\n'

    def test_skip_predicates_option(self):
        @dataclasses.dataclass
        class Named:
            p: Annotated[str, YamlProperty(skip_at_dump_if='always')] = 'x'
            q: str = 'y'

        MapDumper.add_class_tag(Named, MAP_TAG)
        assert _load(Named(), skip_predicates={'always': AlwaysSkip()}) == {'q': 'y'}

    def test_predicate_overrides_skip_empty_option(self):
        class Keep(SkipAtDumpPredicate):
            def skip(self, data, prop, value, tag):
                return False

        @dataclasses.dataclass
        class Kept:
            p: Annotated[str, YamlProperty(skip_at_dump_if=Keep)] = ''

        MapDumper.add_class_tag(Kept, MAP_TAG)
        assert _load(Kept()) == {}
        assert _load(Kept(), predicate_overrides_skip_empty=True) == {'p': ''}

    def test_yaml_dump_with_dumper_class(self):
        """The dumper also works with plain yaml.dump()."""
        assert yaml.dump(Reversed(a=1, z=2), Dumper=MapDumper) == 'z: 2\na: 1\n'
