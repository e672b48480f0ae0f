"""Tests for accessor call detection and field-path splitting."""
import pytest

from schemafield.analyzer.diagnostics import Position
from schemafield.analyzer.grammar import NodeKind, get_grammar
from schemafield.analyzer.references import (
    ACCESSOR_NAMES,
    MULTI_ARGUMENT_ACCESSORS,
    ReferenceCollector,
    get_argument_components,
    get_function_arguments,
    get_function_name,
    is_index_or_sentinel,
)
from conftest import go_func, parse_snippet, walk


def calls(parsed):
    grammar = get_grammar(parsed.language)
    return [n for n in walk(parsed.tree.root_node) if grammar.kind(n) is NodeKind.CALL]


def collect(parsed):
    collector = ReferenceCollector()
    grammar = get_grammar(parsed.language)
    for node in walk(parsed.tree.root_node):
        collector.visit(node, grammar, parsed)
    return collector.occurrences


class TestFunctionName:

    @pytest.mark.parametrize("statement, expected", [
        ('d.HasChange("name")', "HasChange"),
        ('HasChange("name")', "HasChange"),
        ('d.inner.GetOk("name")', "GetOk"),
        ('fns[0]("name")', None),
        ('func() {}()', None),
    ])
    def test_go(self, statement, expected):
        parsed = parse_snippet(go_func(f"\t{statement}"))
        grammar = get_grammar('go')
        assert get_function_name(calls(parsed)[0], grammar, parsed.source) == expected

    @pytest.mark.parametrize("language, statement", [
        ('python', 'd.GetChange("name")\n'),
        ('javascript', 'd.GetChange("name");\n'),
        ('typescript', 'd.GetChange("name");\n'),
    ])
    def test_member_call_other_languages(self, language, statement):
        parsed = parse_snippet(statement, language=language)
        grammar = get_grammar(language)
        assert get_function_name(calls(parsed)[0], grammar, parsed.source) == "GetChange"

    def test_non_call_node_has_no_name(self):
        parsed = parse_snippet(go_func('\tx := 1'))
        grammar = get_grammar('go')
        assert get_function_name(parsed.tree.root_node, grammar, parsed.source) is None


class TestFunctionArguments:

    def test_arguments_in_order(self):
        parsed = parse_snippet(go_func('\td.HasChanges("a", b, "c")'))
        grammar = get_grammar('go')
        arguments = get_function_arguments(calls(parsed)[0], grammar)
        assert [a.text.decode() for a in arguments] == ['"a"', 'b', '"c"']

    def test_no_arguments(self):
        parsed = parse_snippet(go_func('\td.HasChanges()'))
        assert get_function_arguments(calls(parsed)[0], get_grammar('go')) == []


class TestArgumentComponents:

    @pytest.mark.parametrize("literal, expected", [
        ('"block.0.inner"', ["block", "0", "inner"]),
        ('"name"', ["name"]),
        ('""', [""]),
        ('"a..b"', ["a", "", "b"]),
    ])
    def test_split_on_dots(self, literal, expected):
        parsed = parse_snippet(go_func(f"\td.Get({literal})"))
        grammar = get_grammar('go')
        argument = get_function_arguments(calls(parsed)[0], grammar)[0]
        assert get_argument_components(argument, grammar, parsed.source) == expected

    def test_non_literal_has_no_components(self):
        parsed = parse_snippet(go_func('\td.Get(prefix + ".name")'))
        grammar = get_grammar('go')
        argument = get_function_arguments(calls(parsed)[0], grammar)[0]
        assert get_argument_components(argument, grammar, parsed.source) == []


class TestIndexOrSentinel:

    @pytest.mark.parametrize("component", [
        "0", "12", "-1", "+3", "#", "007",
        "9223372036854775807", "-9223372036854775808",
    ])
    def test_filtered(self, component):
        assert is_index_or_sentinel(component)

    @pytest.mark.parametrize("component", [
        "name", "", "1a", "0x1", "##", " 1",
        "9223372036854775808", "-9223372036854775809", "99999999999999999999",
        pytest.param("1" * 5000, id="5000-digits"),
    ])
    def test_kept(self, component):
        assert not is_index_or_sentinel(component)


class TestReferenceCollector:

    def test_accessor_allow_list_is_fixed(self):
        assert ACCESSOR_NAMES == {'HasChange', 'HasChanges', 'Get', 'Set', 'GetOk', 'GetChange'}
        assert MULTI_ARGUMENT_ACCESSORS == {'HasChanges'}

    def test_split_components_share_the_literal_position(self):
        occurrences = collect(parse_snippet(go_func('\td.Get("block.0.inner")')))
        expected = Position(file_path='main.go', line=4, column=8)
        assert occurrences == {"block": [expected], "inner": [expected]}

    def test_count_sentinel_dropped(self):
        assert set(collect(parse_snippet(go_func('\td.Get("count.#")')))) == {"count"}

    def test_multi_argument_accessor_checks_every_argument(self):
        occurrences = collect(parse_snippet(go_func('\td.HasChanges("a", "b", "c")')))
        assert set(occurrences) == {"a", "b", "c"}

    def test_single_argument_accessor_checks_only_first(self):
        occurrences = collect(parse_snippet(go_func('\td.Set("name", "other")')))
        assert set(occurrences) == {"name"}

    def test_single_argument_accessor_with_dynamic_first_argument(self):
        occurrences = collect(parse_snippet(go_func('\td.Set(field, "other")')))
        assert occurrences == {}

    def test_dynamic_argument_is_skipped(self):
        assert collect(parse_snippet(go_func('\td.HasChange(someVariable)'))) == {}

    def test_unknown_function_is_ignored(self):
        assert collect(parse_snippet(go_func('\td.Lookup("name")'))) == {}

    def test_repeated_references_keep_every_position(self):
        source = go_func('\td.Get("name")\n\td.HasChange("name")')
        positions = collect(parse_snippet(source))["name"]
        assert [p.line for p in positions] == [4, 5]

    def test_python_positions(self):
        occurrences = collect(parse_snippet('d.HasChange("nmae")\n', language='python'))
        assert occurrences == {"nmae": [Position(file_path='main.py', line=1, column=13)]}
