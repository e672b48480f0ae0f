"""Tests for declared schema field collection."""
import pytest

from schemafield.analyzer.declarations import (
    DeclarationCollector,
    get_composite_literal_key,
    get_string_literal_in_assignment,
)
from schemafield.analyzer.grammar import get_grammar
from conftest import go_func, parse_snippet, walk


def composite_keys(parsed):
    grammar = get_grammar(parsed.language)
    keys = []
    for node in walk(parsed.tree.root_node):
        key = get_composite_literal_key(node, grammar, parsed.source)
        if key is not None:
            keys.append(key)
    return keys


def assignment_keys(parsed):
    grammar = get_grammar(parsed.language)
    keys = []
    for node in walk(parsed.tree.root_node):
        key = get_string_literal_in_assignment(node, grammar, parsed.source)
        if key is not None:
            keys.append(key)
    return keys


def collect(parsed):
    collector = DeclarationCollector()
    grammar = get_grammar(parsed.language)
    for node in walk(parsed.tree.root_node):
        collector.visit(node, grammar, parsed.source)
    return collector.keys


class TestCompositeLiteralKey:
    """Keys of map / dict / object literals."""

    @pytest.mark.parametrize("literal, expected", [
        ('map[string]*pluginsdk.Schema{"name": {}}', ["name"]),
        ('map[string]*pluginsdk.Schema{"age": {}}', ["age"]),
        ('map[string]*pluginsdk.Schema{"": {}}', [""]),
    ])
    def test_go_map_literal(self, literal, expected):
        parsed = parse_snippet(f"package main\n\nvar s = {literal}\n")
        assert composite_keys(parsed) == expected

    def test_go_nested_schema(self):
        source = '''package main

var s = map[string]*schema.Schema{
	"network_rule": {
		Type: schema.TypeList,
		Elem: &schema.Resource{
			Schema: map[string]*schema.Schema{
				"port": {Type: schema.TypeInt},
			},
		},
	},
}
'''
        assert sorted(composite_keys(parse_snippet(source))) == ["network_rule", "port"]

    def test_go_struct_field_names_are_not_declarations(self):
        parsed = parse_snippet('package main\n\nvar s = schema.Schema{Type: schema.TypeString, Optional: true}\n')
        assert composite_keys(parsed) == []

    def test_python_dict(self):
        parsed = parse_snippet('SCHEMA = {"name": {"type": str}, key_var: 1}\n', language='python')
        assert sorted(composite_keys(parsed)) == ["name", "type"]

    @pytest.mark.parametrize("language", ['javascript', 'typescript'])
    def test_javascript_object_only_quoted_keys(self, language):
        parsed = parse_snippet('const schema = {"name": {}, unquoted: {}, \'tags\': {}};\n', language=language)
        assert sorted(composite_keys(parsed)) == ["name", "tags"]


class TestStringLiteralInAssignment:
    """collection["field"] = definition."""

    @pytest.mark.parametrize("statement, expected", [
        ('s["slice_service_type"] = &pluginsdk.Schema{}', ["slice_service_type"]),
        ('s["another_key"] = &pluginsdk.Schema{}', ["another_key"]),
    ])
    def test_go_indexed_assignment(self, statement, expected):
        assert assignment_keys(parse_snippet(go_func(f"\t{statement}"))) == expected

    def test_go_non_literal_index_is_ignored(self):
        assert assignment_keys(parse_snippet(go_func('\ts[key] = &pluginsdk.Schema{}'))) == []

    def test_go_plain_assignment_is_ignored(self):
        assert assignment_keys(parse_snippet(go_func('\tname = "value"'))) == []

    def test_go_first_literal_target_wins(self):
        parsed = parse_snippet(go_func('\ts[i], s["first"], s["second"] = a, b, c'))
        assert assignment_keys(parsed) == ["first"]

    def test_python_subscript_assignment(self):
        parsed = parse_snippet('schema["legacy_mode"] = {"type": bool}\n', language='python')
        assert assignment_keys(parsed) == ["legacy_mode"]

    def test_python_augmented_assignment(self):
        parsed = parse_snippet('counts["name"] += 1\n', language='python')
        assert assignment_keys(parsed) == ["name"]

    def test_python_tuple_targets(self):
        parsed = parse_snippet('schema["a"], other = x, y\n', language='python')
        assert assignment_keys(parsed) == ["a"]

    @pytest.mark.parametrize("language", ['javascript', 'typescript'])
    def test_javascript_subscript_assignment(self, language):
        parsed = parse_snippet('schema["legacy_mode"] = {};\n', language=language)
        assert assignment_keys(parsed) == ["legacy_mode"]


class TestDeclarationCollector:

    def test_collects_both_shapes_into_one_set(self):
        source = go_func('\ts := map[string]*schema.Schema{"name": {}, "tags": {}}\n'
                         '\ts["legacy_mode"] = &schema.Schema{}\n'
                         '\ts["name"] = &schema.Schema{}')
        assert collect(parse_snippet(source)) == {"name", "tags", "legacy_mode"}

    def test_nothing_declared(self):
        assert collect(parse_snippet(go_func('\td.Get("name")'))) == set()
