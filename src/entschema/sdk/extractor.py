"""Static hint extraction from engine C++ source.

One source unit at a time, produces:

- SourceHints from key/value deserialization methods: every
  ``if (FStrEq(szKeyName, "key")) { ... }`` branch inside ``Class::KeyValue``
  is scanned for known conversion calls. Every matching conversion yields its
  own hint; a branch matching several conversions yields several hints.
- SourceHints from data-description tables
  (``BEGIN_DATADESC(Class) ... DEFINE_KEYFIELD(member, FIELD_x, "key") ... END_DATADESC``).
- InheritEdges from class/struct declarations with a base-class clause.
- EntityLinks from ``LINK_ENTITY_TO_CLASS(entity, Class)``.

Only local structural matches are used; there is no control-flow analysis.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from entschema.config.models import SdkConfig
from entschema.inference.types import SemanticType
from entschema.sdk.models import EntityLink, InheritEdge, SourceHint
from entschema.sdk.parser import CppParser, node_text

if TYPE_CHECKING:
    from tree_sitter import Node

KEY_VALUE_QUERY = """
(function_definition
    declarator: (function_declarator
        declarator: (qualified_identifier
            scope: (namespace_identifier) @class_name
            name: (identifier) @method_name))
    body: (compound_statement) @body)
"""

FIELD_COMPARISON_QUERY = """
(if_statement
    condition: (_ value: [
        (binary_expression left: (call_expression
            function: (identifier) @cmp_fn
            arguments: (argument_list) @cmp_args))
        (call_expression
            function: (identifier) @cmp_fn
            arguments: (argument_list) @cmp_args)
    ])
    consequence: (_) @consequence)
"""

INHERIT_QUERY = """
(class_specifier
    name: (_) @name
    (base_class_clause [(type_identifier) (qualified_identifier) (template_type)] @base))
(struct_specifier
    name: (_) @name
    (base_class_clause [(type_identifier) (qualified_identifier) (template_type)] @base))
"""

# Literal snippets in a key branch and the type they convert to. Order matters
# only for the order hints are emitted in.
CONVERSION_PATTERNS: tuple[tuple[str, SemanticType], ...] = (
    ("if (val)", SemanticType.BOOL),
    ("atoi", SemanticType.I32),
    ("atof", SemanticType.F32),
    ("UTIL_StringToColor32", SemanticType.COLOR),
    ("UTIL_StringToVector", SemanticType.VECTOR),
    ("AllocPooledString", SemanticType.STRING),
)

# Data-description field tags. Unlisted tags are skipped.
FIELD_TYPE_TAGS: dict[str, SemanticType] = {
    "FIELD_FLOAT": SemanticType.F32,
    "FIELD_STRING": SemanticType.STRING,
    "FIELD_BOOLEAN": SemanticType.BOOL,
    "FIELD_INTEGER": SemanticType.I32,
    "FIELD_COLOR32": SemanticType.COLOR,
    "FIELD_VECTOR": SemanticType.VECTOR,
}

_DATADESC_BLOCK_RE = re.compile(
    r"BEGIN_DATADESC(?:_NO_BASE)?\(\s*([^)]*?)\s*\)(.*?)END_DATADESC",
    re.DOTALL,
)
_KEYFIELD_RE = re.compile(r'DEFINE_KEYFIELD\(\s*[^,()]*?\s*,\s*(\w+)\s*,\s*"([^"]*)"')
_LINK_RE = re.compile(r"LINK_ENTITY_TO_CLASS\(\s*(\w+)\s*,\s*(\w+)\s*\)")


@dataclass
class ExtractionResult:
    hints: list[SourceHint] = field(default_factory=list)
    inherits: list[InheritEdge] = field(default_factory=list)
    links: list[EntityLink] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not (self.hints or self.inherits or self.links)


@dataclass(frozen=True, slots=True)
class KeyValueMethod:
    class_name: str
    body: Node


@dataclass(frozen=True, slots=True)
class FieldComparison:
    key: str
    consequence: Node


class HintExtractor:
    """Runs every structural matcher over one source unit."""

    def __init__(self, config: SdkConfig | None = None, parser: CppParser | None = None) -> None:
        self._config = config or SdkConfig()
        self._parser = parser or CppParser()

    def extract(self, code: str) -> ExtractionResult:
        tree = self._parser.parse(code)
        root = tree.root_node

        hints: list[SourceHint] = []
        for method in self.find_key_value_methods(root):
            for comparison in self.find_field_comparisons(method.body):
                hints.extend(
                    classify_conversions(method.class_name, comparison.key, comparison.consequence)
                )
        hints.extend(find_data_desc_fields(code))

        return ExtractionResult(
            hints=hints,
            inherits=self.find_inherits(root),
            links=find_entity_links(code),
        )

    def find_key_value_methods(self, root: Node) -> list[KeyValueMethod]:
        """Out-of-line definitions of ``Class::<key_value_method>``."""
        methods = []
        for match in self._parser.run_query(KEY_VALUE_QUERY, root):
            if node_text(match["method_name"]) == self._config.key_value_method:
                methods.append(KeyValueMethod(node_text(match["class_name"]), match["body"]))
        return methods

    def find_field_comparisons(self, body: Node) -> list[FieldComparison]:
        """``if`` branches guarded by ``compare_fn(key_name, "literal")``."""
        comparisons = []
        for match in self._parser.run_query(FIELD_COMPARISON_QUERY, body):
            if node_text(match["cmp_fn"]) != self._config.compare_function:
                continue
            args = match["cmp_args"]
            if args.named_child_count < 2:
                continue
            key_arg, literal = args.named_child(0), args.named_child(1)
            if key_arg is None or literal is None:
                continue
            if node_text(key_arg) != self._config.key_name_identifier:
                continue
            if literal.type != "string_literal":
                continue
            comparisons.append(FieldComparison(node_text(literal).strip('"'), match["consequence"]))
        return comparisons

    def find_inherits(self, root: Node) -> list[InheritEdge]:
        """Base classes per declared class, merged by name in source order."""
        pairs = sorted(
            (
                (match["name"].start_byte, match["base"].start_byte, match["name"], match["base"])
                for match in self._parser.run_query(INHERIT_QUERY, root)
            ),
            key=lambda pair: (pair[0], pair[1]),
        )
        bases: dict[str, list[str]] = {}
        for _, _, name_node, base_node in pairs:
            bases.setdefault(node_text(name_node), []).append(node_text(base_node))
        return [InheritEdge(name=name, inherits=tuple(items)) for name, items in bases.items()]


def classify_conversions(class_name: str, key: str, consequence: Node) -> list[SourceHint]:
    """One hint per conversion pattern found in the branch text."""
    text = node_text(consequence)
    return [
        SourceHint(class_name=class_name, property_name=key, semantic_type=semantic_type)
        for pattern, semantic_type in CONVERSION_PATTERNS
        if pattern in text
    ]


def find_data_desc_fields(code: str) -> list[SourceHint]:
    hints = []
    for block in _DATADESC_BLOCK_RE.finditer(code):
        class_name, body = block.group(1), block.group(2)
        for field_match in _KEYFIELD_RE.finditer(body):
            tag, key = field_match.groups()
            semantic_type = FIELD_TYPE_TAGS.get(tag)
            if semantic_type is None:
                continue
            hints.append(
                SourceHint(class_name=class_name, property_name=key, semantic_type=semantic_type)
            )
    return hints


def find_entity_links(code: str) -> list[EntityLink]:
    return [
        EntityLink(entity=entity, class_name=class_name)
        for entity, class_name in _LINK_RE.findall(code)
    ]
