"""Identifier normalization for the code generation backend's grammar.

Raw property keys and classnames come from hand-authored map data and may
contain dots, dashes, spaces, leading digits or reserved words. Every name
that has to change keeps its raw form so the backend can map it back.
"""

from __future__ import annotations

import keyword
import re
from collections.abc import Iterable

from entschema.config.models import IdentifierGrammar

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_INVALID_CHAR_RE = re.compile(r"[^A-Za-z0-9_]")
_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+|[A-Z]+")

RUST_KEYWORDS = frozenset(
    {
        # strict
        "as", "async", "await", "break", "const", "continue", "crate", "dyn",
        "else", "enum", "extern", "false", "fn", "for", "if", "impl", "in",
        "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
        "self", "Self", "static", "struct", "super", "trait", "true", "type",
        "unsafe", "use", "where", "while",
        # reserved
        "abstract", "become", "box", "do", "final", "gen", "macro", "override",
        "priv", "try", "typeof", "unsized", "virtual", "yield",
    }
)  # fmt: skip

# Keywords that cannot be written as raw identifiers.
RUST_NON_RAW = frozenset({"crate", "self", "Self", "super"})

PYTHON_KEYWORDS = frozenset(keyword.kwlist) | (frozenset(keyword.softkwlist) - {"_"})


def is_reserved(name: str, grammar: IdentifierGrammar) -> bool:
    if grammar == "rust":
        return name in RUST_KEYWORDS or name == "_"
    return name in PYTHON_KEYWORDS


def escape_reserved(name: str, grammar: IdentifierGrammar) -> str:
    if grammar == "rust" and name not in RUST_NON_RAW and name != "_":
        return f"r#{name}"
    return f"{name}_"


def is_valid_identifier(name: str, grammar: IdentifierGrammar) -> bool:
    return bool(_IDENT_RE.fullmatch(name)) and not is_reserved(name, grammar)


def sanitize(name: str, grammar: IdentifierGrammar) -> str:
    """Derive a valid identifier from ``name`` (returned as-is when already valid)."""
    if is_valid_identifier(name, grammar):
        return name
    if _IDENT_RE.fullmatch(name):
        return escape_reserved(name, grammar)

    ident = _INVALID_CHAR_RE.sub("_", name.replace(".", "_"))
    if not ident or ident[0].isdigit():
        ident = f"_{ident}"
    if is_reserved(ident, grammar):
        ident = escape_reserved(ident, grammar)
    return ident


def normalize_names(names: Iterable[str], grammar: IdentifierGrammar) -> dict[str, str]:
    """Map each raw name to a unique valid identifier.

    Names that are already valid keep themselves. Derived names are assigned
    in sorted raw-name order and get a numeric suffix on collision, so the
    mapping does not depend on input order.
    """
    raw = sorted(set(names))
    result: dict[str, str] = {}
    taken: set[str] = set()

    for name in raw:
        if is_valid_identifier(name, grammar):
            result[name] = name
            taken.add(name)

    for name in raw:
        if name in result:
            continue
        base = sanitize(name, grammar)
        candidate = base
        suffix = 2
        while candidate in taken:
            candidate = f"{base}_{suffix}"
            suffix += 1
        result[name] = candidate
        taken.add(candidate)

    return result


def upper_camel_case(name: str) -> str:
    """``info_player_start`` -> ``InfoPlayerStart``; ``XMLThing`` -> ``XmlThing``."""
    words = _WORD_RE.findall(name)
    ident = "".join(word[:1].upper() + word[1:].lower() for word in words)
    if not ident or ident[0].isdigit():
        ident = f"_{ident}"
    return ident


def class_identifiers(classnames: Iterable[str], grammar: IdentifierGrammar) -> dict[str, str]:
    """Unique upper-camel-case identifiers per classname, stable under input order."""
    result: dict[str, str] = {}
    taken: set[str] = set()
    for classname in sorted(set(classnames)):
        base = upper_camel_case(classname)
        if is_reserved(base, grammar):
            base = escape_reserved(base, grammar)
        candidate = base
        suffix = 2
        while candidate in taken:
            candidate = f"{base}{suffix}"
            suffix += 1
        result[classname] = candidate
        taken.add(candidate)
    return result
