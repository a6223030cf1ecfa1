"""Parser adapter: esprima's generic node objects to a small closed tree.

Only the node kinds the rubric checks inspect get their own variant;
everything else becomes ``Other`` carrying esprima's node type name.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import esprima
from esprima.error_handler import Error as EsprimaError

from jsgrade.errors import SubmissionParseError


@dataclass(frozen=True)
class Other:
    kind: str


@dataclass(frozen=True)
class MemberExpression:
    property_name: str | None
    computed: bool = False


@dataclass(frozen=True)
class NewExpression:
    callee_name: str | None


@dataclass(frozen=True)
class CallExpression:
    callee: Expression


Expression = MemberExpression | NewExpression | CallExpression | Other


@dataclass(frozen=True)
class Declarator:
    name: str | None
    init: Expression | None


@dataclass(frozen=True)
class VariableDeclaration:
    kind: str
    declarators: tuple[Declarator, ...]


@dataclass(frozen=True)
class MethodMember:
    name: str | None
    kind: str
    static: bool = False


@dataclass(frozen=True)
class ClassDeclaration:
    name: str | None
    members: tuple[MethodMember, ...]

    def has_method(self, name: str) -> bool:
        return any(m.name == name and m.kind == "method" for m in self.members)


@dataclass(frozen=True)
class ExpressionStatement:
    expression: Expression


Statement = ClassDeclaration | VariableDeclaration | ExpressionStatement | Other


@dataclass(frozen=True)
class Program:
    body: tuple[Statement, ...]

    def classes(self) -> list[ClassDeclaration]:
        return [node for node in self.body if isinstance(node, ClassDeclaration)]

    def find_class(self, name: str) -> ClassDeclaration | None:
        for node in self.classes():
            if node.name == name:
                return node
        return None


def _identifier_name(node: Any) -> str | None:
    if node is None or getattr(node, "type", None) != "Identifier":
        return None
    return node.name


def _key_name(node: Any, computed: bool) -> str | None:
    """Static name of a property or method key.

    String literal keys name the member whether written as ``'greet'`` or
    ``["greet"]``, on both the declaring and the calling side. Other computed
    keys have no static name.
    """
    if getattr(node, "type", None) == "Literal":
        return node.value if isinstance(node.value, str) else None
    if computed:
        return None
    return _identifier_name(node)


def _convert_expression(node: Any) -> Expression:
    kind = getattr(node, "type", None) or "Unknown"
    if kind == "MemberExpression":
        computed = bool(getattr(node, "computed", False))
        name = _key_name(getattr(node, "property", None), computed)
        return MemberExpression(property_name=name, computed=computed)
    if kind == "NewExpression":
        return NewExpression(callee_name=_identifier_name(getattr(node, "callee", None)))
    if kind == "CallExpression":
        return CallExpression(callee=_convert_expression(node.callee))
    return Other(kind=kind)


def _convert_member(node: Any) -> MethodMember:
    return MethodMember(
        name=_key_name(
            getattr(node, "key", None), bool(getattr(node, "computed", False))
        ),
        kind=getattr(node, "kind", None) or "method",
        static=bool(getattr(node, "static", False)),
    )


def _convert_statement(node: Any) -> Statement:
    kind = getattr(node, "type", None) or "Unknown"
    if kind == "ClassDeclaration":
        body = getattr(node, "body", None)
        members = tuple(
            _convert_member(m)
            for m in (getattr(body, "body", None) or [])
            if getattr(m, "type", None) == "MethodDefinition"
        )
        return ClassDeclaration(name=_identifier_name(node.id), members=members)
    if kind == "VariableDeclaration":
        declarators = []
        for decl in node.declarations or []:
            init = getattr(decl, "init", None)
            declarators.append(
                Declarator(
                    name=_identifier_name(getattr(decl, "id", None)),
                    init=_convert_expression(init) if init is not None else None,
                )
            )
        return VariableDeclaration(kind=node.kind, declarators=tuple(declarators))
    if kind == "ExpressionStatement":
        return ExpressionStatement(expression=_convert_expression(node.expression))
    return Other(kind=kind)


def parse_source(source: str, path: Path | None = None) -> Program:
    """Parse JavaScript source text as a script and convert its top level.

    Raises:
        SubmissionParseError: if esprima rejects the source or recurses
            past the interpreter limit on deeply nested input.
    """
    try:
        script = esprima.parseScript(source)
    except EsprimaError as e:
        raise SubmissionParseError(
            path or Path("<string>"),
            getattr(e, "description", None) or str(e),
            line=getattr(e, "lineNumber", None),
            column=getattr(e, "column", None),
        ) from e
    except RecursionError as e:
        raise SubmissionParseError(
            path or Path("<string>"), "source is nested too deeply to parse"
        ) from e

    try:
        return Program(body=tuple(_convert_statement(node) for node in script.body))
    except RecursionError as e:
        raise SubmissionParseError(
            path or Path("<string>"), "expression is nested too deeply to grade"
        ) from e
