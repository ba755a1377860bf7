"""Type oracle — answers backend questions about declared types."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from .syntax import SourceFile, SyntaxKind, SyntaxNode

logger = logging.getLogger(__name__)


class TypeInfo(BaseModel):
    """What a backend may learn about a type: its name and, for structs, its fields."""

    name: str
    is_struct: bool = False
    properties: list[str] = Field(default_factory=list)
    property_types: dict[str, str] = Field(default_factory=dict)


class TypeOracle(ABC):
    @abstractmethod
    def type_of_expression(self, node: SyntaxNode) -> TypeInfo | None: ...

    @abstractmethod
    def type_of_type(self, node: SyntaxNode) -> TypeInfo | None: ...

    def lookup(self, name: str) -> TypeInfo | None:
        return None

    def parameter_types(self, function_name: str) -> list[str]:
        return []


class NullTypeOracle(TypeOracle):
    """Oracle for front-ends without type information."""

    def type_of_expression(self, node: SyntaxNode) -> TypeInfo | None:
        return None

    def type_of_type(self, node: SyntaxNode) -> TypeInfo | None:
        return None


def is_struct_interface(name: str) -> bool:
    """Interfaces named ``I...`` are behavioural; all others are data structs."""
    return not name.startswith("I")


class DeclarationTypeOracle(TypeOracle):
    """Oracle built from the declarations of a single TypeScript source file.

    Collects interfaces (with inherited properties), typed variables and
    parameters, and the parameter types of top-level functions.
    """

    def __init__(self, source_file: SourceFile):
        self._source_file = source_file
        self._interfaces: dict[str, dict[str, str]] = {}
        self._bases: dict[str, list[str]] = {}
        self._variables: dict[str, str] = {}
        self._functions: dict[str, list[str]] = {}

    @classmethod
    def from_tree(cls, source_file: SourceFile, root: SyntaxNode) -> DeclarationTypeOracle:
        oracle = cls(source_file)
        stack = [root]
        while stack:
            node = stack.pop()
            oracle._collect(node)
            stack.extend(reversed(node.children))
        logger.debug(
            "Type oracle collected %d interfaces, %d typed variables",
            len(oracle._interfaces),
            len(oracle._variables),
        )
        return oracle

    # ── queries ──────────────────────────────────────────────────

    def type_of_expression(self, node: SyntaxNode) -> TypeInfo | None:
        if node.kind != SyntaxKind.IDENTIFIER:
            return None
        type_name = self._variables.get(self._text(node))
        return self.lookup(type_name) if type_name else None

    def type_of_type(self, node: SyntaxNode) -> TypeInfo | None:
        return self.lookup(self._type_name(node))

    def lookup(self, name: str) -> TypeInfo | None:
        if not name:
            return None
        if name not in self._interfaces:
            return TypeInfo(name=name)
        property_types = self._all_properties(name, set())
        return TypeInfo(
            name=name,
            is_struct=is_struct_interface(name),
            properties=list(property_types),
            property_types=property_types,
        )

    def parameter_types(self, function_name: str) -> list[str]:
        return list(self._functions.get(function_name, []))

    # ── collection ───────────────────────────────────────────────

    def _collect(self, node: SyntaxNode) -> None:
        if node.kind == SyntaxKind.INTERFACE_DECLARATION:
            self._collect_interface(node)
        elif node.kind == SyntaxKind.VARIABLE_DECLARATOR:
            self._collect_typed_name(node.field("name"), node.field("type"))
        elif node.kind in (SyntaxKind.REQUIRED_PARAMETER, SyntaxKind.OPTIONAL_PARAMETER):
            self._collect_typed_name(node.field("pattern"), node.field("type"))
        elif node.kind == SyntaxKind.FUNCTION_DECLARATION:
            name = node.field("name")
            params = node.field("parameters")
            if name is not None and params is not None:
                self._functions[self._text(name)] = [
                    self._type_name(p.field("type")) for p in params.children
                ]

    def _collect_interface(self, node: SyntaxNode) -> None:
        name = node.field("name")
        if name is None:
            return
        interface = self._text(name)
        properties: dict[str, str] = {}
        body = node.field("body")
        for member in body.children if body is not None else []:
            if member.kind != SyntaxKind.PROPERTY_SIGNATURE:
                continue
            prop_name = member.field("name")
            if prop_name is not None:
                properties[self._text(prop_name)] = self._type_name(member.field("type"))
        self._interfaces[interface] = properties

        bases: list[str] = []
        for clause in node.children_of("extends_type_clause"):
            bases.extend(self._text(t) for t in clause.children)
        self._bases[interface] = bases

    def _collect_typed_name(self, name: SyntaxNode | None, type_node: SyntaxNode | None) -> None:
        if name is None or type_node is None or name.kind != SyntaxKind.IDENTIFIER:
            return
        self._variables[self._text(name)] = self._type_name(type_node)

    def _all_properties(self, name: str, seen: set[str]) -> dict[str, str]:
        if name in seen:
            return {}
        seen.add(name)
        merged: dict[str, str] = {}
        for base in self._bases.get(name, []):
            merged.update(self._all_properties(base, seen))
        merged.update(self._interfaces.get(name, {}))
        return merged

    # ── helpers ──────────────────────────────────────────────────

    def _text(self, node: SyntaxNode) -> str:
        return self._source_file.text_at(node.start, node.end)

    def _type_name(self, node: SyntaxNode | None) -> str:
        if node is None:
            return ""
        return self._text(node).lstrip("?:").strip()
