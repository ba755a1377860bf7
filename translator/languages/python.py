"""TypeScript syntax rendered as idiomatic Python."""

from __future__ import annotations

import logging
import re
from typing import Sequence

from pydantic import BaseModel, ConfigDict

from .. import constants
from ..dispatcher import AstContext
from ..layout import (
    convert_statements,
    preserve_separating_newlines,
    statement_separator,
    visible_nodes,
)
from ..otree import NO_SYNTAX, OTree
from ..syntax import SyntaxKind, SyntaxNode
from ..trivia import TriviaSpan, contains_newline, strip_comment_markers
from ..type_oracle import TypeInfo
from .default import DefaultVisitor, double_quoted, is_block_comment, string_value

logger = logging.getLogger(__name__)

BUILTIN_FUNCTIONS: dict[str, str] = {
    "console.log": "print",
    "console.error": "sys.stderr.write",
    "Math.random": "random.random",
}

BINARY_OPERATORS: dict[str, str] = {
    "===": "==",
    "!==": "!=",
    "&&": "and",
    "||": "or",
}

UNARY_OPERATORS: dict[str, str] = {
    "!": "not ",
}

LITERALS: dict[str, str] = {
    "true": "True",
    "false": "False",
    "null": "None",
    "undefined": "None",
}

_DEFINITION_KINDS = frozenset(
    {SyntaxKind.FUNCTION_DECLARATION, SyntaxKind.CLASS_DECLARATION}
)

_CAMEL_HUMP = re.compile(r"[^A-Z][A-Z]")


def mangle_identifier(original: str) -> str:
    """camelCase → snake_case; names starting with an uppercase letter are left alone."""
    if original[:1].isupper():
        # Probably a class
        return original
    return _CAMEL_HUMP.sub(lambda m: m.group(0)[0] + "_" + m.group(0)[1].lower(), original)


def convert_module_reference(ref: str) -> str:
    return re.sub(r"^@", "", ref).replace("/", ".").replace("-", "_")


class PythonContext(BaseModel):
    """Traversal-local state of the Python visitor.

    Only the fields explicitly given to an update override the enclosing
    context when merged.
    """

    model_config = ConfigDict(frozen=True)

    in_class: bool = False
    method_name: str | None = None
    exploded_var: str | None = None
    exploded_type: str | None = None
    expected_type: str | None = None


class PythonVisitor(DefaultVisitor[PythonContext]):
    STATEMENT_TERMINATOR = ""

    default_context = PythonContext()

    def merge_context(self, old: PythonContext, update: PythonContext) -> PythonContext:
        return old.model_copy(
            update={name: getattr(update, name) for name in update.model_fields_set}
        )

    def comment_range(self, span: TriviaSpan, context: AstContext) -> OTree:
        comment_text = strip_comment_markers(
            context.text_at(span.start, span.end), is_block_comment(span)
        )
        return OTree([f"# {line}".rstrip() + "\n" for line in comment_text.split("\n")])

    # ── statements ───────────────────────────────────────────────

    def program(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            [], convert_statements(node.children, context, separator_for=_top_level_separator)
        )

    def block(self, node: SyntaxNode, context: AstContext) -> OTree:
        children = convert_statements(node.children, context) or [OTree(["pass"])]
        return OTree(
            [],
            children,
            newline=True,
            indent=constants.BLOCK_INDENT,
            attach_comment=True,
        )

    def import_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        source = node.field("source")
        clause = node.first_child("import_clause")
        if source is None or clause is None:
            return self.not_implemented(node, context)
        module_name = convert_module_reference(string_value(context.text_of(source)))

        namespace = clause.first_child("namespace_import")
        if namespace is not None and namespace.children:
            alias = mangle_identifier(context.text_of(namespace.children[0]))
            return OTree([f"import {module_name} as {alias}"], attach_comment=True)

        named = clause.first_child("named_imports")
        if named is not None:
            imports = []
            for specifier in named.children_of("import_specifier"):
                name = mangle_identifier(context.text_of(specifier.field("name")))
                alias = specifier.field("alias")
                imports.append(
                    f"{name} as {mangle_identifier(context.text_of(alias))}" if alias else name
                )
            return OTree(
                [f"from {module_name} import {', '.join(imports)}"], attach_comment=True
            )

        return self.not_implemented(node, context)

    def if_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        if_stmt = OTree(
            ["if ", self._condition(node.field("condition"), context), ":"],
            [self._suite(node.field("consequence"), context)],
            attach_comment=True,
        )
        alternative = node.field("alternative")
        if alternative is None:
            return if_stmt
        return OTree(
            [], [if_stmt, context.convert(alternative)], separator="\n", attach_comment=True
        )

    def else_clause(self, node: SyntaxNode, context: AstContext) -> OTree:
        statement = node.children[0] if node.children else None
        if statement is not None and statement.kind == SyntaxKind.IF_STATEMENT:
            return OTree(["el", context.convert(statement)])
        return OTree(["else:"], [self._suite(statement, context)], attach_comment=True)

    def for_of_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        left = node.field("left")
        variable = mangle_identifier(context.text_of(left)) if left is not None else "???"
        return OTree(
            ["for ", variable, " in ", context.convert(node.field("right")), ":"],
            [self._suite(node.field("body"), context)],
            attach_comment=True,
        )

    def variable_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([], context.convert_all(node.children), separator="\n", attach_comment=True)

    def variable_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        value = node.field("value")
        type_node = node.field("type")
        declared = context.type_of_type(type_node) if type_node is not None else None
        update = PythonContext(
            expected_type=declared.name if declared is not None and declared.is_struct else None
        )
        return OTree(
            [
                context.convert(node.field("name")),
                " = ",
                context.convert(value, update) if value is not None else "None",
            ],
            attach_comment=True,
        )

    # ── declarations ─────────────────────────────────────────────

    def function_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self._function_like(node, context)

    def method_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self._function_like(node, context, in_class=True)

    def parameter_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return context.convert(node.field("pattern"))

    def class_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        heritage: list[OTree] = []
        for clause in node.children_of("class_heritage"):
            for extends in clause.children_of("extends_clause"):
                heritage.extend(context.convert_all(extends.children))

        body = node.field("body")
        members = [
            m
            for m in context.convert_all(
                body.children if body is not None else [], PythonContext(in_class=True)
            )
            if not m.is_empty
        ]
        if not members:
            members = [OTree(["pass"])]

        name = node.field("name")
        return OTree(
            [
                "class ",
                context.text_of(name) if name is not None else "???",
                OTree(["("], heritage, separator=", ", suffix=")") if heritage else None,
                ":",
            ],
            members,
            separator="\n\n",
            newline=True,
            indent=constants.BLOCK_INDENT,
            attach_comment=True,
        )

    def property_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return NO_SYNTAX

    def interface_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        # Struct shapes are known to the type oracle; nothing is rendered
        return NO_SYNTAX

    def property_signature(self, node: SyntaxNode, context: AstContext) -> OTree:
        return NO_SYNTAX

    # ── expressions ──────────────────────────────────────────────

    def call_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        function = node.field("function")
        method = context.current_context.method_name
        if function is not None and function.kind == SyntaxKind.SUPER and method:
            expression: OTree | str = f"super().{method}"
        else:
            expression = context.convert(function)

        return OTree(
            [
                expression,
                "(",
                self._convert_call_arguments(node.field("arguments"), function, context),
                ")",
            ],
            attach_comment=True,
        )

    def new_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        constructor = node.field("constructor")
        return OTree(
            [
                context.convert(constructor),
                "(",
                self._convert_call_arguments(node.field("arguments"), constructor, context),
                ")",
            ],
            attach_comment=True,
        )

    def property_access_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        full_text = context.text_of(node)
        if full_text in BUILTIN_FUNCTIONS:
            return OTree([BUILTIN_FUNCTIONS[full_text]])

        # Inside a function whose struct argument was exploded into keyword
        # arguments, `props.field` is just `field`.
        exploded = context.current_context.exploded_var
        obj = node.field("object")
        if exploded and obj is not None and context.text_of(obj) == exploded:
            return context.convert(node.field("property"))

        return super().property_access_expression(node, context)

    def binary_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        operator = node.field("operator")
        op_text = context.text_of(operator) if operator is not None else "?"
        return OTree(
            [
                context.convert(node.field("left")),
                " ",
                BINARY_OPERATORS.get(op_text, op_text),
                " ",
                context.convert(node.field("right")),
            ]
        )

    def unary_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        operator = node.field("operator")
        op_text = context.text_of(operator) if operator is not None else ""
        return OTree([UNARY_OPERATORS.get(op_text, op_text), context.convert(node.field("argument"))])

    def object_literal_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        expected = context.current_context.expected_type
        struct = context.type_oracle.lookup(expected) if expected else None
        properties = list(node.children)

        if struct is not None and struct.is_struct:
            return OTree(
                [f"{struct.name}("],
                [self._keyword_arguments(properties, struct, context, leading=node, from_start=True)],
                indent=constants.BLOCK_INDENT,
                suffix=")",
                attach_comment=True,
            )

        return OTree(
            ["{"],
            [
                _preserve_newlines(
                    context.convert_all(properties, PythonContext(expected_type=None)),
                    properties,
                    context,
                    leading=node,
                    from_start=True,
                )
            ],
            separator=", ",
            indent=constants.BLOCK_INDENT,
            suffix="}",
            attach_comment=True,
        )

    def property_assignment(self, node: SyntaxNode, context: AstContext) -> OTree:
        key = double_quoted(_property_name(node.field("key"), context))
        return OTree([key, ": ", context.convert(node.field("value"))], attach_comment=True)

    def shorthand_property_assignment(self, node: SyntaxNode, context: AstContext) -> OTree:
        name = context.text_of(node)
        return OTree([double_quoted(name), ": ", mangle_identifier(name)], attach_comment=True)

    def template_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        parts: list[OTree | str] = ['f"']
        position = node.start + 1
        for substitution in node.children_of("template_substitution"):
            literal = context.text_at(position, substitution.start)
            parts.append(literal.replace('"', '\\"').replace("{", "{{").replace("}", "}}"))
            parts.extend(["{", *context.convert_all(substitution.children), "}"])
            position = substitution.end
        tail = context.text_at(position, node.end - 1)
        parts.append(tail.replace('"', '\\"').replace("{", "{{").replace("}", "}}"))
        parts.append('"')
        return OTree(parts)

    # ── leaves ───────────────────────────────────────────────────

    def literal(self, node: SyntaxNode, context: AstContext) -> OTree:
        text = context.text_of(node)
        return OTree([LITERALS.get(text, text)])

    def keyword(self, node: SyntaxNode, context: AstContext) -> OTree:
        if node.kind == SyntaxKind.THIS:
            return OTree(["self"])
        return OTree(["super()"])

    def identifier(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([mangle_identifier(context.text_of(node))])

    # ── helpers ──────────────────────────────────────────────────

    def _function_like(self, node: SyntaxNode, context: AstContext, in_class: bool = False) -> OTree:
        name_node = node.field("name")
        name_text = context.text_of(name_node) if name_node is not None else "???"
        is_constructor = in_class and name_text == "constructor"
        method_name = "__init__" if is_constructor else mangle_identifier(name_text)

        params = list(node.field("parameters").children) if node.field("parameters") else []
        param_decls, exploded_var, exploded_type = self._convert_parameters(params, context)

        body_context = PythonContext(
            in_class=False,
            method_name=method_name,
            exploded_var=exploded_var,
            exploded_type=exploded_type,
        )
        return OTree(
            [
                "def ",
                method_name,
                "(",
                OTree([], ["self" if in_class else None, *param_decls], separator=", "),
                "):",
            ],
            [context.convert(node.field("body"), body_context)],
            attach_comment=True,
        )

    def _convert_parameters(
        self, params: Sequence[SyntaxNode], context: AstContext
    ) -> tuple[list[OTree | str], str | None, str | None]:
        """Convert parameters; a struct-typed last parameter becomes keyword-only arguments."""
        if not params:
            return [], None, None
        converted: list[OTree | str] = list(context.convert_all(params))

        last = params[-1]
        type_node = last.field("type")
        struct = context.type_of_type(type_node) if type_node is not None else None
        if struct is None or not struct.is_struct:
            return converted, None, None

        converted.pop()
        converted.append("*")
        converted.extend(mangle_identifier(p) for p in struct.properties)
        pattern = last.field("pattern")
        variable = context.text_of(pattern) if pattern is not None else None
        logger.debug("Exploding struct parameter %s: %s", variable, struct.name)
        return converted, variable, struct.name

    def _convert_call_arguments(
        self, args_node: SyntaxNode | None, callee: SyntaxNode | None, context: AstContext
    ) -> OTree:
        """Convert call arguments.

        Hidden arguments are dropped. A trailing object literal becomes
        keyword arguments. A trailing struct-typed variable is passed on
        field by field.
        """
        if args_node is None:
            return NO_SYNTAX
        args = visible_nodes(args_node.children, context)
        last = args[-1] if args else None
        positional = args[:-1] if last is not None and last.kind == SyntaxKind.OBJECT else args
        converted: list[OTree | str] = list(
            context.convert_all(positional, PythonContext(expected_type=None))
        )

        if last is not None and last.kind == SyntaxKind.OBJECT:
            struct = self._struct_of_last_parameter(callee, context)
            converted.append(
                self._keyword_arguments(
                    list(last.children), struct, context, leading=last, from_start=True
                )
            )

        if last is not None and last.kind == SyntaxKind.IDENTIFIER:
            struct = self._struct_of_variable(last, context)
            if struct is not None:
                # Fields of an exploded parameter are plain local names
                variable = context.text_of(last)
                owner = (
                    ""
                    if variable == context.current_context.exploded_var
                    else mangle_identifier(variable) + "."
                )
                converted[-1] = OTree(
                    [],
                    [
                        OTree([mangle_identifier(p), "=", owner, mangle_identifier(p)])
                        for p in struct.properties
                    ],
                    separator=", ",
                )

        return OTree(
            [],
            [OTree([], preserve_separating_newlines(converted, args, context), separator=", ")],
            separator=", ",
            indent=constants.BLOCK_INDENT,
        )

    def _keyword_arguments(
        self,
        properties: list[SyntaxNode],
        struct: TypeInfo | None,
        context: AstContext,
        leading: SyntaxNode | None,
        from_start: bool = False,
    ) -> OTree:
        property_types = struct.property_types if struct is not None else {}
        rendered: list[OTree | str] = []
        for prop in properties:
            if prop.kind == SyntaxKind.PAIR:
                name = _property_name(prop.field("key"), context)
                value = context.convert(
                    prop.field("value"),
                    PythonContext(expected_type=property_types.get(name) or None),
                )
                rendered.append(
                    context.attach_leading_trivia(
                        prop, OTree([mangle_identifier(name), "=", value])
                    )
                )
            elif prop.kind == SyntaxKind.SHORTHAND_PROPERTY_IDENTIFIER:
                name = mangle_identifier(context.text_of(prop))
                rendered.append(OTree([name, "=", name]))
            elif prop.kind == SyntaxKind.SPREAD_ELEMENT:
                rendered.append(OTree(["**", *context.convert_all(prop.children)]))
            else:
                rendered.append(context.convert(prop))
        return _preserve_newlines(rendered, properties, context, leading, from_start)

    def _struct_of_variable(self, node: SyntaxNode, context: AstContext) -> TypeInfo | None:
        current = context.current_context
        if current.exploded_var and context.text_of(node) == current.exploded_var:
            struct = context.type_oracle.lookup(current.exploded_type or "")
        else:
            struct = context.type_of_expression(node)
        return struct if struct is not None and struct.is_struct else None

    def _struct_of_last_parameter(
        self, callee: SyntaxNode | None, context: AstContext
    ) -> TypeInfo | None:
        if callee is None or callee.kind != SyntaxKind.IDENTIFIER:
            return None
        parameter_types = context.type_oracle.parameter_types(context.text_of(callee))
        if not parameter_types:
            return None
        return context.type_oracle.lookup(parameter_types[-1])

    def _condition(self, condition: SyntaxNode | None, context: AstContext) -> OTree:
        if condition is not None and condition.kind == SyntaxKind.PARENTHESIZED_EXPRESSION:
            return context.convert(condition.children[0]) if condition.children else NO_SYNTAX
        return context.convert(condition)

    def _suite(self, statement: SyntaxNode | None, context: AstContext) -> OTree:
        """Indented body for a block or a single bare statement."""
        if statement is not None and statement.kind == SyntaxKind.STATEMENT_BLOCK:
            return context.convert(statement)
        converted = context.convert(statement)
        return OTree(
            [],
            [converted if not converted.is_empty else OTree(["pass"])],
            newline=True,
            indent=constants.BLOCK_INDENT,
        )


def _preserve_newlines(
    elements: list[OTree | str],
    nodes: Sequence[SyntaxNode],
    context: AstContext,
    leading: SyntaxNode | None = None,
    from_start: bool = False,
) -> OTree:
    """Keep the line breaks of the source between *elements*."""
    leading_newline = False
    if leading is not None and nodes:
        between = context.text_from_to if from_start else context.text_between
        leading_newline = contains_newline(between(leading, nodes[0]))

    return OTree(
        ["\n" if leading_newline else ""],
        preserve_separating_newlines(elements, nodes, context),
        separator=", ",
    )


def _top_level_separator(previous: SyntaxNode, node: SyntaxNode, blank_lines: int) -> str:
    if previous.kind in _DEFINITION_KINDS or node.kind in _DEFINITION_KINDS:
        return "\n\n\n"
    return statement_separator(blank_lines)


def _property_name(key: SyntaxNode | None, context: AstContext) -> str:
    if key is None:
        return "???"
    if key.kind == SyntaxKind.STRING:
        return string_value(context.text_of(key))
    return context.text_of(key)
