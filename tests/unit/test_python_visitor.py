"""End-to-end tests: TypeScript snippets translated by PythonVisitor."""

from translator.api import translate
from translator.languages.python import (
    PythonContext,
    PythonVisitor,
    convert_module_reference,
    mangle_identifier,
)
from translator.options import TranslateOptions, TraversalStrategy


def _translate(source: str, **options) -> str:
    translation = translate(source, TranslateOptions(**options))
    return translation.text


class TestIdentifiers:
    def test_camel_case_becomes_snake_case(self):
        assert mangle_identifier("myVariableName") == "my_variable_name"

    def test_class_names_untouched(self):
        assert mangle_identifier("MyClass") == "MyClass"

    def test_module_reference(self):
        assert convert_module_reference("@aws-cdk/aws-s3") == "aws_cdk.aws_s3"


class TestContextMerge:
    def test_only_explicit_fields_override(self):
        visitor = PythonVisitor()
        old = PythonContext(in_class=True, method_name="run")
        merged = visitor.merge_context(old, PythonContext(expected_type="Props"))
        assert merged.in_class is True
        assert merged.method_name == "run"
        assert merged.expected_type == "Props"

    def test_explicit_none_clears(self):
        visitor = PythonVisitor()
        old = PythonContext(expected_type="Props")
        merged = visitor.merge_context(old, PythonContext(expected_type=None))
        assert merged.expected_type is None


class TestStatements:
    def test_builtin_call(self):
        assert _translate('console.log("hello");') == 'print("hello")'

    def test_variable_declaration(self):
        assert _translate("const myVar = true;") == "my_var = True"

    def test_blank_lines_preserved(self):
        source = "const a = 1;\n\n\nconst b = null;\n"
        assert _translate(source) == "a = 1\n\nb = None"

    def test_function_definition(self):
        source = "function foo(x: number) {\n  return x;\n}\nfoo(1);\n"
        assert _translate(source) == "def foo(x):\n    return x\n\n\nfoo(1)"

    def test_empty_function_body_is_pass(self):
        assert _translate("function noop() {\n}\n") == "def noop():\n    pass"

    def test_if_else(self):
        source = "if (a === b && !c) {\n  foo();\n} else {\n  bar();\n}\n"
        assert _translate(source) == "if a == b and not c:\n    foo()\nelse:\n    bar()"

    def test_for_of(self):
        source = "for (const item of items) {\n  console.log(item);\n}\n"
        assert _translate(source) == "for item in items:\n    print(item)"

    def test_namespace_import(self):
        source = "import * as cdk from '@aws-cdk/core';\n"
        assert _translate(source) == "import aws_cdk.core as cdk"

    def test_named_import(self):
        source = "import { Bucket, BucketProps as Props } from '@aws-cdk/aws-s3';\n"
        assert _translate(source) == "from aws_cdk.aws_s3 import Bucket, BucketProps as Props"

    def test_template_string(self):
        assert _translate("const s = `hi ${name}!`;") == 's = f"hi {name}!"'


class TestCalls:
    def test_object_literal_becomes_keyword_arguments(self):
        source = 'foo(25, { foo: 3, banana: "hello" });'
        assert _translate(source) == 'foo(25, foo=3, banana="hello")'

    def test_keyword_arguments_keep_line_breaks(self):
        source = 'foo(25, {\n  foo: 3,\n  banana: "hello",\n});'
        assert _translate(source) == 'foo(25,\n    foo=3,\n    banana="hello")'

    def test_new_expression(self):
        source = "new Bucket(this, 'MyBucket', { versioned: true });"
        assert _translate(source) == 'Bucket(self, "MyBucket", versioned=True)'

    def test_comments_between_keyword_arguments(self):
        source = 'foo(25, {\n  foo: 3,\n  // A comment\n  banana: "hello",\n});'
        assert _translate(source) == (
            'foo(25,\n    foo=3,\n    # A comment\n    banana="hello")'
        )

    def test_dictionary_when_not_an_argument(self):
        assert _translate("const x = { a: 1 };") == 'x = {"a": 1}'


class TestStructs:
    SOURCE = """\
interface GreeterProps {
  readonly greetingText: string;
}

function greet(props: GreeterProps) {
  console.log(props.greetingText);
}
"""

    def test_struct_parameter_exploded_into_keywords(self):
        assert _translate(self.SOURCE) == (
            "def greet(*, greeting_text):\n    print(greeting_text)"
        )

    def test_typed_variable_builds_struct(self):
        source = (
            "interface Props {\n  readonly size: number;\n}\n"
            "const p: Props = { size: 3 };\n"
        )
        assert _translate(source) == "p = Props(size=3)"

    def test_behavioural_interface_is_not_a_struct(self):
        source = (
            "interface IThing {\n  readonly size: number;\n}\n"
            "function f(t: IThing) {\n  return t;\n}\n"
        )
        assert _translate(source) == "def f(t):\n    return t"


class TestClasses:
    def test_class_with_constructor(self):
        source = (
            "class Foo extends Bar {\n"
            "  constructor(x: number) {\n"
            "    super(x);\n"
            "    this.doIt();\n"
            "  }\n"
            "}\n"
        )
        assert _translate(source) == (
            "class Foo(Bar):\n"
            "    def __init__(self, x):\n"
            "        super().__init__(x)\n"
            "        self.do_it()"
        )

    def test_empty_class_is_pass(self):
        assert _translate("class Empty {\n}\n") == "class Empty:\n    pass"

    def test_fields_are_dropped(self):
        source = "class A {\n  private readonly count = 0;\n}\n"
        assert _translate(source) == "class A:\n    pass"


class TestComments:
    def test_line_comment(self):
        source = "// Say hello\nconsole.log('hi');\n"
        assert _translate(source) == '# Say hello\nprint("hi")'

    def test_comment_not_duplicated(self):
        source = "// Only once\nfoo();\n"
        assert _translate(source).count("Only once") == 1

    def test_block_comment_lines(self):
        source = "/**\n * First\n * Second\n */\nfoo();\n"
        assert _translate(source) == "# First\n# Second\nfoo()"

    def test_comment_inside_block(self):
        source = "function f() {\n  // inside\n  g();\n}\n"
        assert _translate(source) == "def f():\n    # inside\n    g()"


class TestHiding:
    def test_hidden_statements_omitted(self):
        source = "foo(1);\nvoid 'hide';\nbar(2);\nvoid 'show';\nbaz(3);\n"
        assert _translate(source) == "foo(1)\nbaz(3)"

    def test_hiding_runs_to_end_of_block(self):
        source = "foo(1);\nvoid 'hide';\nbar(2);\n"
        assert _translate(source) == "foo(1)"

    def test_hidden_arguments_omitted(self):
        source = "foo(3, (void 'hide', 4), 5, 6, (void 'show', 7), 8);"
        translation = translate(source)
        assert translation.text == "foo(3, 8)"
        assert translation.diagnostics == []

    def test_hidden_arguments_omitted_by_default_target(self):
        source = "foo(3, (void 'hide', 4), 5, (void 'show', 7), 8);"
        translation = translate(source, TranslateOptions(target="default"))
        assert translation.text == "foo(3, 8);"
        assert translation.diagnostics == []

    def test_ordinary_parenthesized_argument_kept(self):
        assert _translate("foo((a), 2);") == "foo((a), 2)"


class TestFallback:
    def test_unsupported_construct_copied_and_reported(self):
        source = "while (x) {\n  x--;\n}\n"
        translation = translate(source)
        assert translation.text == source.rstrip("\n")
        assert translation.has_errors
        assert translation.diagnostics[0].node_kind == "while_statement"

    def test_worklist_strategy_renders_identically(self):
        source = "function foo(x: number) {\n  return x;\n}\nfoo(1);\n"
        assert _translate(source, strategy=TraversalStrategy.WORKLIST) == _translate(source)


class TestArrays:
    def test_inline_array(self):
        assert _translate("const xs = [1, 2, 3];") == "xs = [1, 2, 3]"

    def test_array_line_breaks_kept(self):
        source = "const xs = [\n  1,\n  2,\n];"
        assert _translate(source) == "xs = [\n    1,\n    2\n]"

    def test_empty_array(self):
        assert _translate("const xs = [];") == "xs = []"


class TestStructVariables:
    def test_struct_variable_argument_passed_by_field(self):
        source = (
            "interface Props {\n  readonly maxSize: number;\n}\n"
            "const p: Props = { maxSize: 3 };\n"
            "make(p);\n"
        )
        assert _translate(source) == "p = Props(max_size=3)\nmake(max_size=p.max_size)"

    def test_exploded_parameter_passed_on_by_name(self):
        source = (
            "interface Props {\n  readonly size: number;\n}\n"
            "function outer(props: Props) {\n  inner(props);\n}\n"
        )
        assert _translate(source) == "def outer(*, size):\n    inner(size=size)"

    def test_plain_variable_argument_untouched(self):
        assert _translate("const n: number = 1;\nmake(n);\n") == "n = 1\nmake(n)"
