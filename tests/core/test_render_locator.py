"""
Tests for the Render-Site Locator.

Covers every export shape, one-hop identifier resolution, the decorator-call
pattern and the explicit miss outcomes.
"""

import pytest

from page_injector.core.catalog import build_catalog
from page_injector.core.locator import classify_export, find_default_export, locate_render_site
from page_injector.core.tracer import TraceEventType, TraceLogger
from page_injector.enums import ExportShape, RenderSiteKind


@pytest.fixture
def locate(parse):
  def _locate(code: str, tracer=None):
    tree = parse(code)
    return tree, locate_render_site(tree, build_catalog(tree), tracer)

  return _locate


@pytest.mark.parametrize(
  "code, shape",
  [
    ("export default function Page() {}", ExportShape.FUNCTION_DECL),
    ("export default function () {}", ExportShape.FUNCTION_DECL),
    ("export default () => <View />", ExportShape.ARROW_FN),
    ("export default class Page {}", ExportShape.CLASS_DECL),
    ("export default class {}", ExportShape.CLASS_DECL),
    ("export default Page", ExportShape.IDENTIFIER),
    ("export default (Page)", ExportShape.IDENTIFIER),
    ("export default connect(mapState)(Page)", ExportShape.DECORATOR_CALL),
    ("export default withRouter(Page)", ExportShape.UNRECOGNIZED),
    ("export default { title: 'home' }", ExportShape.UNRECOGNIZED),
    ("const a = 1", ExportShape.UNRECOGNIZED),
  ],
)
def test_classify_export(parse, code, shape):
  tree = parse(code + "\n")
  assert classify_export(find_default_export(tree)) == shape


def test_function_declaration_return_markup(locate):
  tree, res = locate("export default function Page() { const a = 1; return <View /> }\n")
  assert res.shape == ExportShape.FUNCTION_DECL
  assert res.site.kind == RenderSiteKind.RETURN_MARKUP
  assert tree.text(res.site.node) == "<View />"
  assert res.component == "Page"


def test_parenthesized_return(locate):
  code = """
export default function Page() {
  return (
    <View>
      <Text>hi</Text>
    </View>
  )
}
"""
  tree, res = locate(code)
  assert res.site.kind == RenderSiteKind.RETURN_MARKUP
  assert tree.text(res.site.node).startswith("<View>")


def test_trailing_comment_is_not_the_last_statement(locate):
  _, res = locate("export default function Page() {\n  return <View />\n  // done\n}\n")
  assert res.found


def test_arrow_expression_body_is_tail_markup(locate):
  tree, res = locate("export default () => <View className='page' />\n")
  assert res.shape == ExportShape.ARROW_FN
  assert res.site.kind == RenderSiteKind.TAIL_MARKUP


def test_arrow_block_body(locate):
  _, res = locate("export default () => {\n  const [a] = useState(0)\n  return <View>{a}</View>\n}\n")
  assert res.site.kind == RenderSiteKind.RETURN_MARKUP


def test_factory_call_return(locate):
  tree, res = locate("export default function Page() { return React.createElement(View, null) }\n")
  assert res.site.kind == RenderSiteKind.RETURN_FACTORY
  assert tree.text(res.site.node) == "React.createElement(View, null)"


def test_plain_call_return_is_a_miss(locate):
  _, res = locate("export default function Page() { return h(View) }\n")
  assert not res.found
  assert "factory" in res.reason


def test_class_render_method(locate):
  code = """
import React, { Component } from 'react'
export default class Page extends Component {
  state = { n: 0 }
  componentDidMount() {}
  render() {
    const { n } = this.state
    return <View>{n}</View>
  }
}
"""
  _, res = locate(code)
  assert res.shape == ExportShape.CLASS_DECL
  assert res.site.kind == RenderSiteKind.RETURN_MARKUP


def test_class_without_render_is_a_miss(locate):
  tracer = TraceLogger()
  _, res = locate("export default class Page extends Component { componentDidMount() {} }\n", tracer)
  assert res.site is None
  assert res.reason == "class has no render method"
  assert tracer.events_of(TraceEventType.INSPECTION)


def test_identifier_resolves_to_arrow(locate):
  _, res = locate("const Page = () => <View />\nexport default Page\n")
  assert res.shape == ExportShape.IDENTIFIER
  assert res.site.kind == RenderSiteKind.TAIL_MARKUP
  assert res.component == "Page"


def test_identifier_resolves_to_named_declaration_only(locate):
  """
  Scenario: Several top-level components; the default export names one.
  Expect: The site is inside the named component, not the first function found.
  """
  code = """
function Header() { return <Text>header</Text> }
function Page() { return <View><Header /></View> }
export default Page
"""
  tree, res = locate(code)
  assert tree.text(res.site.node).startswith("<View>")


def test_identifier_resolves_to_function_expression(locate):
  _, res = locate("const Page = function () { return <View /> }\nexport default Page\n")
  assert res.site.kind == RenderSiteKind.RETURN_MARKUP


def test_identifier_resolves_to_class_expression(locate):
  _, res = locate("const Page = class extends Component { render() { return <View /> } }\nexport default Page\n")
  assert res.site.kind == RenderSiteKind.RETURN_MARKUP


def test_identifier_resolves_to_class_declaration(locate):
  _, res = locate("class Page extends Component { render() { return <View /> } }\nexport default Page\n")
  assert res.site.kind == RenderSiteKind.RETURN_MARKUP


def test_identifier_resolves_to_named_export(locate):
  _, res = locate("export const Page = () => <View />\nexport default Page\n")
  assert res.found


def test_unknown_identifier_is_a_miss(locate):
  _, res = locate("import Page from './Page'\nexport default Page\n")
  assert res.shape == ExportShape.IDENTIFIER
  assert not res.found


def test_alias_chain_is_not_followed(locate):
  """
  Scenario: `const Alias = Page; export default Alias`.
  Expect: Resolution stops after one hop; Alias is not a component declaration.
  """
  _, res = locate("const Page = () => <View />\nconst Alias = Page\nexport default Alias\n")
  assert not res.found


def test_decorator_call_resolves_wrapped_identifier(locate):
  code = "const Page = () => <View />\nexport default connect(mapState)(Page)\n"
  _, res = locate(code)
  assert res.shape == ExportShape.DECORATOR_CALL
  assert res.site.kind == RenderSiteKind.TAIL_MARKUP
  assert res.component == "Page"


def test_decorator_call_with_inline_component_is_a_miss(locate):
  _, res = locate("export default connect()(() => <View />)\n")
  assert res.shape == ExportShape.DECORATOR_CALL
  assert not res.found


def test_missing_default_export(locate):
  _, res = locate("export const Page = () => <View />\n")
  assert res.shape == ExportShape.UNRECOGNIZED
  assert res.reason == "no default export"


@pytest.mark.parametrize(
  "returned",
  ["items.map(renderItem)", "ReactDOM.createPortal(<View />, el)", "React.createElement(View)"],
)
def test_any_member_call_return_is_a_factory_site(locate, returned):
  """
  Scenario: A returned call through a member callee, whatever the method.
  Expect: Treated as a factory call; markup arguments are not inspected.
  """
  tree, res = locate(f"export default function Page() {{ return {returned} }}\n")
  assert res.site.kind == RenderSiteKind.RETURN_FACTORY
  assert tree.text(res.site.node) == returned
