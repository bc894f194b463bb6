"""
Tests for the Injection Engine (orchestrator).

Verifies:
1. The stage machine (not a page / already wired / wired).
2. The six supported authoring styles end to end.
3. Idempotence, non-page passthrough and at-most-once insertion.
4. Parse failures: propagated by `inject`, reported by `run`.
"""

import pytest

import page_injector
from page_injector.config import InjectorConfig
from page_injector.core.engine import InjectionEngine
from page_injector.core.errors import SourceParseError
from page_injector.core.tracer import TraceEventType
from page_injector.enums import ExportShape, InjectionStage, RenderSiteKind

PAGE_ID = "src/pages/home/index.jsx"
IMPORT = 'import X from "@/components/Debug";\n'


def test_scenario_function_declaration(engine):
  res = engine.inject("export default function Page() { return <View/> }\n", PAGE_ID)
  assert res.stage == InjectionStage.WIRED
  assert res.code == IMPORT + "export default function Page() { return <View><X /></View> }\n"
  assert res.render_site == RenderSiteKind.RETURN_MARKUP


def test_scenario_arrow_expression(engine):
  res = engine.inject("export default () => <View/>\n", PAGE_ID)
  assert res.code == IMPORT + "export default () => <View><X /></View>\n"
  assert res.render_site == RenderSiteKind.TAIL_MARKUP


def test_scenario_class_via_identifier(engine):
  code = """import React, { Component } from 'react'

class Page extends Component {
  render() {
    return <View />
  }
}

export default Page
"""
  res = engine.inject(code, PAGE_ID)
  assert res.code.startswith("import X from '@/components/Debug'\nimport React, { Component } from 'react'\n")
  assert "return <View><X /></View>" in res.code
  assert res.export_shape == ExportShape.IDENTIFIER


def test_scenario_identifier_to_arrow(engine):
  res = engine.inject("const Page = () => <View/>; export default Page\n", PAGE_ID)
  assert res.code == IMPORT + "const Page = () => <View><X /></View>; export default Page\n"


def test_scenario_decorator_call(engine):
  code = "const Page = () => <View/>; export default connect(mapState)(Page)\n"
  res = engine.inject(code, PAGE_ID)
  assert res.code == IMPORT + "const Page = () => <View><X /></View>; export default connect(mapState)(Page)\n"
  assert res.export_shape == ExportShape.DECORATOR_CALL


def test_scenario_factory_call(engine):
  res = engine.inject("export default function Page() { return factory.create(View) }\n", PAGE_ID)
  assert res.code == IMPORT + "export default function Page() { return factory.create(View, factory.create(X)) }\n"
  assert res.render_site == RenderSiteKind.RETURN_FACTORY


def test_non_page_passthrough(engine):
  """
  Scenario: A component file outside pages/, even one that would not parse.
  Expect: Returned byte-for-byte, never parsed.
  """
  code = "export default () => <View>\n"
  res = engine.inject(code, "src/components/Button/index.jsx")
  assert res.stage == InjectionStage.NOT_A_PAGE
  assert res.code == code


def test_already_wired_page_is_untouched(engine):
  code = "import X from '@/components/Debug'\nexport default () => <View><X /></View>\n"
  res = engine.inject(code, PAGE_ID)
  assert res.stage == InjectionStage.PAGE_ALREADY_WIRED
  assert res.code == code
  assert not res.changed


def test_idempotent_rerun(engine):
  first = engine.inject("export default () => <View><Text>hi</Text></View>\n", PAGE_ID).code
  second = engine.inject(first, PAGE_ID)
  assert second.stage == InjectionStage.PAGE_ALREADY_WIRED
  assert second.code == first


def test_at_most_one_insertion_through_indirection(engine):
  code = """import React from 'react'
import { connect } from 'react-redux'

function Header() {
  return <Text>title</Text>
}

const Page = () => {
  return (
    <View>
      <Header />
    </View>
  )
}

export default connect(mapState)(Page)
"""
  out = engine.inject(code, PAGE_ID).code
  assert out.count("import X from") == 1
  assert out.count("<X />") == 1
  assert "<Header />\n    <X /></View>" in out


def test_miss_leaves_source_unchanged_by_default(engine):
  """
  Scenario: The page's class has no render method.
  Expect: WIRED, nothing inserted (no dangling import).
  """
  code = "import React from 'react'\nexport default class Page extends React.Component {}\n"
  res = engine.inject(code, PAGE_ID)
  assert res.stage == InjectionStage.WIRED
  assert res.missed
  assert res.code == code


def test_miss_with_import_on_miss():
  config = InjectorConfig(import_path="@/components/Debug", component_name="X", import_on_miss=True)
  code = "import React from 'react'\nexport default { title: 'home' }\n"
  res = InjectionEngine(config).inject(code, PAGE_ID)
  assert res.export_shape == ExportShape.UNRECOGNIZED
  assert res.import_inserted and not res.component_inserted
  assert res.code == "import X from '@/components/Debug'\n" + code


def test_trace_records_phases_and_mutations(engine):
  res = engine.inject("export default () => <View/>\n", PAGE_ID)
  types = {TraceEventType(e["type"]) for e in res.trace_events}
  assert {
    TraceEventType.PHASE_START,
    TraceEventType.PHASE_END,
    TraceEventType.MUTATION,
    TraceEventType.IMPORT_ACTION,
  } <= types


def test_trace_mutation_with_multibyte_markup(engine):
  """
  Scenario: Chinese text inside the render element.
  Expect: The recorded mutation shows the child before the closing tag.
  """
  res = engine.inject("export default () => <View>首页</View>\n", PAGE_ID)
  mutation = next(e for e in res.trace_events if e["type"] == TraceEventType.MUTATION)
  assert mutation["metadata"]["before"] == "<View>首页</View>"
  assert mutation["metadata"]["after"] == "<View>首页<X /></View>"


def test_parse_error_propagates_from_inject(engine):
  with pytest.raises(SourceParseError):
    engine.inject("export default () => <View>\n", PAGE_ID)


def test_parse_error_reported_by_run(engine):
  code = "export default () => <View>\n"
  res = engine.run(code, PAGE_ID)
  assert res.success is False
  assert res.code == code
  assert res.errors[0].startswith("Parse Error:")


def test_engines_do_not_share_state(engine):
  """Each file gets its own guard: wiring one page does not block the next."""
  a = engine.inject("export default () => <View/>\n", "src/pages/a/index.jsx")
  b = engine.inject("export default () => <Page/>\n", "src/pages/b/index.jsx")
  assert a.component_inserted and b.component_inserted


def test_transform_entry_point_with_loader_options():
  out = page_injector.transform(
    "export default () => <View/>\n",
    "src/pages/home/index.tsx",
    importPath="@/components/Debug",
    componentName="X",
  )
  assert out == IMPORT + "export default () => <View><X /></View>\n"


def test_transform_custom_predicate():
  code = "export default () => <View/>\n"
  assert page_injector.transform(code, "App.jsx", importPath="@/d", isPage=lambda p: False) == code
  assert "<WebpackInjected />" in page_injector.transform(code, "App.jsx", importPath="@/d", isPage=lambda p: True)


def test_transform_raises_on_malformed_page():
  with pytest.raises(SourceParseError):
    page_injector.transform("export default () => <View>\n", PAGE_ID, importPath="@/d")
