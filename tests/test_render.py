"""
Tests for the render module.

Tests palettes, visibility handling, and SVG output.
"""

from codeview.filters import FilterState
from codeview.models import LinkType, NodeType
from codeview.render import (
    LINK_STYLES,
    NODE_COLORS,
    RecordingRenderAdapter,
    SvgRenderAdapter,
    link_style,
    node_color,
)
from codeview.viewport import Transform
from tests.fixtures import FILTER_DOCUMENT, build_model, node_record


class TestPalette:
    """Tests for the color tables."""

    def test_every_type_has_an_entry(self):
        assert set(NODE_COLORS) == set(NodeType)
        assert set(LINK_STYLES) == set(LinkType)

    def test_node_colors(self):
        assert node_color(NodeType.FUNCTION) == "#ff7f0e"
        assert node_color(NodeType.METHOD) == "#ff7f0e"
        assert node_color(NodeType.CLASS) == "#2ca02c"
        assert node_color(NodeType.UNKNOWN) == "#1f77b4"

    def test_link_styles(self):
        assert link_style(LinkType.CALLS) == ("#ff0000", 2)
        assert link_style(LinkType.IMPORTS) == ("#00ff00", 3)
        assert link_style(LinkType.INHERITS) == ("#0000ff", 2.5)
        assert link_style(LinkType.UNKNOWN) == ("#999999", 1)


def positioned(document=None):
    model = build_model(document)
    for index, node in enumerate(model.nodes):
        node.x, node.y = float(index * 10), float(index * 20)
    return model


class TestRecordingAdapter:
    def test_hidden_elements_not_drawn(self):
        model = positioned(FILTER_DOCUMENT)
        adapter = RecordingRenderAdapter()

        adapter.sync(model.nodes, model.links, Transform.identity, FilterState.parse("Class"), True)

        assert set(adapter.last.positions) == {"A", "C"}
        assert len(adapter.last.links) == 1
        assert model.node_count == 3

    def test_show_error_clears_frames(self):
        adapter = RecordingRenderAdapter()
        model = positioned()
        adapter.sync(model.nodes, model.links, Transform.identity, FilterState(), True)

        adapter.show_error("boom")

        assert adapter.frames == []
        assert adapter.error == "boom"


class TestSvgAdapter:
    """Tests for SVG output."""

    def test_draws_nodes_links_and_labels(self):
        model = positioned()
        adapter = SvgRenderAdapter(400, 300)

        adapter.sync(model.nodes, model.links, Transform(10, 20, 2), FilterState(), True)
        svg = adapter.markup

        assert svg.startswith("<svg")
        assert 'transform="translate(10.00,20.00) scale(2.0000)"' in svg
        assert svg.count("<circle") == model.node_count
        assert svg.count("<line") == model.link_count
        assert svg.count("<text") == model.node_count
        assert 'fill="#2ca02c"' in svg
        assert 'stroke="#ff0000" stroke-width="2"' in svg

    def test_labels_hidden(self):
        model = positioned()
        adapter = SvgRenderAdapter()

        adapter.sync(model.nodes, model.links, Transform.identity, FilterState(), False)

        assert "<text" not in adapter.markup

    def test_filter_hides_nodes_and_links(self):
        model = positioned(FILTER_DOCUMENT)
        adapter = SvgRenderAdapter()

        adapter.sync(model.nodes, model.links, Transform.identity, FilterState.parse("Class"), True)

        assert adapter.markup.count("<circle") == 2
        assert adapter.markup.count("<line") == 1

    def test_names_escaped(self):
        model = positioned({"nodes": {"a": node_record("a", name="Vec<T>")}})
        adapter = SvgRenderAdapter()

        adapter.sync(model.nodes, model.links, Transform.identity, FilterState(), True)

        assert "Vec&lt;T&gt;" in adapter.markup

    def test_error_replaces_surface(self, tmp_path):
        adapter = SvgRenderAdapter()

        adapter.show_error("Error loading graph data: <bad>")
        path = adapter.save(tmp_path / "out.svg")

        content = path.read_text()
        assert "<circle" not in content
        assert "&lt;bad&gt;" in content
