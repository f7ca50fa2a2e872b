"""Tests for the HTML and PNG renderers."""

import pytest

from phaseflow.models import UnknownProjectError
from phaseflow.output.colors import darken, grayscale, hex_to_rgb
from phaseflow.output.html import emphasis_table, render_html, write_html
from phaseflow.output.raster import render_png, write_png


class TestColors:
    def test_hex_to_rgb(self):
        assert hex_to_rgb("#3498db") == (52, 152, 219)

    def test_darken(self):
        r, g, b = hex_to_rgb(darken("#3498db", 0.5))
        assert (r, g, b) < (52, 152, 219)
        assert b == round(219 * 0.7 ** 0.5)

    def test_grayscale(self):
        assert grayscale((52, 152, 219)) == (141, 141, 141)


class TestHtml:
    def test_contains_geometry(self, sample_layout, sample, config):
        html = render_html(sample_layout, sample, config)
        for ribbon in sample_layout.ribbons:
            assert ribbon.svg_path in html
        assert html.count('class="phase-divider"') == 8
        assert html.count('class="project-node"') == 7
        assert "Jan 2022" in html

    def test_emphasis_table(self, sample_layout):
        table = emphasis_table(sample_layout)
        assert set(table) == {""} | set(sample_layout.nodes)
        assert table["project3"]["links"]["project1->project3"] == "emphasized"
        assert table["project3"]["links"]["project2->project4"] == "dimmed"
        assert table[""]["projects"]["project1"] == "normal"

    def test_initial_selection(self, sample_layout, sample, config):
        html = render_html(sample_layout, sample, config, selected="project2")
        assert 'let selected = "project2";' in html

    def test_emphasis_rules(self, sample_layout, sample, config):
        html = render_html(sample_layout, sample, config)
        assert ".project-node.dimmed { opacity: 0.2; filter: url(#grayscale); }" in html
        assert ".ribbon.emphasized { stroke-width: 2.0; }" in html

    def test_transition_duration(self, sample_layout, sample, config):
        assert "300ms" in render_html(sample_layout, sample, config)

    def test_names_escaped(self, config):
        from phaseflow.engine import compute_layout
        from phaseflow.models import FlowDataset

        ds = FlowDataset.from_records([{"id": "x", "name": "<R&D>", "time": "2022-01-01", "size": 4}])
        html = render_html(compute_layout(ds, config), ds, config)
        assert "&lt;R&amp;D&gt;" in html
        assert "<R&D>" not in html

    def test_unknown_selection(self, sample_layout, sample, config):
        with pytest.raises(UnknownProjectError):
            render_html(sample_layout, sample, config, selected="nope")

    def test_write(self, sample_layout, sample, config, tmp_path):
        out = write_html(sample_layout, sample, config, tmp_path / "sub" / "diagram.html")
        assert out.exists()
        assert out.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")


class TestPng:
    def _node_center(self, layout, config, project_id):
        """A pixel inside the bar, just right of the y axis when the bar sits on it."""
        node = layout.nodes[project_id]
        s = config.render.png_scale
        return (
            int((node.x + config.layout.margin_left) * s) + 3,
            int((node.y + config.layout.margin_top) * s),
        )

    def test_size(self, sample_layout, sample, config):
        img = render_png(sample_layout, sample, config)
        assert img.mode == "RGB"
        assert img.size == (1800, 1000)

    def test_node_fill(self, sample_layout, sample, config):
        img = render_png(sample_layout, sample, config)
        assert img.getpixel(self._node_center(sample_layout, config, "project1")) == (52, 152, 219)

    def test_dimmed_node_desaturated_and_faded(self, sample_layout, sample, config):
        img = render_png(sample_layout, sample, config, selected="project2")
        r, g, b = img.getpixel(self._node_center(sample_layout, config, "project1"))
        # gray 141 at 0.2 opacity over white
        assert r == g == b
        assert r == pytest.approx(255 - (255 - 141) * 0.2, abs=2)

    def test_selection_changes_image(self, sample_layout, sample, config):
        plain = render_png(sample_layout, sample, config)
        selected = render_png(sample_layout, sample, config, selected="project3")
        assert plain.tobytes() != selected.tobytes()

    def test_unknown_selection(self, sample_layout, sample, config):
        with pytest.raises(UnknownProjectError):
            render_png(sample_layout, sample, config, selected="nope")

    def test_write(self, sample_layout, sample, config, tmp_path):
        out = write_png(sample_layout, sample, config, tmp_path / "diagram.png")
        assert out.exists()
        assert out.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
