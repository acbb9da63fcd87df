"""Tests for apde_graphs.render -- ChartSpec folding and figure backends."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import matplotlib as mpl
import matplotlib.pyplot as plt
import plotly.graph_objects as go
import pytest

from apde_graphs.captions import Labels, build_caption
from apde_graphs.exceptions import InvalidArgument
from apde_graphs.render import (
    ChartSpec,
    apply_to_matplotlib,
    apply_to_plotly,
    default_spec,
    save_chart_png,
    to_plotly_layout,
    to_rcparams,
)
from apde_graphs.settings import GraphSettings, RotationConfig, ThemeConfig
from apde_graphs.theme import Theme, build_theme, rotate_axis_labels, theme_minimal

FIXED_DAY = dt.date(2025, 1, 8)


@pytest.fixture()
def house_theme(arial_resolver) -> Theme:
    return build_theme(base_size=10, resolver=arial_resolver)


@pytest.fixture()
def spec(house_theme) -> ChartSpec:
    return ChartSpec().add(
        house_theme,
        rotate_axis_labels(90, 0.5),
        build_caption("Synthetic dataset", today=FIXED_DAY),
        Labels(title="Income by flavor", subtitle="1980-2020", x="Year", y="Income"),
    )


# -- ChartSpec -----------------------------------------------------------------


class TestChartSpec:
    def test_empty(self):
        spec = ChartSpec()
        assert spec.theme is None
        assert spec.labels == Labels()

    def test_folds_themes_and_labels(self, spec):
        assert spec.theme.get("axis_text_x").angle == 90
        assert spec.theme.text("plot_title").face == "bold"
        assert spec.labels.title == "Income by flavor"
        assert spec.labels.caption.endswith("Data source: Synthetic dataset")

    def test_add_returns_new_spec(self, house_theme):
        base = ChartSpec()
        added = base.add(house_theme)
        assert base.theme is None
        assert added.theme is house_theme

    def test_later_labels_win(self):
        spec = ChartSpec().add(Labels(title="A"), Labels(title="B", x="x"))
        assert spec.labels == Labels(title="B", x="x")

    def test_rejects_other_fragments(self):
        with pytest.raises(InvalidArgument, match="dict"):
            ChartSpec().add({"title": "nope"})

    def test_partial_theme_resolves_over_minimal(self):
        resolved = ChartSpec().add(rotate_axis_labels()).resolved_theme()
        assert resolved.complete is True
        assert resolved.text("axis_text_x").angle == 45

    def test_default_spec(self, arial_resolver):
        settings = GraphSettings(division="Epidemiology", theme=ThemeConfig(base_size=14))
        spec = default_spec("ACS PUMS", settings, resolver=arial_resolver)
        assert spec.theme.base_size == 14
        assert spec.labels.caption.startswith("Epidemiology: ")
        assert spec.labels.caption.endswith("Data source: ACS PUMS")

    def test_default_spec_no_rotation_unless_configured(self, arial_resolver):
        spec = default_spec("ACS PUMS", GraphSettings(), resolver=arial_resolver)
        tick = spec.resolved_theme().text("axis_text_x")
        assert tick.angle == 0

    def test_default_spec_applies_configured_rotation(self, arial_resolver):
        settings = GraphSettings(rotation=RotationConfig(angle=90, h_justify=0.5))
        spec = default_spec("ACS PUMS", settings, resolver=arial_resolver)
        tick = spec.resolved_theme().text("axis_text_x")
        assert tick.angle == 90
        assert tick.hjust == 0.5
        assert tick.size == pytest.approx(9.6)


# -- matplotlib ----------------------------------------------------------------


class TestToRcParams:
    def test_fonts(self, house_theme):
        params = to_rcparams(house_theme)
        assert params["font.family"] == ["Arial"]
        assert params["font.size"] == pytest.approx(10.0)
        assert params["axes.titlesize"] == pytest.approx(13.0)
        assert params["axes.titleweight"] == "bold"
        assert params["axes.titlelocation"] == "center"
        assert params["axes.labelweight"] == "bold"
        assert params["xtick.labelsize"] == pytest.approx(8.0)

    def test_grid_only_horizontal(self, house_theme):
        params = to_rcparams(house_theme)
        assert params["axes.grid"] is True
        assert params["axes.grid.axis"] == "y"
        assert params["axes.grid.which"] == "major"

    def test_minimal_grid_both_axes(self):
        params = to_rcparams(theme_minimal())
        assert params["axes.grid.axis"] == "both"
        assert params["axes.grid.which"] == "both"

    def test_zero_panel_spacing(self, house_theme):
        params = to_rcparams(house_theme)
        assert params["figure.subplot.wspace"] == 0.0
        assert params["figure.subplot.hspace"] == 0.0

    def test_legend_right(self, house_theme):
        assert to_rcparams(house_theme)["legend.loc"] == "center right"

    def test_accepted_by_matplotlib(self, house_theme):
        with mpl.rc_context(to_rcparams(house_theme)):
            fig, ax = plt.subplots()
            ax.plot([1, 2, 3], [3, 1, 2])
            fig.canvas.draw()


class TestApplyToMatplotlib:
    def _figure(self):
        fig, ax = plt.subplots()
        ax.bar(["1980", "1990", "2000"], [70, 72, 75])
        return fig, ax

    def test_rotates_x_tick_labels(self, spec):
        fig, ax = self._figure()
        apply_to_matplotlib(fig, spec)
        for label in ax.get_xticklabels():
            assert label.get_rotation() == pytest.approx(90)
            assert label.get_horizontalalignment() == "center"

    def test_labels_and_caption(self, spec):
        fig, ax = self._figure()
        apply_to_matplotlib(fig, spec)
        assert ax.get_xlabel() == "Year"
        assert ax.get_ylabel() == "Income"
        assert fig._suptitle.get_text() == "Income by flavor"
        assert ax.get_title(loc="center") == "1980-2020"
        texts = [t.get_text() for t in fig.texts]
        assert spec.labels.caption in texts

    def test_vertical_grid_hidden(self, spec):
        fig, ax = self._figure()
        apply_to_matplotlib(fig, spec)
        assert not any(line.get_visible() for line in ax.get_xgridlines())
        assert all(line.get_visible() for line in ax.get_ygridlines())

    def test_spines_hidden(self, spec):
        fig, ax = self._figure()
        apply_to_matplotlib(fig, spec)
        assert not any(spine.get_visible() for spine in ax.spines.values())

    def test_returns_figure(self, spec):
        fig, _ = self._figure()
        assert apply_to_matplotlib(fig, spec) is fig


# -- Plotly --------------------------------------------------------------------


class TestToPlotlyLayout:
    def test_fonts_and_title(self, house_theme):
        layout = to_plotly_layout(house_theme)
        assert layout["font"]["family"] == "Arial"
        assert layout["title"]["x"] == 0.5
        assert layout["title"]["xanchor"] == "center"

    def test_grid(self, house_theme):
        layout = to_plotly_layout(house_theme)
        assert layout["xaxis"]["showgrid"] is False
        assert layout["yaxis"]["showgrid"] is True

    def test_tick_angle_is_clockwise(self):
        layout = to_plotly_layout(ChartSpec().add(rotate_axis_labels(45)).resolved_theme())
        assert layout["xaxis"]["tickangle"] == -45

    def test_margin_in_pixels(self, house_theme):
        margin = to_plotly_layout(house_theme)["margin"]
        assert margin["l"] == pytest.approx(96 / 2.54)

    def test_legend_hidden(self):
        theme = ChartSpec().add(Theme({"legend_position": "none"})).resolved_theme()
        assert to_plotly_layout(theme)["showlegend"] is False

    def test_accepted_by_plotly(self, house_theme):
        fig = go.Figure(go.Bar(x=["a", "b"], y=[1, 2]))
        fig.update_layout(**to_plotly_layout(house_theme))
        assert fig.layout.xaxis.showgrid is False


class TestApplyToPlotly:
    def test_title_and_axes(self, spec):
        fig = apply_to_plotly(go.Figure(go.Bar(x=["a", "b"], y=[1, 2])), spec)
        assert fig.layout.title.text.startswith("<b>Income by flavor</b><br>")
        assert "1980-2020" in fig.layout.title.text
        assert fig.layout.xaxis.title.text == "<b>Year</b>"
        assert fig.layout.xaxis.tickangle == -90

    def test_caption_annotation(self, spec):
        fig = apply_to_plotly(go.Figure(go.Bar(x=["a"], y=[1])), spec)
        (annotation,) = fig.layout.annotations
        assert annotation.text == spec.labels.caption.replace("\n", "<br>")
        assert annotation.xanchor == "left"
        assert annotation.yanchor == "top"

    def test_no_caption_no_annotation(self, house_theme):
        fig = apply_to_plotly(go.Figure(), ChartSpec().add(house_theme))
        assert len(fig.layout.annotations) == 0


# -- save_chart_png ------------------------------------------------------------


class TestSaveChartPng:
    def test_matplotlib_figure(self, tmp_path: Path):
        fig, ax = plt.subplots()
        ax.plot([1, 2], [3, 4])
        out = tmp_path / "chart.png"
        result = save_chart_png(fig, out, scale=1)
        assert result == out
        assert out.exists()
        assert out.stat().st_size > 0

    def test_unsupported_type(self, tmp_path):
        out = tmp_path / "bad" / "chart.png"
        with pytest.raises(InvalidArgument, match="expected a matplotlib or Plotly figure") as exc:
            save_chart_png("not a figure", out)
        assert isinstance(exc.value, ValueError)
        assert exc.value.detail == {"type": "builtins.str"}
        assert not out.parent.exists()

    def test_accepts_string_path(self, tmp_path):
        fig, ax = plt.subplots()
        ax.plot([1], [1])
        result = save_chart_png(fig, str(tmp_path / "chart.png"))
        assert result == tmp_path / "chart.png"
        assert result.exists()

    def test_creates_parent_dirs(self, tmp_path):
        fig, ax = plt.subplots()
        ax.plot([1], [1])
        out = tmp_path / "sub" / "dir" / "chart.png"
        save_chart_png(fig, out)
        assert out.exists()
