"""Apply a composed chart spec to matplotlib or Plotly figures.

Build a ``ChartSpec`` by folding theme fragments and labels into it, then
hand it to the renderer for the figure type at hand:

    spec = ChartSpec().add(build_theme(), rotate_axis_labels(), build_caption("ACS PUMS"))
    with mpl.rc_context(to_rcparams(spec.resolved_theme())):
        fig, ax = plt.subplots()
        ax.bar(...)
    apply_to_matplotlib(fig, spec)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from apde_graphs.captions import Labels, build_caption, merge_labels
from apde_graphs.exceptions import InvalidArgument
from apde_graphs.fonts import FontResolver
from apde_graphs.settings import GraphSettings
from apde_graphs.theme import (
    BLANK,
    Margin,
    TextElement,
    Theme,
    Unit,
    build_theme,
    merge,
    rotate_axis_labels,
    theme_minimal,
)

_PX_PER_UNIT = {"px": 1.0, "pt": 96 / 72, "cm": 96 / 2.54, "mm": 96 / 25.4, "in": 96.0}

_LEGEND_LOC = {
    "right": "center right",
    "left": "center left",
    "top": "upper center",
    "bottom": "lower center",
}


@dataclass(frozen=True)
class ChartSpec:
    """A theme and a set of labels, built up from fragments."""

    theme: Theme | None = None
    labels: Labels = field(default_factory=Labels)

    def add(self, *fragments: Theme | Labels) -> ChartSpec:
        theme, labels = self.theme, self.labels
        for fragment in fragments:
            if isinstance(fragment, Theme):
                theme = fragment if theme is None else merge(theme, fragment)
            elif isinstance(fragment, Labels):
                labels = merge_labels(labels, fragment)
            else:
                raise InvalidArgument(
                    f"Cannot add {type(fragment).__name__} to a chart; expected Theme or Labels"
                )
        return ChartSpec(theme=theme, labels=labels)

    def resolved_theme(self) -> Theme:
        if self.theme is None or not self.theme.complete:
            return merge(theme_minimal(), self.theme or Theme())
        return self.theme


def default_spec(
    data_source: str,
    settings: GraphSettings | None = None,
    *,
    resolver: FontResolver | None = None,
) -> ChartSpec:
    """House theme plus standard caption, from settings.

    A configured ``settings.rotation`` is layered on as the x-axis label
    rotation.
    """
    settings = settings or GraphSettings()
    spec = ChartSpec().add(
        build_theme(settings.theme.base_size, settings.theme.base_family, resolver=resolver),
        build_caption(data_source, division=settings.division),
    )
    if settings.rotation is not None:
        spec = spec.add(
            rotate_axis_labels(settings.rotation.angle, settings.rotation.h_justify)
        )
    return spec


# -- Helpers ------------------------------------------------------------------


def _ha(hjust: float | None) -> str:
    if hjust is None:
        return "center"
    if hjust < 0.25:
        return "left"
    if hjust > 0.75:
        return "right"
    return "center"


def _weight(text: TextElement) -> str:
    return "bold" if text.face in ("bold", "bold.italic") else "normal"


def _to_px(value: float, unit: str, base_size: float) -> float:
    if unit == "lines":
        return value * base_size * 1.2 * _PX_PER_UNIT["pt"]
    return value * _PX_PER_UNIT.get(unit, _PX_PER_UNIT["pt"])


def _to_pt(margin: Margin | None, side: str) -> float:
    if margin is None:
        return 0.0
    return _to_px(getattr(margin, side), margin.unit, 0.0) / _PX_PER_UNIT["pt"]


def _plotly_angle(angle: float) -> float:
    # Counter-clockwise degrees -> Plotly's clockwise, wrapped to [-180, 180)
    return ((-angle + 180) % 360) - 180


# -- matplotlib ---------------------------------------------------------------


def to_rcparams(theme: Theme) -> dict[str, Any]:
    """matplotlib rcParams expressing everything rcParams can express."""
    text = theme.text("text")
    params: dict[str, Any] = {
        "font.size": text.size,
        "text.color": text.color,
        "axes.facecolor": "white",
        "figure.facecolor": "white",
    }
    if text.family:
        params["font.family"] = [text.family]

    title = theme.text("plot_title")
    if title is not BLANK:
        params["axes.titlesize"] = title.size
        params["axes.titleweight"] = _weight(title)
        params["axes.titlelocation"] = _ha(title.hjust)
        params["axes.titlepad"] = _to_pt(title.margin, "b") or 6.0

    axis_title = theme.text("axis_title_x")
    if axis_title is not BLANK:
        params["axes.labelsize"] = axis_title.size
        params["axes.labelweight"] = _weight(axis_title)
        params["axes.labelpad"] = _to_pt(axis_title.margin, "t") or 4.0
        params["axes.labelcolor"] = axis_title.color

    for axis in ("x", "y"):
        tick = theme.text(f"axis_text_{axis}")
        if tick is not BLANK:
            params[f"{axis}tick.labelsize"] = tick.size
            params[f"{axis}tick.labelcolor"] = tick.color
        if theme.is_blank("axis_ticks"):
            params[f"{axis}tick.major.size"] = 0
            params[f"{axis}tick.minor.size"] = 0

    show_x = not theme.is_blank("panel_grid_major_x")
    show_y = not theme.is_blank("panel_grid_major_y")
    params["axes.grid"] = show_x or show_y
    params["axes.grid.axis"] = "both" if show_x and show_y else ("x" if show_x else "y")
    params["axes.grid.which"] = "major" if theme.is_blank("panel_grid_minor") else "both"
    grid = theme.line("panel_grid_major_y" if show_y else "panel_grid_major_x")
    if grid.color:
        params["grid.color"] = grid.color
    if grid.linewidth:
        params["grid.linewidth"] = grid.linewidth

    if theme.is_blank("panel_border"):
        for side in ("left", "right", "top", "bottom"):
            params[f"axes.spines.{side}"] = False

    legend_text = theme.text("legend_text")
    if legend_text is not BLANK:
        params["legend.fontsize"] = legend_text.size
    legend_title = theme.text("legend_title")
    if legend_title is not BLANK:
        params["legend.title_fontsize"] = legend_title.size
    position = theme.get("legend_position", "right")
    if position in _LEGEND_LOC:
        params["legend.loc"] = _LEGEND_LOC[position]
    params["legend.frameon"] = False

    spacing = theme.get("panel_spacing")
    if isinstance(spacing, Unit) and spacing.value == 0:
        params["figure.subplot.wspace"] = 0.0
        params["figure.subplot.hspace"] = 0.0
    return params


def _text_kwargs(text: TextElement) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"fontsize": text.size, "fontweight": _weight(text)}
    if text.color:
        kwargs["color"] = text.color
    if text.family:
        kwargs["fontfamily"] = text.family
    return kwargs


def apply_to_matplotlib(fig, spec: ChartSpec):
    """Style a matplotlib figure's axes and draw the spec's labels."""
    theme = spec.resolved_theme()
    labels = spec.labels
    axes = fig.get_axes()

    for ax in axes:
        tick = theme.text("axis_text_x")
        if tick is BLANK:
            ax.tick_params(axis="x", labelbottom=False)
        else:
            ax.tick_params(axis="x", labelrotation=tick.angle or 0.0, labelsize=tick.size)
            for label in ax.get_xticklabels():
                label.set_horizontalalignment(_ha(tick.hjust))
                if tick.angle:
                    label.set_rotation_mode("anchor")

        ax.xaxis.grid(not theme.is_blank("panel_grid_major_x"), which="major")
        ax.yaxis.grid(not theme.is_blank("panel_grid_major_y"), which="major")
        if theme.is_blank("panel_border"):
            for spine in ax.spines.values():
                spine.set_visible(False)

        axis_title = theme.text("axis_title_x")
        if labels.x is not None and axis_title is not BLANK:
            ax.set_xlabel(labels.x, **_text_kwargs(axis_title))
        axis_title = theme.text("axis_title_y")
        if labels.y is not None and axis_title is not BLANK:
            ax.set_ylabel(labels.y, **_text_kwargs(axis_title))

    title = theme.text("plot_title")
    if labels.title is not None and title is not BLANK:
        fig.suptitle(labels.title, x=title.hjust, ha=_ha(title.hjust), **_text_kwargs(title))
    subtitle = theme.text("plot_subtitle")
    if labels.subtitle is not None and subtitle is not BLANK and axes:
        axes[0].set_title(labels.subtitle, loc=_ha(subtitle.hjust), **_text_kwargs(subtitle))

    caption = theme.text("plot_caption")
    if labels.caption is not None and caption is not BLANK:
        fig.text(
            caption.hjust,
            0.0,
            labels.caption,
            ha=_ha(caption.hjust),
            va="top",
            **_text_kwargs(caption),
        )
    return fig


# -- Plotly -------------------------------------------------------------------


def to_plotly_layout(theme: Theme) -> dict[str, Any]:
    """Plotly layout dict for a theme (labels are applied separately)."""
    text = theme.text("text")
    base_size = text.size
    layout: dict[str, Any] = {
        "font": dict(family=text.family or "sans-serif", size=base_size, color=text.color),
        "plot_bgcolor": "white",
        "paper_bgcolor": "white",
    }

    title = theme.text("plot_title")
    if title is not BLANK:
        layout["title"] = dict(
            font=dict(size=title.size, color=title.color),
            x=title.hjust,
            xanchor=_ha(title.hjust),
        )

    for axis in ("x", "y"):
        grid = theme.line(f"panel_grid_major_{axis}")
        axis_layout: dict[str, Any] = {
            "showgrid": not theme.is_blank(f"panel_grid_major_{axis}"),
            "zeroline": False,
            "showline": not theme.is_blank("panel_border"),
        }
        if grid.color:
            axis_layout["gridcolor"] = grid.color
        tick = theme.text(f"axis_text_{axis}")
        if tick is BLANK:
            axis_layout["showticklabels"] = False
        else:
            axis_layout["tickfont"] = dict(size=tick.size, color=tick.color)
            if tick.angle:
                axis_layout["tickangle"] = _plotly_angle(tick.angle)
        axis_title = theme.text(f"axis_title_{axis}")
        if axis_title is not BLANK:
            axis_layout["title"] = dict(font=dict(size=axis_title.size, color=axis_title.color))
        layout[f"{axis}axis"] = axis_layout

    position = theme.get("legend_position", "right")
    if position == "none":
        layout["showlegend"] = False
    else:
        legend: dict[str, Any] = {
            "right": dict(x=1.02, xanchor="left", y=0.5, yanchor="middle"),
            "left": dict(x=-0.02, xanchor="right", y=0.5, yanchor="middle"),
            "top": dict(x=0.5, xanchor="center", y=1.02, yanchor="bottom", orientation="h"),
            "bottom": dict(x=0.5, xanchor="center", y=-0.2, yanchor="top", orientation="h"),
        }.get(position, {})
        legend_text = theme.text("legend_text")
        if legend_text is not BLANK:
            legend["font"] = dict(size=legend_text.size)
        legend_title = theme.text("legend_title")
        if legend_title is not BLANK:
            legend["title"] = dict(font=dict(size=legend_title.size))
        layout["legend"] = legend

    margin = theme.get("plot_margin")
    if isinstance(margin, Margin):
        layout["margin"] = dict(
            t=_to_px(margin.t, margin.unit, base_size),
            r=_to_px(margin.r, margin.unit, base_size),
            b=_to_px(margin.b, margin.unit, base_size),
            l=_to_px(margin.l, margin.unit, base_size),
        )
    return layout


def _bold(text: str, element: TextElement) -> str:
    return f"<b>{text}</b>" if _weight(element) == "bold" else text


def apply_to_plotly(fig, spec: ChartSpec):
    """Apply theme layout, labels and caption annotation to a Plotly figure."""
    theme = spec.resolved_theme()
    labels = spec.labels
    layout = to_plotly_layout(theme)

    title = theme.text("plot_title")
    if labels.title is not None and title is not BLANK:
        text = _bold(labels.title, title)
        subtitle = theme.text("plot_subtitle")
        if labels.subtitle is not None and subtitle is not BLANK:
            text = f"{text}<br><span style='font-size:{subtitle.size:g}px'>{labels.subtitle}</span>"
        layout["title"]["text"] = text

    for axis, label in (("x", labels.x), ("y", labels.y)):
        axis_title = theme.text(f"axis_title_{axis}")
        if label is not None and axis_title is not BLANK:
            layout[f"{axis}axis"]["title"]["text"] = _bold(label, axis_title)

    caption = theme.text("plot_caption")
    show_caption = labels.caption is not None and caption is not BLANK
    if show_caption and "margin" in layout:
        lines = labels.caption.count("\n") + 1
        layout["margin"]["b"] += lines * caption.size * 1.4 * _PX_PER_UNIT["pt"]

    fig.update_layout(**layout)

    if show_caption:
        fig.add_annotation(
            text=labels.caption.replace("\n", "<br>"),
            xref="paper",
            yref="paper",
            x=caption.hjust,
            y=-0.12,
            showarrow=False,
            align=_ha(caption.hjust),
            xanchor=_ha(caption.hjust),
            yanchor="top",
            font=dict(size=caption.size, color=caption.color),
        )
    return fig


# -- Export -------------------------------------------------------------------


def save_chart_png(fig: object, path: Path | str, scale: int = 1) -> Path:
    """Write a matplotlib or Plotly figure to PNG and return the path.

    ``scale`` multiplies the resolution: 1 for reports, 3 for slides.
    Matplotlib figures are closed after saving. Plotly export needs the
    ``export`` extra (kaleido). Any other object raises ``InvalidArgument``.
    """
    module = type(fig).__module__.split(".")[0]
    if module not in ("matplotlib", "plotly"):
        raise InvalidArgument(
            f"Cannot save {type(fig).__name__} as PNG; expected a matplotlib or Plotly figure",
            detail={"type": f"{type(fig).__module__}.{type(fig).__qualname__}"},
        )

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    if module == "matplotlib":
        import matplotlib.pyplot as plt

        fig.savefig(out, dpi=150 * scale, bbox_inches="tight", facecolor="white")
        plt.close(fig)
    else:
        fig.write_image(str(out), scale=scale)
    logger.debug("Saved {kind} chart to {path}", kind=module, path=out)
    return out
