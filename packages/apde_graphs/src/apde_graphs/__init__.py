"""Chart helpers for APDE: house theme, standard captions, axis breaks.

Every helper returns a fragment (a ``Theme`` or ``Labels``) that is folded
into a ``ChartSpec`` and applied to a matplotlib or Plotly figure.
"""

from apde_graphs.breaks import house_breaks, linear_breaks, quantile_breaks
from apde_graphs.captions import Labels, build_caption, merge_labels
from apde_graphs.datasets import list_datasets, load_dataset
from apde_graphs.exceptions import ConfigError, DatasetNotFound, GraphsError, InvalidArgument
from apde_graphs.fonts import FontResolver, MatplotlibFontResolver, StaticFontResolver
from apde_graphs.render import (
    ChartSpec,
    apply_to_matplotlib,
    apply_to_plotly,
    default_spec,
    save_chart_png,
    to_plotly_layout,
    to_rcparams,
)
from apde_graphs.settings import GraphSettings
from apde_graphs.theme import Theme, build_theme, compose, merge, rotate_axis_labels, theme_minimal

__all__ = [
    "ChartSpec",
    "ConfigError",
    "DatasetNotFound",
    "FontResolver",
    "GraphSettings",
    "GraphsError",
    "InvalidArgument",
    "Labels",
    "MatplotlibFontResolver",
    "StaticFontResolver",
    "Theme",
    "apply_to_matplotlib",
    "apply_to_plotly",
    "build_caption",
    "build_theme",
    "compose",
    "default_spec",
    "house_breaks",
    "linear_breaks",
    "list_datasets",
    "load_dataset",
    "merge",
    "merge_labels",
    "quantile_breaks",
    "rotate_axis_labels",
    "save_chart_png",
    "theme_minimal",
    "to_plotly_layout",
    "to_rcparams",
]
