"""Standard chart labels and the APDE caption."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, fields, replace

from apde_graphs.exceptions import InvalidArgument
from apde_graphs.settings import DEFAULT_DIVISION, CaptionConfig, validated

CAPTION_DATE_FORMAT = "%B %d, %Y"


@dataclass(frozen=True)
class Labels:
    """Chart text labels. Unset (None) labels are left alone when merged."""

    title: str | None = None
    subtitle: str | None = None
    caption: str | None = None
    x: str | None = None
    y: str | None = None


def merge_labels(base: Labels, fragment: Labels) -> Labels:
    if not isinstance(base, Labels) or not isinstance(fragment, Labels):
        raise InvalidArgument("merge_labels() expects two Labels objects")
    updates = {f.name: getattr(fragment, f.name) for f in fields(fragment) if getattr(fragment, f.name) is not None}
    return replace(base, **updates)


def build_caption(
    data_source: str,
    division: str = DEFAULT_DIVISION,
    additional_text: list[str] | str | None = None,
    *,
    today: dt.date | None = None,
) -> Labels:
    """Standard caption with division name, current date, and data source.

    Lines in ``additional_text`` are placed before the standard block and
    joined with no separator, so each should carry its own ``\\n``.

    Example:
        >>> build_caption("Physical measurement data",
        ...               additional_text=["Note 1: Data excludes outliers\\n"],
        ...               today=dt.date(2025, 1, 8)).caption
        'Note 1: Data excludes outliers\\nHealth Sciences, APDE: January 08, 2025\\nData source: Physical measurement data'
    """
    cfg = validated(
        CaptionConfig,
        data_source=data_source,
        division=division,
        additional_text=additional_text,
    )
    stamp = (today or dt.date.today()).strftime(CAPTION_DATE_FORMAT)
    prefix = "".join(cfg.additional_text or [])
    return Labels(caption=f"{prefix}{cfg.division}: {stamp}\nData source: {cfg.data_source}")
