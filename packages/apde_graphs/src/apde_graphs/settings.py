"""Pydantic configuration for apde_graphs.

One config model per helper holds that helper's named parameters and
defaults; the helpers validate their arguments by building one.
``GraphSettings`` bundles the house defaults and can be read from YAML.
"""

from __future__ import annotations

import numbers
from pathlib import Path
from typing import TypeVar

import yaml
from pydantic import BaseModel, Field, StrictStr, ValidationError, field_validator

from apde_graphs.exceptions import ConfigError, InvalidArgument

DEFAULT_CONFIG_PATH = Path("apde_graphs.yaml")

DEFAULT_DIVISION = "Health Sciences, APDE"
DEFAULT_BASE_SIZE = 12.0
DEFAULT_BASE_FAMILY = "Arial"
DEFAULT_ANGLE = 45.0
DEFAULT_H_JUSTIFY = 1.0
DEFAULT_N_BREAKS = 5

_FROZEN = {"frozen": True, "extra": "forbid"}

M = TypeVar("M", bound=BaseModel)


def _as_real(v: object) -> float:
    if isinstance(v, bool) or not isinstance(v, numbers.Real):
        raise ValueError(f"must be a number, got {type(v).__name__}")
    return float(v)


def _as_int(v: object) -> int:
    if isinstance(v, bool) or not isinstance(v, numbers.Integral):
        raise ValueError(f"must be an integer, got {type(v).__name__}")
    return int(v)


class CaptionConfig(BaseModel):
    """Arguments of ``build_caption``."""

    model_config = _FROZEN

    data_source: StrictStr = Field(min_length=1)
    division: StrictStr = DEFAULT_DIVISION
    additional_text: list[StrictStr] | None = None

    @field_validator("additional_text", mode="before")
    @classmethod
    def wrap_single_line(cls, v: object) -> object:
        if isinstance(v, str):
            return [v]
        if isinstance(v, tuple):
            return list(v)
        return v


class ThemeConfig(BaseModel):
    """Arguments of ``build_theme``."""

    model_config = _FROZEN

    base_size: float = Field(DEFAULT_BASE_SIZE, gt=0, allow_inf_nan=False)
    base_family: StrictStr = DEFAULT_BASE_FAMILY

    @field_validator("base_size", mode="before")
    @classmethod
    def check_base_size(cls, v: object) -> float:
        return _as_real(v)


class RotationConfig(BaseModel):
    """Arguments of ``rotate_axis_labels``."""

    model_config = _FROZEN

    angle: float = Field(DEFAULT_ANGLE, ge=0, le=360)
    h_justify: float = Field(DEFAULT_H_JUSTIFY, ge=0, le=1)

    @field_validator("angle", "h_justify", mode="before")
    @classmethod
    def check_number(cls, v: object) -> float:
        return _as_real(v)


class BreakConfig(BaseModel):
    """The break count shared by ``linear_breaks`` and ``quantile_breaks``."""

    model_config = _FROZEN

    n: int = Field(DEFAULT_N_BREAKS, ge=2)

    @field_validator("n", mode="before")
    @classmethod
    def check_integer(cls, v: object) -> int:
        return _as_int(v)


class GraphSettings(BaseModel):
    """House defaults -- immutable after creation."""

    model_config = _FROZEN

    division: StrictStr = DEFAULT_DIVISION
    theme: ThemeConfig = ThemeConfig()
    rotation: RotationConfig | None = None
    n_breaks: int = Field(DEFAULT_N_BREAKS, ge=2)

    @field_validator("n_breaks", mode="before")
    @classmethod
    def check_n_breaks(cls, v: object) -> int:
        return _as_int(v)

    @classmethod
    def from_yaml(cls, config_path: Path = DEFAULT_CONFIG_PATH, **overrides) -> GraphSettings:
        """Load from YAML, merge keyword overrides (highest priority)."""
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            data = {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a mapping, got {type(data).__name__}")
        data.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(f"Configuration error: {e}") from e


def validated(model: type[M], **kwargs: object) -> M:
    """Build ``model`` from keyword arguments, raising InvalidArgument on failure."""
    try:
        return model(**kwargs)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        first = errors[0]
        field = ".".join(str(part) for part in first["loc"]) or model.__name__
        raise InvalidArgument(f"`{field}`: {first['msg']}", detail={"errors": errors}) from e
