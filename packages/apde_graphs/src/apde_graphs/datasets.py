"""Synthetic example datasets for chart tutorials and tests.

Every dataset is generated on demand from a fixed seed, so repeated loads
return identical frames:

    df = load_dataset("icecream")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np
import pandas as pd
from loguru import logger
from scipy import stats

from apde_graphs.exceptions import DatasetNotFound

SEED = 98104


@dataclass(frozen=True)
class DatasetInfo:
    name: str
    description: str
    builder: Callable[[np.random.Generator], pd.DataFrame]


_REGISTRY: dict[str, DatasetInfo] = {}


def register_dataset(info: DatasetInfo) -> None:
    _REGISTRY[info.name.lower()] = info


def list_datasets() -> dict[str, DatasetInfo]:
    return dict(_REGISTRY)


def load_dataset(name: str, *, seed: int = SEED) -> pd.DataFrame:
    """Build a registered dataset. Names are case-insensitive."""
    info = _REGISTRY.get(name.lower())
    if info is None:
        raise DatasetNotFound(name, list(_REGISTRY))
    logger.debug("Generating dataset {name} (seed={seed})", name=info.name, seed=seed)
    return info.builder(np.random.default_rng(seed))


# -- Ice cream ----------------------------------------------------------------

FLAVORS = ["Chocolate", "Vanilla", "Other"]

# flavor -> (income in 1980, yearly slope)
_INCOME_TRENDS = {
    "Vanilla": (75000, 50),
    "Chocolate": (70000, 200),
    "Other": (65000, 500),
}


def icecream(rng: np.random.Generator) -> pd.DataFrame:
    """Mean income by favorite ice cream flavor, 1980-2020."""
    years = [1980, 1990, 2000, 2010, 2020]
    rows = [(year, flavor) for year in years for flavor in sorted(_INCOME_TRENDS)]
    df = pd.DataFrame(rows, columns=["year", "flavor"])

    base = df["flavor"].map(lambda f: _INCOME_TRENDS[f][0])
    slope = df["flavor"].map(lambda f: _INCOME_TRENDS[f][1])
    noise = rng.normal(0, 500, size=len(df))
    df["mean_income"] = (base + (df["year"] - 1980) * slope + noise).round(0)
    df["se"] = rng.uniform(1500, 5000, size=len(df)).round(0)
    df["flavor"] = pd.Categorical(df["flavor"], categories=FLAVORS, ordered=True)
    return df


# -- Lifespan -----------------------------------------------------------------

CITIES = ["Athens", "Babylon", "Carthage", "Pataliputra", "Persepolis", "Rome", "Thebes", "Xian"]
REGIONS = {
    "Athens": "Mediterranean",
    "Rome": "Mediterranean",
    "Carthage": "Mediterranean",
    "Babylon": "Middle East",
    "Persepolis": "Middle East",
    "Pataliputra": "Other",
    "Xian": "Other",
    "Thebes": "Other",
}
N_PER_CITY = 1000


def lifespan_raw(rng: np.random.Generator) -> pd.DataFrame:
    """Individual lifespans in eight ancient cities, split by sex."""
    city_means = np.round(rng.uniform(38, 57, size=len(CITIES)), 1)
    half = N_PER_CITY // 2
    frames = []
    for city, city_mean in zip(CITIES, city_means):
        # Female-male gap drawn once per city
        gap = rng.normal(8, 4)
        female = np.round(rng.normal(city_mean + gap / 2, 5, size=half))
        male = np.round(rng.normal(city_mean - gap / 2, 5, size=N_PER_CITY - half))
        frames.append(
            pd.DataFrame(
                {
                    "city": city,
                    "sex": ["Female"] * half + ["Male"] * (N_PER_CITY - half),
                    "lifespan": np.concatenate([female, male]),
                }
            )
        )
    df = pd.concat(frames, ignore_index=True)
    df["region"] = pd.Categorical(
        df["city"].map(REGIONS), categories=["Mediterranean", "Middle East", "Other"]
    )
    df["city"] = pd.Categorical(df["city"], categories=CITIES)
    df["sex"] = pd.Categorical(df["sex"], categories=["Female", "Male"])
    return df


def lifespan_agg(rng: np.random.Generator) -> pd.DataFrame:
    """Mean lifespan per city."""
    raw = lifespan_raw(rng)
    return (
        raw.groupby("city", observed=True)["lifespan"]
        .mean()
        .rename("mean_lifespan")
        .reset_index()
    )


# -- Wisdom -------------------------------------------------------------------

# group -> (peak age, spread)
_WISDOM_CURVES = {"Group 1": (40, 25), "Group 2": (50, 20)}


def wisdom(rng: np.random.Generator, n_points: int = 1000) -> pd.DataFrame:
    """Wisdom score by age for two groups with different peaks."""
    df = pd.DataFrame(
        {
            "age": np.round(rng.uniform(10, 70, size=n_points)),
            "group": rng.choice(list(_WISDOM_CURVES), size=n_points),
        }
    )
    peak = df["group"].map(lambda g: _WISDOM_CURVES[g][0])
    spread = df["group"].map(lambda g: _WISDOM_CURVES[g][1])
    curve = stats.norm.pdf(df["age"], loc=peak, scale=spread)
    df["wisdom_score"] = 20 + 60 * curve + rng.normal(0, 0.2, size=n_points)
    return df


# -- College majors -----------------------------------------------------------

MAJOR_SCHOOLS = {
    "Premed": "Health Sciences",
    "Management": "Business",
    "Communications": "Liberal Arts",
    "Comp Sci": "Engineering",
    "Economics": "Business",
    "Education": "Liberal Arts",
    "Engineering": "Engineering",
    "English": "Liberal Arts",
    "Ecology": "Liberal Arts",
    "Finance": "Business",
    "Kinesiology": "Health Sciences",
    "Math": "Liberal Arts",
    "Nursing": "Health Sciences",
    "Psychology": "Liberal Arts",
}
_TOP_MAJORS = {"Engineering": 750, "Comp Sci": 700, "Psychology": 650, "Management": 500, "Nursing": 450}
STUDENT_BODY = 10000


def _clopper_pearson(count: int, total: int, level: float = 0.95) -> tuple[float, float]:
    alpha = 1 - level
    lower = 0.0 if count == 0 else stats.beta.ppf(alpha / 2, count, total - count + 1)
    upper = 1.0 if count == total else stats.beta.ppf(1 - alpha / 2, count + 1, total - count)
    return float(lower), float(upper)


def majors(rng: np.random.Generator) -> pd.DataFrame:
    """Ten most popular majors per year, 2016-2025, with Kinesiology rising."""
    others = [m for m in MAJOR_SCHOOLS if m not in _TOP_MAJORS and m != "Kinesiology"]
    frames = []
    for year in range(2016, 2026):
        top = {
            major: int(np.clip(base + int(np.round(rng.normal(0, 20))), 300, 800))
            for major, base in _TOP_MAJORS.items()
        }
        kinesiology = int(min(750, 150 + int(np.round((year - 2015) * 75 + rng.normal(0, 15)))))
        rest = dict(zip(others, np.round(rng.uniform(100, 300, size=len(others))).astype(int)))
        counts = {**top, "Kinesiology": kinesiology, **rest}

        year_df = (
            pd.DataFrame({"major": list(counts), "count": list(counts.values())})
            .sort_values("count", ascending=False, kind="stable")
            .head(10)
            .reset_index(drop=True)
        )
        year_df["ranking"] = np.arange(1, len(year_df) + 1)
        year_df["year"] = year
        frames.append(year_df)

    df = pd.concat(frames, ignore_index=True)
    df["rate"] = df["count"] / STUDENT_BODY
    bounds = [_clopper_pearson(int(c), STUDENT_BODY) for c in df["count"]]
    df["rate_lower"] = [lo for lo, _ in bounds]
    df["rate_upper"] = [hi for _, hi in bounds]
    df[["rate", "rate_lower", "rate_upper"]] = df[["rate", "rate_lower", "rate_upper"]].round(3)
    df["school"] = df["major"].map(MAJOR_SCHOOLS)
    df = df.sort_values(["year", "ranking"], ignore_index=True)
    return df[["year", "school", "major", "ranking", "count", "rate", "rate_lower", "rate_upper"]]


register_dataset(DatasetInfo("icecream", "Synthetic income by ice cream flavor preference", icecream))
register_dataset(DatasetInfo("lifespan_raw", "Synthetic individual lifespans in ancient cities", lifespan_raw))
register_dataset(DatasetInfo("lifespan_agg", "Synthetic mean lifespan by ancient city", lifespan_agg))
register_dataset(DatasetInfo("wisdom", "Synthetic wisdom scores by age and group", wisdom))
register_dataset(DatasetInfo("majors", "Synthetic top ten college majors by year", majors))
