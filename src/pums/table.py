"""Normalized PUMS table with weighted summaries and plots."""

import math
from dataclasses import dataclass

import pandas as pd
import plotly.express as px

from . import catalog
from .errors import DomainError, SchemaError


# === Functional Core (Pure Functions - No I/O) ===

def weighted_mean(values, weights):
    """Weighted mean of values.

    Raises:
        DomainError: If the weights sum to zero
    """
    values = pd.Series(values, dtype=float).reset_index(drop=True)
    weights = pd.Series(weights, dtype=float).reset_index(drop=True)
    total = weights.sum()
    if total == 0:
        raise DomainError(catalog.WEIGHT_VAR, total, "Weights sum to zero")
    return float((values * weights).sum() / total)


def weighted_sd(values, weights):
    """Weighted (population) standard deviation of values."""
    values = pd.Series(values, dtype=float).reset_index(drop=True)
    weights = pd.Series(weights, dtype=float).reset_index(drop=True)
    mean = weighted_mean(values, weights)
    variance = float((weights * (values - mean) ** 2).sum() / weights.sum())
    return math.sqrt(variance)


@dataclass
class PumsTable:
    """A normalized PUMS response.

    Column roles are fixed by position when the table is built: numeric,
    categorical, weight, then any geography columns. A multi-year table also
    carries a YEAR column, which is never treated as geography.
    """

    data: pd.DataFrame
    numeric: str
    categorical: str
    weight: str
    geography: tuple = ()

    @classmethod
    def from_frame(cls, data):
        """Assign column roles by position.

        Raises:
            SchemaError: If the frame has fewer than three columns
        """
        columns = list(data.columns)
        if len(columns) < 3:
            raise SchemaError(
                f"Expected numeric, categorical and weight columns, got {columns}"
            )
        geography = tuple(c for c in columns[3:] if c != catalog.YEAR_COLUMN)
        return cls(data, columns[0], columns[1], columns[2], geography)

    def __len__(self):
        return len(self.data)

    @property
    def years(self):
        """Distinct survey years in row order, or [] for a single-year table."""
        if catalog.YEAR_COLUMN not in self.data.columns:
            return []
        return list(pd.unique(self.data[catalog.YEAR_COLUMN]))

    def with_year(self, year):
        """Return a copy with every row tagged with the survey year."""
        data = self.data.copy()
        data[catalog.YEAR_COLUMN] = year
        return PumsTable(data, self.numeric, self.categorical, self.weight, self.geography)

    def summarize(self, numeric=True, categorical=True):
        """Weighted summary of the numeric and categorical columns.

        Time variables skip rows coded 0 (not applicable) so the mean is a
        clock time rather than being dragged toward midnight. Mean and sd are
        NaN when no weighted rows remain.

        Args:
            numeric: Include weighted mean/sd of the numeric column
            categorical: Include per-label counts of the categorical column

        Returns:
            Dict with optional 'numeric' and 'categorical' entries
        """
        summary = {}
        if numeric:
            rows = self.data
            if self.numeric in catalog.TIME_VARS:
                rows = rows[rows[self.numeric] != 0]
            mean = sd = math.nan
            if rows[self.weight].sum() != 0:
                mean = weighted_mean(rows[self.numeric], rows[self.weight])
                sd = weighted_sd(rows[self.numeric], rows[self.weight])
            summary['numeric'] = {'variable': self.numeric, 'mean': mean, 'sd': sd}
        if categorical:
            grouped = self.data.groupby(self.categorical)[self.weight]
            summary['categorical'] = pd.DataFrame({
                'count': grouped.size(),
                'weighted_count': grouped.sum(),
            }).reset_index()
        return summary

    def plot(self):
        """Box plot of the numeric column by categorical label.

        Returns:
            plotly Figure (one color per year for multi-year tables)
        """
        color = catalog.YEAR_COLUMN if catalog.YEAR_COLUMN in self.data.columns else None
        plot_data = self.data
        if color:
            plot_data = plot_data.assign(**{color: plot_data[color].astype(str)})
        return px.box(
            plot_data,
            x=self.categorical,
            y=self.numeric,
            color=color,
            title=f"{self.numeric} by {self.categorical}",
        )
