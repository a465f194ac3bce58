"""Ordinary least squares over evenly indexed series."""


def fit_line(values: list[float]) -> tuple[float, float] | None:
    """Return (slope, intercept) of values against their index.

    Returns None when fewer than two values are given.
    """
    n = len(values)
    if n < 2:
        return None
    sum_x = n * (n - 1) / 2
    sum_y = sum(values)
    sum_xy = sum(index * value for index, value in enumerate(values))
    sum_xx = sum(index * index for index in range(n))
    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def trend_line(values: list[float]) -> list[float]:
    """Return fitted values for each index, or an empty list."""
    fit = fit_line(values)
    if fit is None:
        return []
    slope, intercept = fit
    return [slope * index + intercept for index in range(len(values))]
