"""
IDF (Intensity-Duration-Frequency) threshold table.

Return period (years) → minimum rainfall intensity (in/hr) for the
40-minute duration column:

    1.97  2.12  2.69  3.12  3.67  4.07  4.48
"""

from stormwatch.monitoring.schemas import IDFThreshold

_RAW_THRESHOLDS: list[tuple[int, float]] = [
    (1, 1.97),
    (2, 2.12),
    (5, 2.69),
    (10, 3.12),
    (25, 3.67),
    (50, 4.07),
    (100, 4.48),
]

# Descending by intensity so classification is a first-match scan
IDF_THRESHOLDS: tuple[IDFThreshold, ...] = tuple(
    sorted(
        (IDFThreshold(return_period_years=y, intensity_in_per_hr=i) for y, i in _RAW_THRESHOLDS),
        key=lambda t: t.intensity_in_per_hr,
        reverse=True,
    )
)

# Alert level cut-offs by matched return period
CRITICAL_MIN_YEARS = 10
MEDIUM_MIN_YEARS = 1
