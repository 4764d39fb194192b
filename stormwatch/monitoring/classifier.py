"""
Intensity Classifier — latest reading → storm severity.

Each reading is taken to be the accumulation over one observation interval
(30 minutes), so intensity = inches / 0.5 h. The descending IDF table is
scanned and the first threshold met names the category.
"""

from typing import Optional, Sequence

from stormwatch.monitoring.idf import CRITICAL_MIN_YEARS, IDF_THRESHOLDS, MEDIUM_MIN_YEARS
from stormwatch.monitoring.schemas import NORMAL_CATEGORY, AlertLevel, IDFThreshold, StormStatus
from stormwatch.monitoring.window import ReadingWindow

OBSERVATION_CADENCE_HOURS = 0.5
TRIGGERING_DURATION_MINUTES = 30


def match_threshold(
    intensity: float,
    thresholds: Sequence[IDFThreshold] = IDF_THRESHOLDS,
) -> Optional[IDFThreshold]:
    """Highest threshold met by the intensity (table must be sorted descending)."""
    for threshold in thresholds:
        if threshold.intensity_in_per_hr <= intensity:
            return threshold
    return None


def alert_level_for(threshold: Optional[IDFThreshold]) -> AlertLevel:
    if threshold is None:
        return AlertLevel.NONE
    if threshold.return_period_years >= CRITICAL_MIN_YEARS:
        return AlertLevel.CRITICAL
    if threshold.return_period_years >= MEDIUM_MIN_YEARS:
        return AlertLevel.MEDIUM
    return AlertLevel.NONE


def classify_intensity(
    intensity: float,
    thresholds: Sequence[IDFThreshold] = IDF_THRESHOLDS,
    duration_minutes: int = TRIGGERING_DURATION_MINUTES,
) -> StormStatus:
    """Build the status for an hourly intensity, ignoring where it came from."""
    threshold = match_threshold(intensity, thresholds)
    return StormStatus(
        category=threshold.category if threshold else NORMAL_CATEGORY,
        max_intensity=intensity,
        triggering_duration_minutes=duration_minutes,
        alert_level=alert_level_for(threshold),
    )


def classify(
    window: ReadingWindow,
    thresholds: Sequence[IDFThreshold] = IDF_THRESHOLDS,
    cadence_hours: float = OBSERVATION_CADENCE_HOURS,
) -> StormStatus:
    """
    Evaluate a station's window.

    Pure: reads only the window's latest entry. An empty window is Normal
    with zero intensity and zero duration.
    """
    latest = window.latest()
    if latest is None:
        return StormStatus.normal()

    return classify_intensity(
        latest.inches / cadence_hours,
        thresholds,
        duration_minutes=round(cadence_hours * 60),
    )
