"""Human-readable durations for steps, storage and total time."""

import math
import re
from collections.abc import Iterable

from recipeshape.ingest.schemas import (
    Duration,
    HoursMinutes,
    Instruction,
    InstructionRecord,
    MinutesDuration,
    MinutesRange,
    StorageMethod,
    Timing,
)
from recipeshape.logging_config import get_logger
from recipeshape.quantities import number_text, round_half_up

logger = get_logger(__name__)

PASSIVE_SUFFIX = " (passive)"
UNSPECIFIED_STORAGE = "unspecified"

# Atomic ISO-8601 durations, checked in priority order
ISO_DURATION_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"P(\d+)D"), "day"),
    (re.compile(r"P(\d+)W"), "week"),
    (re.compile(r"P(\d+)M"), "month"),
    (re.compile(r"PT(\d+)H"), "hour"),
)


# =============================================================================
# Step timing
# =============================================================================


def _duration_parts(duration: Duration) -> list[str]:
    """Render a duration as compact parts such as ["1h", "30m"]."""
    if isinstance(duration, MinutesRange):
        return [f"{number_text(duration.min_minutes)}-{number_text(duration.max_minutes)}m"]

    if isinstance(duration, MinutesDuration):
        if duration.minutes <= 0:
            return []
        if duration.minutes >= 60:
            hours, minutes = divmod(duration.minutes, 60)
            parts = [f"{number_text(hours)}h"]
            if minutes:
                parts.append(f"{number_text(minutes)}m")
            return parts
        return [f"{number_text(duration.minutes)}m"]

    if isinstance(duration, HoursMinutes):
        parts = []
        if duration.hours:
            parts.append(f"{number_text(duration.hours)}h")
        if duration.minutes:
            parts.append(f"{number_text(duration.minutes)}m")
        return parts

    return []


def format_timing(timing: Timing | None) -> str | None:
    """
    Format step timing for display.

    Examples:
        {minutes: 90} -> "1h 30m"
        {minMinutes: 5, maxMinutes: 7} -> "5-7m"
        {hours: 2} with passive activity -> "2h (passive)"
        no duration, cue "until golden" -> "until golden"

    Returns None when there is neither a duration nor a completion cue.
    """
    if timing is None:
        return None

    text: str | None = None
    if timing.duration is not None:
        parts = _duration_parts(timing.duration)
        if parts:
            text = " ".join(parts)
        else:
            logger.debug("Timing duration produced no parts, using completion cue")

    if text is None:
        text = timing.completion_cue

    if text is None:
        return None

    if timing.activity == "passive":
        text += PASSIVE_SUFFIX

    return text


# =============================================================================
# Storage
# =============================================================================


def _plural(count: int, word: str) -> str:
    return f"1 {word}" if count == 1 else f"{count} {word}s"


def parse_iso_duration_text(iso8601: str | None) -> str | None:
    """Render an atomic ISO-8601 duration ("P3D" -> "3 days")."""
    if not iso8601:
        return None

    for pattern, word in ISO_DURATION_PATTERNS:
        match = pattern.search(iso8601)
        if match:
            return _plural(int(match.group(1)), word)

    return None


def format_storage_duration(method: StorageMethod) -> str:
    """
    Format how long food keeps in one storage location.

    A note that says something other than the parsed duration wins, since
    notes carry the detail ("in an airtight container"). Without a
    parseable duration the note is used, then the "unspecified" marker.
    """
    parsed = parse_iso_duration_text(method.iso8601)

    if method.notes and method.notes != parsed:
        return method.notes

    return parsed or method.notes or UNSPECIFIED_STORAGE


# =============================================================================
# Total time
# =============================================================================


def format_minutes(total_minutes: int) -> str:
    """Format a minute count as "45 min", "2 hr" or "1 hr 15 min"."""
    hours, minutes = divmod(total_minutes, 60)

    if hours == 0:
        return f"{minutes} min"
    if minutes == 0:
        return f"{hours} hr"
    return f"{hours} hr {minutes} min"


def _duration_minutes(duration: Duration) -> float:
    if isinstance(duration, MinutesRange):
        return (duration.min_minutes + duration.max_minutes) / 2
    if isinstance(duration, MinutesDuration):
        return duration.minutes
    if isinstance(duration, HoursMinutes):
        return duration.hours * 60 + duration.minutes
    return 0


def sum_instruction_minutes(instructions: Iterable[Instruction]) -> int | None:
    """
    Sum the timed duration of all structured steps.

    Ranges count as their midpoint and the total is rounded once at the
    end. A zero or overflowing total means no timing is known, so None is
    returned.
    """
    total = 0.0
    for step in instructions:
        if isinstance(step, InstructionRecord) and step.timing and step.timing.duration:
            total += _duration_minutes(step.timing.duration)

    if not math.isfinite(total):
        logger.debug("Step durations overflowed, total time unknown")
        return None

    rounded = round_half_up(total)
    if rounded <= 0:
        return None
    return rounded
