"""Error monitor - accumulates validation and render failures for diagnostics.

An ErrorMonitor is created by whoever handles a request and passed explicitly
to the validators and render helpers that should report into it.
"""

import os
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Protocol

from pydantic import BaseModel, Field

from zoo_directory.utils.logging import get_structured_logger, mask_sensitive_data

logger = get_structured_logger(__name__)

RECENT_ERRORS_LIMIT = 10
TOP_ERRORS_LIMIT = 5


class DiagnosticsSink(Protocol):
    """Anything validators can report into."""

    def log_validation_error(self, component: str, error_data: Any, context: Optional[dict] = None) -> None:
        ...


class ErrorEntry(BaseModel):
    """One recorded failure."""
    timestamp: datetime
    component: str
    error_type: str
    error_data: Any = None
    context: dict = Field(default_factory=dict)


def monitoring_enabled() -> bool:
    """Monitoring is on in development or when explicitly enabled."""
    return (
        os.environ.get("ENVIRONMENT", "production").lower() == "development"
        or os.environ.get("ENABLE_ERROR_MONITORING", "false").lower() == "true"
    )


class ErrorMonitor:
    """In-memory error accumulator with simple statistics."""

    def __init__(self, enabled: Optional[bool] = None):
        self.enabled = monitoring_enabled() if enabled is None else enabled
        self.errors: list[ErrorEntry] = []
        self.error_counts: Counter = Counter()

    def log_error(
        self,
        component: str,
        error_type: str,
        error_data: Any = None,
        context: Optional[dict] = None,
    ) -> Optional[ErrorEntry]:
        """Record an error from a component (validator, image, link, map)."""
        if not self.enabled:
            return None

        entry = ErrorEntry(
            timestamp=datetime.now(timezone.utc),
            component=component,
            error_type=error_type,
            error_data=error_data,
            context=context or {},
        )
        self.errors.append(entry)
        self.error_counts[f"{component}:{error_type}"] += 1

        logger.warning(
            f"{component} error: {error_type}",
            component=component,
            error_type=error_type,
            error_data=mask_sensitive_data(str(error_data)),
        )
        return entry

    def log_validation_error(self, component: str, error_data: Any, context: Optional[dict] = None) -> None:
        self.log_error(component, "validation_failed", error_data, context)

    def log_image_error(self, error_data: Any, context: Optional[dict] = None) -> None:
        self.log_error("SafeImage", "image_load_failed", error_data, context)

    def log_link_error(self, error_data: Any, context: Optional[dict] = None) -> None:
        self.log_error("SafeLink", "invalid_link_data", error_data, context)

    def log_map_error(self, error_data: Any, context: Optional[dict] = None) -> None:
        self.log_error("SafeMap", "map_rendering_failed", error_data, context)

    def get_error_stats(self) -> dict:
        """Totals per component and type, the latest entries and the most frequent errors."""
        by_component = Counter(entry.component for entry in self.errors)
        by_type = Counter(entry.error_type for entry in self.errors)
        return {
            "total_errors": len(self.errors),
            "errors_by_component": dict(by_component),
            "errors_by_type": dict(by_type),
            "recent_errors": self.errors[-RECENT_ERRORS_LIMIT:],
            "top_errors": [
                {"error": key, "count": count}
                for key, count in self.error_counts.most_common(TOP_ERRORS_LIMIT)
            ],
        }

    def clear_errors(self) -> None:
        self.errors = []
        self.error_counts.clear()

    def get_error_trends(self, time_window: timedelta = timedelta(hours=24)) -> dict:
        """Errors inside the window, whether they are picking up, and an hourly histogram."""
        cutoff = datetime.now(timezone.utc) - time_window
        recent = [entry for entry in self.errors if entry.timestamp > cutoff]
        return {
            "recent_count": len(recent),
            "trend": self.calculate_trend(recent, cutoff),
            "hourly_breakdown": self.get_hourly_breakdown(recent),
        }

    @staticmethod
    def calculate_trend(entries: list[ErrorEntry], since: Optional[datetime] = None) -> str:
        """Compare error counts in the first and second half of the observed period."""
        if len(entries) < 2:
            return "stable"

        start = since or entries[0].timestamp
        end = datetime.now(timezone.utc)
        midpoint = start + (end - start) / 2
        first_half = sum(1 for entry in entries if entry.timestamp <= midpoint)
        second_half = len(entries) - first_half

        if second_half > first_half * 1.2:
            return "increasing"
        if second_half < first_half * 0.8:
            return "decreasing"
        return "stable"

    @staticmethod
    def get_hourly_breakdown(entries: list[ErrorEntry]) -> dict[int, int]:
        return dict(Counter(entry.timestamp.hour for entry in entries))
