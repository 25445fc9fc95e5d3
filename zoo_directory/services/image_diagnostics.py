"""Explain image validation failures and suggest fixes to content editors."""

from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from zoo_directory.services.validation import validate_image

Severity = Literal["low", "medium", "high"]

NULL_IMAGE_ISSUE = "Image data is null or undefined"


class ImageDiagnosis(BaseModel):
    issue: str
    severity: Severity = "low"
    fixes: list[str] = Field(default_factory=list)
    debug_info: dict = Field(default_factory=dict)


class ImageValidationReport(BaseModel):
    total_failures: int
    issue_patterns: dict[str, dict] = Field(default_factory=dict)
    severity_breakdown: dict[str, int] = Field(default_factory=lambda: {"high": 0, "medium": 0, "low": 0})
    common_fixes: list[dict] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


def diagnose_image(image: Any, context: Optional[dict] = None) -> ImageDiagnosis:
    """Classify why an image cannot be rendered."""
    asset = image.get("asset") if isinstance(image, Mapping) else None
    debug_info = {
        "image_type": type(image).__name__,
        "is_null": image is None,
        "has_asset": bool(asset),
        "asset_type": type(asset).__name__,
        "context": context or {},
    }

    if not image and not isinstance(image, Mapping):
        return ImageDiagnosis(
            issue=NULL_IMAGE_ISSUE,
            severity="medium",
            fixes=[
                "Check the image field exists in the CMS schema",
                "Verify the image was uploaded in the CMS studio",
                "Check the query projects the image field",
                "Only render the image when the field is present",
            ],
            debug_info=debug_info,
        )

    if not isinstance(image, Mapping):
        return ImageDiagnosis(
            issue="Image data is not an object",
            severity="high",
            fixes=[
                "Image should be an object with an asset reference",
                "Verify the query returns the image object, not a URL string",
            ],
            debug_info=debug_info,
        )

    if not asset:
        return ImageDiagnosis(
            issue="Image missing asset reference",
            severity="high",
            fixes=[
                "Check the image was properly uploaded in the CMS studio",
                "Verify the query includes the asset reference",
                "Try re-uploading the image",
            ],
            debug_info=debug_info,
        )

    if isinstance(asset, Mapping) and not asset.get("_ref") and not asset.get("_id"):
        return ImageDiagnosis(
            issue="Image asset missing _ref",
            severity="high",
            fixes=[
                "Asset should look like {'_ref': 'image-<id>-<w>x<h>-<ext>'}",
                "Check whether the asset reference was dereferenced in the query",
            ],
            debug_info=debug_info,
        )

    result = validate_image(image)
    debug_info["validation_warnings"] = result.warnings
    if not result.is_valid:
        debug_info["validation_errors"] = result.errors
        return ImageDiagnosis(
            issue=f"Validation failed: {', '.join(result.errors)}",
            severity="medium",
            fixes=["Verify the image data structure matches the expected format"],
            debug_info=debug_info,
        )

    return ImageDiagnosis(
        issue="Image appears valid - this might be a false positive",
        severity="low",
        fixes=[
            "Check if the error occurs while loading rather than validating",
            "Check connectivity to the image CDN",
        ],
        debug_info=debug_info,
    )


def create_image_validation_report(failures: Iterable[tuple[Any, Optional[dict]]]) -> ImageValidationReport:
    """Aggregate diagnoses for (image, context) pairs that failed to render."""
    failures = list(failures)
    report = ImageValidationReport(total_failures=len(failures))
    fix_counts: Counter = Counter()

    for image, context in failures:
        diagnosis = diagnose_image(image, context)
        pattern = report.issue_patterns.setdefault(diagnosis.issue, {
            "count": 0,
            "severity": diagnosis.severity,
            "fixes": diagnosis.fixes,
        })
        pattern["count"] += 1
        report.severity_breakdown[diagnosis.severity] += 1

    for pattern in report.issue_patterns.values():
        fix_counts.update(pattern["fixes"])
    report.common_fixes = [{"fix": fix, "count": count} for fix, count in fix_counts.most_common(5)]

    if report.severity_breakdown["high"] > 0:
        report.recommendations.append(
            "High priority: fix missing asset references - these prevent images from loading entirely"
        )
    if report.issue_patterns.get(NULL_IMAGE_ISSUE, {}).get("count", 0) > 0:
        report.recommendations.append("Consider default images or rendering only when an image is set")
    if report.total_failures > 10:
        report.recommendations.append(
            "High failure rate suggests a systematic issue - check the CMS queries and schema"
        )

    return report
