"""Schema utilities for exporting and reloading audit reports.

Reports are exchanged as JSON; these helpers expose the JSON Schema of the
report models and validate JSON produced by earlier runs.
"""

import json
from typing import Dict, Any, Optional, Type
from pydantic import BaseModel, ValidationError

from .schemas import AuditReport


def get_json_schema(model_class: Type[BaseModel]) -> Dict[str, Any]:
    """Convert a Pydantic model to JSON Schema.

    Args:
        model_class: The Pydantic model class to convert.

    Returns:
        JSON Schema dictionary.
    """
    return model_class.model_json_schema()


def get_report_schema() -> Dict[str, Any]:
    """Get JSON Schema for the AuditReport model."""
    return get_json_schema(AuditReport)


def validate_and_parse(
    json_str: str, model_class: Type[BaseModel] = AuditReport
) -> tuple[Optional[BaseModel], Optional[str]]:
    """Validate a JSON string against a Pydantic model.

    Args:
        json_str: JSON text, typically a report written by the CLI.
        model_class: Pydantic model class to validate against.

    Returns:
        Tuple of (parsed_model, error_message).
        If valid: (model_instance, None)
        If invalid: (None, error_description)
    """
    try:
        data = json.loads(json_str)
        instance = model_class.model_validate(data)
        return instance, None

    except json.JSONDecodeError as e:
        return None, f"Invalid JSON format: {str(e)}"

    except ValidationError as e:
        errors = []
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            errors.append(f"Field '{field}': {error['type']} - {error.get('msg', '')}")
        return None, "Validation errors:\n" + "\n".join(errors)


def format_report(report: AuditReport) -> str:
    """Render a report as plain text, one block per verdict.

    Args:
        report: The report to render.

    Returns:
        Multi-line text suitable for a console.
    """
    lines = [
        "=" * 70,
        "FOCUS & MOBILE ACCESSIBILITY AUDIT",
        "=" * 70,
        f"URL: {report.target_url}",
    ]
    if report.device:
        lines.append(f"Device: {report.device}")
    lines.append(f"Date: {report.timestamp:%Y-%m-%d %H:%M:%S}")
    lines.append("")

    for verdict in report.verdicts:
        lines.append("-" * 70)
        lines.append(verdict.check_name)
        lines.append(f"Status: {verdict.status.value.upper()}")
        if verdict.expected:
            lines.append(f"Expected: {verdict.expected}")
        lines.append(f"Details: {verdict.summary}")
        if verdict.evidence:
            lines.append("Info:")
            lines.extend(f"  - {item}" for item in verdict.evidence)
        lines.append("")

    counts = report.counts
    lines.append("=" * 70)
    lines.append(
        "Totals: "
        + ", ".join(f"{name}={count}" for name, count in counts.items())
    )
    return "\n".join(lines)
