"""JSON export of a pipeline report.

Lets CI jobs keep a machine-readable trace of what was built, copied,
committed and pushed.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import PipelineReport


def export_report_json(*, report: PipelineReport, output_path: Path) -> Path:
    """Export `PipelineReport` to UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = report.model_dump(mode="json")
    payload["ok"] = report.ok
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
