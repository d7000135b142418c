"""Exportación JSON de los resultados del lote.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines.
- Los resultados solo llevan posiciones, así que el fichero no contiene secretos.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from core.domain.models import BatchOutcome, ExposureResult, SkippedCredential


def outcomes_payload(outcomes: Iterable[BatchOutcome], *, aborted: str | None = None) -> dict[str, object]:
    results: list[dict[str, object]] = []
    skipped: list[dict[str, object]] = []
    for outcome in outcomes:
        if isinstance(outcome, SkippedCredential):
            skipped.append(outcome.model_dump(mode="json"))
        elif isinstance(outcome, ExposureResult):
            results.append(outcome.model_dump(mode="json"))
    return {
        "results": results,
        "skipped": skipped,
        "exposed_count": sum(1 for r in results if r["exposed"]),
        "aborted": aborted,
    }


def export_outcomes_json(
    *,
    outcomes: Iterable[BatchOutcome],
    output_path: Path,
    aborted: str | None = None,
) -> Path:
    """Exporta los resultados a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = outcomes_payload(outcomes, aborted=aborted)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
