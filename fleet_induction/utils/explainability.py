# fleet_induction/utils/explainability.py
from __future__ import annotations

from typing import Any, Dict, List
import os

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from fleet_induction.services.optimizer import TrainsetEvaluation


def _jinja_env() -> Environment:
    base_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")
    return Environment(
        loader=FileSystemLoader(base_dir),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def top_reasons_and_risks(evaluation: TrainsetEvaluation) -> Dict[str, List[str]]:
    """Split score adjustments into positive reasons and negative risks, largest first."""
    adjustments = [
        *evaluation.readiness.readiness_adjustments[1:],  # skip the category base
        *evaluation.readiness.overall_adjustments,
    ]
    reasons = sorted((a for a in adjustments if a[1] > 0), key=lambda a: -a[1])
    risks = sorted((a for a in adjustments if a[1] < 0), key=lambda a: a[1])
    return {
        "top_reasons": [label for label, _ in reasons[:3]],
        "top_risks": [label for label, _ in risks[:3]],
    }


def render_explanation_text(evaluation: TrainsetEvaluation) -> str:
    """Plain-text, operator-facing explanation of one trainset decision."""
    template = _jinja_env().get_template("explanation.txt.j2")
    context: Dict[str, Any] = {
        "trainset": evaluation.trainset,
        "entry": evaluation.to_entry(),
        "suitability": evaluation.classification.suitability,
        "readiness": evaluation.readiness,
        "conflict": evaluation.conflict,
    }
    return template.render(**context).strip() + "\n"
