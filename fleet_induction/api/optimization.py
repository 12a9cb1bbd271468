# fleet_induction/api/optimization.py
from fastapi import APIRouter, HTTPException
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from pydantic import BaseModel, Field

from fleet_induction.config import get_policy
from fleet_induction.models.errors import InvalidTrainsetError
from fleet_induction.services.optimizer import InductionOptimizer
from fleet_induction.utils.explainability import render_explanation_text, top_reasons_and_risks

router = APIRouter()
logger = logging.getLogger(__name__)


class OptimizationRunRequest(BaseModel):
    # Raw records; validated by the engine so errors carry the offending index
    trainsets: List[Dict[str, Any]] = Field(default_factory=list)
    seed: Optional[int] = Field(default=None, description="Fix the jitter stream for a reproducible run")
    now: Optional[datetime] = Field(default=None, description="Planning clock; defaults to the server clock")


class ExplanationRequest(BaseModel):
    trainset: Dict[str, Any]
    seed: Optional[int] = None
    now: Optional[datetime] = None


def _invalid_input(e: InvalidTrainsetError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"message": str(e), "index": e.index, "trainsetId": e.trainset_id, "errors": e.errors()},
    )


@router.post("/run")
def run_optimization(request: OptimizationRunRequest):
    """Assign every trainset in the snapshot and return the full optimization result"""
    optimizer = InductionOptimizer()
    try:
        result = optimizer.optimize(
            request.trainsets,
            random_source=optimizer.new_random_source(request.seed),
            now=request.now,
        )
    except InvalidTrainsetError as e:
        logger.warning(f"Rejected fleet snapshot: {e}")
        raise _invalid_input(e)
    except Exception as e:
        logger.error(f"Optimization failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Optimization failed: {str(e)}")

    return result.model_dump(mode="json", by_alias=True)


@router.post("/explain")
def explain_trainset(request: ExplanationRequest):
    """Explain the decision and scores for a single trainset"""
    optimizer = InductionOptimizer()
    try:
        _, evaluations = optimizer.evaluate_fleet(
            [request.trainset],
            random_source=optimizer.new_random_source(request.seed),
            now=request.now,
        )
    except InvalidTrainsetError as e:
        raise _invalid_input(e)
    except Exception as e:
        logger.error(f"Explanation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Explanation failed: {str(e)}")

    evaluation = evaluations[0]
    summary = top_reasons_and_risks(evaluation)
    return {
        "trainsetId": evaluation.trainset.id,
        "assignment": evaluation.classification.assignment.value,
        "topReasons": summary["top_reasons"],
        "topRisks": summary["top_risks"],
        "explanation": render_explanation_text(evaluation),
    }


@router.get("/policy")
def get_active_policy():
    """Policy constants currently applied by the engine"""
    return get_policy().model_dump()
