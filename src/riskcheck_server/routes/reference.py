"""Reference data endpoints — classification paths, control types, risk bands, class codes.

Read-only views of the routing data loaded from ``v1/routing.yaml``, the
SDK constants and the cached class-code catalog.
"""

from fastapi import APIRouter, Depends

from riskcheck_rulesets.constants import CONTROL_TYPE_NAMES, LEGAL_ANSWERS
from riskcheck_rulesets.interfaces import CodeCatalog
from riskcheck_rulesets.ruleset import RulesetStore

from riskcheck_server.dependencies import get_code_catalog, get_store

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("/classification")
def list_classification(
    store: RulesetStore = Depends(get_store),
) -> list[dict]:
    """Return every classification path with its tail expanded."""
    return [
        {
            "qid": entry.qid,
            "label": entry.label,
            "questions": list(store.router.resolve(entry.qid)),
        }
        for entry in store.classification
    ]


@router.get("/control-types")
def list_control_types() -> list[dict]:
    """Return the supported control types and their legal answer tokens."""
    return [
        {
            "id": control_type,
            "name": name,
            "answers": list(LEGAL_ANSWERS.get(control_type, ())),
        }
        for control_type, name in CONTROL_TYPE_NAMES.items()
    ]


@router.get("/risk-bands")
def list_risk_bands(
    store: RulesetStore = Depends(get_store),
) -> list[dict]:
    """Return the risk profile bands, highest threshold first."""
    bands = sorted(store.risk_bands, key=lambda b: b.min_score, reverse=True)
    return [band.model_dump() for band in bands]


@router.get("/class-codes")
async def list_class_codes(
    catalog: CodeCatalog = Depends(get_code_catalog),
) -> list[dict]:
    """Return the class-code catalog; empty when the backend is unavailable."""
    codes = await catalog.fetch_codes()
    return [code.model_dump() for code in codes]
