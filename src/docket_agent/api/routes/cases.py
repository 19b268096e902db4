"""
Case lookup API routes.
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException

from ...utils.errors import DocketAgentError
from ..dependencies import get_case_store

router = APIRouter()


@router.get("/search")
async def search_cases(q: Optional[str] = None, store=Depends(get_case_store)):
    """Search cases by case name, case number or client name"""
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter 'q' is required")

    try:
        cases = await store.search(q.strip())
    except DocketAgentError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())

    return {
        "query": q.strip(),
        "count": len(cases),
        "cases": [case.model_dump() for case in cases]
    }
