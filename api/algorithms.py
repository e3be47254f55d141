"""
Algorithm catalogue API routes for algoviz.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException

from .runners.registry import (
    AlgorithmCategory,
    UnknownAlgorithmError,
    get_algorithm_info,
    list_algorithms,
)

router = APIRouter()


@router.get("/algorithms")
async def get_algorithms(category: Optional[AlgorithmCategory] = None):
    """List every available algorithm, optionally filtered by category."""
    algorithms = list_algorithms()
    if category is not None:
        algorithms = [a for a in algorithms if a["category"] == category.value]
    return {"algorithms": algorithms, "total": len(algorithms)}


@router.get("/algorithms/{algorithm_type}")
async def get_algorithm(algorithm_type: str):
    """Get name, category, complexity and description of one algorithm."""
    try:
        return get_algorithm_info(algorithm_type)
    except UnknownAlgorithmError:
        raise HTTPException(status_code=404, detail=f"Unknown algorithm: {algorithm_type}")
