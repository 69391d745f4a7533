"""
API endpoints for the flower catalog.
"""

import re
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas import RatingRequest
from app.services.catalog_service import CatalogService, get_catalog

router = APIRouter()

FLOWER_ID_PATTERN = re.compile(r"^\d+$")


def _parse_flower_id(flower_id: str) -> int:
    if not FLOWER_ID_PATTERN.match(flower_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid ID format")
    return int(flower_id)


@router.get("", response_model=List[Dict[str, Any]])
async def list_flowers(catalog: CatalogService = Depends(get_catalog)):
    """List all flowers."""
    return catalog.list_flowers()


@router.get("/{flower_id}", response_model=Dict[str, Any])
async def get_flower(flower_id: str, catalog: CatalogService = Depends(get_catalog)):
    flower = catalog.get_flower(_parse_flower_id(flower_id))
    if not flower:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Цветок не найден")
    return flower


@router.patch("/{flower_id}", response_model=Dict[str, Any])
async def rate_flower(
    flower_id: str,
    data: RatingRequest,
    catalog: CatalogService = Depends(get_catalog),
):
    """Add a 1-5 rating to the flower's average."""
    flower = await catalog.rate_flower(_parse_flower_id(flower_id), data.rating)
    if not flower:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Цветок не найден")
    return {"success": True, "flower": flower}
