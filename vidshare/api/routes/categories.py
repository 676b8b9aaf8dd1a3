from typing import List

from fastapi import APIRouter, Depends

from vidshare.api.deps import require_user_id
from vidshare.api.schemas import CategoryCreate, CategoryOut
from vidshare.features.catalog.service.api import catalog

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
def list_categories():
    return catalog.list_categories()


@router.post("", response_model=CategoryOut, status_code=201, dependencies=[Depends(require_user_id)])
def create_category(body: CategoryCreate):
    return catalog.create_category(body.model_dump(exclude_none=True))
