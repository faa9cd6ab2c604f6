"""Category endpoints: list (system + own), create, update, delete."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fiscal.auth import CurrentUser
from fiscal.database import get_db
from fiscal.models import User
from fiscal.schemas import CategoryCreate, CategoryOut, CategoryUpdate, SuccessResponse, TransactionType
from fiscal.services import category_service

router = APIRouter(prefix="/v1")


@router.get("/categories", response_model=list[CategoryOut])
async def list_categories(
    type: TransactionType | None = None,
    user: User = CurrentUser,
    db: Session = Depends(get_db),
):
    cats = category_service.list_categories(db, user.id, type.value if type else None)
    return [CategoryOut.model_validate(c) for c in cats]


@router.post("/categories", response_model=CategoryOut, status_code=201)
async def create_category(body: CategoryCreate, user: User = CurrentUser, db: Session = Depends(get_db)):
    return CategoryOut.model_validate(category_service.create_category(db, user.id, body))


@router.patch("/categories/{category_id}", response_model=CategoryOut)
async def update_category(
    category_id: str, body: CategoryUpdate, user: User = CurrentUser, db: Session = Depends(get_db),
):
    return CategoryOut.model_validate(category_service.update_category(db, user.id, category_id, body))


@router.delete("/categories/{category_id}", response_model=SuccessResponse)
async def delete_category(category_id: str, user: User = CurrentUser, db: Session = Depends(get_db)):
    category_service.delete_category(db, user.id, category_id)
    return SuccessResponse()
