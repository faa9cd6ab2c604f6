"""Savings goal endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fiscal.auth import CurrentUser
from fiscal.database import get_db
from fiscal.models import User
from fiscal.schemas import AddMoneyRequest, GoalCreate, GoalOut, GoalUpdate, SuccessResponse
from fiscal.services import goal_service

router = APIRouter(prefix="/v1")


@router.get("/goals", response_model=list[GoalOut])
async def list_goals(user: User = CurrentUser, db: Session = Depends(get_db)):
    return [GoalOut.model_validate(g) for g in goal_service.list_goals(db, user.id)]


@router.post("/goals", response_model=GoalOut, status_code=201)
async def create_goal(body: GoalCreate, user: User = CurrentUser, db: Session = Depends(get_db)):
    return GoalOut.model_validate(goal_service.create_goal(db, user.id, body))


@router.patch("/goals/{goal_id}", response_model=GoalOut)
async def update_goal(goal_id: str, body: GoalUpdate, user: User = CurrentUser, db: Session = Depends(get_db)):
    return GoalOut.model_validate(goal_service.update_goal(db, user.id, goal_id, body))


@router.delete("/goals/{goal_id}", response_model=SuccessResponse)
async def delete_goal(goal_id: str, user: User = CurrentUser, db: Session = Depends(get_db)):
    goal_service.delete_goal(db, user.id, goal_id)
    return SuccessResponse()


@router.post("/goals/{goal_id}/add-money", response_model=GoalOut)
async def add_money(goal_id: str, body: AddMoneyRequest, user: User = CurrentUser, db: Session = Depends(get_db)):
    return GoalOut.model_validate(goal_service.add_money(db, user.id, goal_id, body.amount))
