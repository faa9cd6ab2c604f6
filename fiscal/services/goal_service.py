"""Savings goals."""

from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy.orm import Session

from fiscal.database import unit_of_work
from fiscal.errors import NotFoundError
from fiscal.models import Goal
from fiscal.schemas import GoalCreate, GoalUpdate


def list_goals(db: Session, owner_id: str) -> list[Goal]:
    return (
        db.query(Goal)
        .filter(Goal.user_id == owner_id)
        .order_by(Goal.is_completed, Goal.created_at)
        .all()
    )


def get_goal(db: Session, owner_id: str, goal_id: str) -> Goal:
    goal = db.query(Goal).filter(Goal.id == goal_id, Goal.user_id == owner_id).first()
    if goal is None:
        raise NotFoundError("Goal not found")
    return goal


def create_goal(db: Session, owner_id: str, data: GoalCreate) -> Goal:
    goal = Goal(
        id=str(uuid.uuid4()),
        user_id=owner_id,
        name=data.name,
        target_amount=data.target_amount,
        current_amount=data.current_amount,
        deadline=data.deadline.isoformat() if data.deadline else None,
        icon=data.icon,
        color=data.color,
        is_completed=data.current_amount >= data.target_amount,
    )
    with unit_of_work(db):
        db.add(goal)
    db.refresh(goal)
    return goal


def update_goal(db: Session, owner_id: str, goal_id: str, data: GoalUpdate) -> Goal:
    goal = get_goal(db, owner_id, goal_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("deadline") is not None:
        changes["deadline"] = changes["deadline"].isoformat()
    with unit_of_work(db):
        for field, value in changes.items():
            if value is None and field not in ("deadline", "icon", "color"):
                continue
            setattr(goal, field, value)
        if changes.get("is_completed") is None:
            goal.is_completed = goal.current_amount >= goal.target_amount
    db.refresh(goal)
    return goal


def delete_goal(db: Session, owner_id: str, goal_id: str) -> None:
    goal = get_goal(db, owner_id, goal_id)
    with unit_of_work(db):
        db.delete(goal)


def add_money(db: Session, owner_id: str, goal_id: str, amount: Decimal) -> Goal:
    """Add ``amount`` to the goal's savings; reaching the target completes it."""
    with unit_of_work(db):
        goal = get_goal(db, owner_id, goal_id)
        goal.current_amount = goal.current_amount + amount
        if goal.current_amount >= goal.target_amount:
            goal.is_completed = True
    db.refresh(goal)
    return goal
