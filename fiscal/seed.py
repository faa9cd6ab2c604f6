"""Seed system categories on first run."""

import uuid

from sqlalchemy.orm import Session

from fiscal.models import Category

SYSTEM_CATEGORIES: list[tuple[str, str, str, str]] = [
    # (name, type, icon, color)
    ("Salary", "income", "💼", "#10b981"),
    ("Freelance", "income", "💻", "#3b82f6"),
    ("Investment", "income", "📈", "#8b5cf6"),
    ("Gift", "income", "🎁", "#ec4899"),
    ("Other Income", "income", "💰", "#6366f1"),
    ("Food & Dining", "expense", "🍔", "#ef4444"),
    ("Transportation", "expense", "🚗", "#f59e0b"),
    ("Shopping", "expense", "🛍️", "#ec4899"),
    ("Entertainment", "expense", "🎬", "#8b5cf6"),
    ("Bills & Utilities", "expense", "📄", "#14b8a6"),
    ("Healthcare", "expense", "⚕️", "#ef4444"),
    ("Education", "expense", "📚", "#3b82f6"),
    ("Housing", "expense", "🏠", "#f59e0b"),
    ("Insurance", "expense", "🛡️", "#6366f1"),
    ("Other Expense", "expense", "💸", "#64748b"),
]


def seed_defaults(db: Session) -> None:
    _seed_system_categories(db)
    db.commit()


def _seed_system_categories(db: Session) -> None:
    for name, cat_type, icon, color in SYSTEM_CATEGORIES:
        exists = (
            db.query(Category)
            .filter(Category.is_system.is_(True), Category.name == name, Category.type == cat_type)
            .first()
        )
        if not exists:
            db.add(Category(
                id=str(uuid.uuid4()),
                user_id=None,
                name=name,
                type=cat_type,
                icon=icon,
                color=color,
                is_system=True,
            ))
