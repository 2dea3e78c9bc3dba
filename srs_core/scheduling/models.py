"""
SQLAlchemy ORM Models for scheduler persistence

Defines the learnable item table and a key/value settings table.
"""

from sqlalchemy import Column, DateTime, Float, Index, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class LearnableItemModel(Base):
    """
    Persistent scheduling state for a single learnable item.
    """
    __tablename__ = 'learnable_items'

    id = Column(String(255), primary_key=True, nullable=False)
    scope = Column(String(64), nullable=True)     # e.g. language code
    label = Column(String(255), nullable=True)    # e.g. the word itself

    # Shared scheduling state
    strength = Column(Integer, nullable=False, default=20)
    interval_days = Column(Integer, nullable=False, default=1)
    ease_factor = Column(Float, nullable=False, default=2.5)
    last_studied = Column(DateTime(timezone=True), nullable=True)
    last_review = Column(DateTime(timezone=True), nullable=True)
    next_due = Column(DateTime(timezone=True), nullable=False)

    # FSRS state (null until the FSRS engine initializes the item)
    fsrs_difficulty = Column(Float, nullable=True)
    fsrs_stability = Column(Float, nullable=True)
    fsrs_lapses = Column(Integer, nullable=True)
    fsrs_last_rating = Column(Integer, nullable=True)  # 0=FAIL, 1=HARD, 2=GOOD, 3=EASY
    fsrs_version = Column(String(50), nullable=True)

    __table_args__ = (
        Index('idx_learnable_items_next_due', 'next_due'),
        Index('idx_learnable_items_scope_due', 'scope', 'next_due'),
    )

    def __repr__(self):
        return f"<LearnableItem({self.id}, due={self.next_due})>"


class SettingModel(Base):
    """Application setting stored as a string value."""
    __tablename__ = 'settings'

    key = Column(String(255), primary_key=True, nullable=False)
    value = Column(String(1024), nullable=True)

    def __repr__(self):
        return f"<Setting({self.key}={self.value!r})>"
