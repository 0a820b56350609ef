import enum

from sqlalchemy import Column, String, Text, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class TaskStatus(enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

    def next(self) -> "TaskStatus":
        """PENDING -> IN_PROGRESS -> COMPLETED -> PENDING"""
        order = list(TaskStatus)
        return order[(order.index(self) + 1) % len(order)]


class Task(BaseModel, Base):
    __tablename__ = "tasks"

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        Enum(TaskStatus, name="task_status", native_enum=False, length=20),
        nullable=False,
        default=TaskStatus.PENDING,
    )
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    user = relationship("User", back_populates="tasks")

    __table_args__ = (
        Index("ix_tasks_user_created", "user_id", "created_at"),
    )
