"""Task types and task logs.

Beyond lots and single orders, workers earn XP by logging warehouse tasks
(restocking, inventory counts, ...).  Admins maintain the catalogue of task
types; each log snapshots the type's name and computes its XP at log time,
so later edits to a type never rewrite history.
"""

from __future__ import annotations

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class TaskType(BaseModel):
    name = models.CharField(max_length=120, unique=True)
    xp = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    active = models.BooleanField(default=True)

    class Meta:
        db_table = "task_types"
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.xp} XP)"


class TaskLog(BaseModel):
    uid = models.CharField(max_length=128)
    user_name = models.CharField(max_length=255, blank=True, default="")
    task_type = models.ForeignKey(
        "activities.TaskType",
        on_delete=models.PROTECT,
        related_name="logs",
    )
    task_type_name = models.CharField(max_length=120)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    xp = models.PositiveIntegerField(default=0)
    note = models.TextField(blank=True, default="")
    occurred_at = models.DateTimeField()

    class Meta:
        db_table = "task_logs"
        ordering = ["-occurred_at"]
        indexes = [
            models.Index(fields=["uid", "occurred_at"], name="task_logs_uid_date_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.task_type_name} x{self.quantity} by {self.uid}"
