"""
Device model.
"""
import uuid

from django.db import models
from django.utils import timezone


class Device(models.Model):
    """
    A machine bound to a license.
    Active devices count against the plan's device limit.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license = models.ForeignKey(
        "licenses.License", on_delete=models.CASCADE, related_name="devices"
    )
    computer_id = models.CharField(max_length=255, help_text="Stable machine identifier")
    name = models.CharField(max_length=255, blank=True, null=True)
    processor = models.CharField(max_length=255, blank=True, null=True)
    os = models.CharField(max_length=255, blank=True, null=True)
    ram = models.CharField(max_length=100, blank=True, null=True)
    is_active = models.BooleanField(default=True, db_index=True)
    activated_at = models.DateTimeField(default=timezone.now)
    last_seen_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "devices"
        unique_together = [["license", "computer_id"]]
        ordering = ["-activated_at"]
        indexes = [
            models.Index(fields=["license", "is_active"]),
        ]

    def __str__(self):
        return f"{self.name or self.computer_id} ({self.license_id})"
