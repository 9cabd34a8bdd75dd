"""
Activity logging for plain CRUD views.

License, invoice and device changes are logged from domain events.
Supporting records (products, plans, companies, banks, users) go
through DRF generic views; this mixin logs their writes.
"""

from accounts.domain.activity import ActivityEntry
from accounts.infrastructure.repositories.django_activity_log_repository import record_activity
from api.permissions import MenuPermission, get_actor_id
from core.domain.value_objects import ActivityAction


class ActivityLoggedMixin:
    """
    Log create, update and delete of the view's model instances.

    Subclasses set ``activity_entity_type`` (an EntityType) and may
    override ``activity_name`` to choose the logged display name.
    """

    permission_classes = [MenuPermission]
    activity_entity_type = None

    def activity_name(self, instance) -> str:
        return str(instance)

    def _record(self, action: ActivityAction, instance, details=None) -> None:
        record_activity(
            ActivityEntry(
                action=action,
                entity_type=self.activity_entity_type,
                entity_name=self.activity_name(instance),
                actor_id=get_actor_id(self.request),
                details=details,
            )
        )

    def perform_create(self, serializer):
        instance = serializer.save()
        self._record(ActivityAction.CREATE, instance)

    def perform_update(self, serializer):
        instance = serializer.save()
        self._record(
            ActivityAction.UPDATE, instance, {"fields": sorted(serializer.validated_data)}
        )

    def perform_destroy(self, instance):
        name = self.activity_name(instance)
        instance.delete()
        record_activity(
            ActivityEntry(
                action=ActivityAction.DELETE,
                entity_type=self.activity_entity_type,
                entity_name=name,
                actor_id=get_actor_id(self.request),
            )
        )
