from collections.abc import Mapping

from rest_framework import serializers
from rest_framework.exceptions import ValidationError
from rest_framework.fields import empty


class NestedAttributesSerializer(serializers.ModelSerializer):
    """
    Child serializer for nested attributes: items with an ``id`` update the
    existing row, items without create one, and ``_destroy`` deletes.

    Items with an ``id`` are validated partially, so ``{"id": 3, "_destroy":
    true}`` or an id plus the changed fields is enough.
    """

    id = serializers.IntegerField(required=False)
    _destroy = serializers.BooleanField(required=False, default=False, write_only=True)

    def run_validation(self, data=empty):
        if self.parent is None or not isinstance(data, Mapping):
            return super().run_validation(data)
        # Required fields follow the root's partial flag, so each item is
        # validated on its own: partially when it names an existing row
        item = self.__class__(
            context=self.context, partial=data.get("id") not in (None, "")
        )
        return item.run_validation(data)


def save_nested_attributes(parent, related_name, items, parent_field):
    """
    Apply validated nested ``items`` to ``parent.<related_name>``.

    Ids that do not belong to ``parent`` are rejected.
    """
    manager = getattr(parent, related_name)
    existing = {obj.pk: obj for obj in manager.all()}

    for item in items:
        item = dict(item)
        pk = item.pop("id", None)
        destroy = item.pop("_destroy", False)

        if pk is None:
            if not destroy:
                manager.model.objects.create(**{parent_field: parent}, **item)
            continue

        obj = existing.get(pk)
        if obj is None:
            raise ValidationError(
                {related_name: [f"Object with id {pk} does not belong to {parent}."]}
            )
        if destroy:
            obj.delete()
            continue
        for attr, value in item.items():
            setattr(obj, attr, value)
        obj.save()
