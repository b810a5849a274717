import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver
from django_fsm.signals import post_transition

from .models import Event, EventRating

logger = logging.getLogger(__name__)


@receiver(post_save, sender=EventRating)
@receiver(post_delete, sender=EventRating)
def event_rating_changed(sender, instance, **kwargs):
    """Keep the denormalised rating counters of the event in sync."""
    try:
        event = Event.objects.get(pk=instance.event_id)
    except Event.DoesNotExist:
        # Event deleted in the same cascade
        return
    event.recalculate_ratings()


@receiver(post_transition, sender=Event)
def event_transitioned(sender, instance, name, source, target, **kwargs):
    logger.info(f"Event {instance.pk} '{instance.title}': {name} {source} -> {target}")
