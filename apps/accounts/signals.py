import logging

from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Person

User = get_user_model()
logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def create_user_person(sender, instance, created, **kwargs):
    """Every user gets a person record to appear on events with."""
    if not created:
        return
    person, person_created = Person.objects.get_or_create(
        user=instance,
        defaults={
            "first_name": instance.first_name,
            "last_name": instance.last_name,
            "email": instance.email,
        },
    )
    if person_created:
        logger.info(f"Created person {person.pk} for user {instance.username}")
