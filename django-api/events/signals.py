"""Django signals for cache invalidation."""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from events.models import Event
from events.stores.django_store import event_code_cache_key


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate the code lookup when an event is saved or deleted."""
    cache.delete(event_code_cache_key(instance.code))
