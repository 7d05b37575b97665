import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from marketplace.models import User, ArtisanProfile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def create_artisan_profile(sender, instance, created, **kwargs):
    if created and instance.user_type == 'artisan':
        # Vérifie qu'il n'existe pas déjà un profil
        _, made = ArtisanProfile.objects.get_or_create(user=instance)
        if made:
            logger.debug("Artisan profile created for user #%s", instance.pk)
