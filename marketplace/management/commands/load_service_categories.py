# marketplace/management/commands/load_service_categories.py

from django.core.management.base import BaseCommand
from django.utils.text import slugify

from marketplace.models import ServiceCategory

CATEGORIES = [
    {"name": "Plumbing", "icon": "fas fa-faucet",
     "description": "Professional plumbing services including repairs, installations, and maintenance"},
    {"name": "Electrical", "icon": "fas fa-bolt",
     "description": "Electrical repairs, installations, and safety inspections"},
    {"name": "Carpentry", "icon": "fas fa-hammer",
     "description": "Woodworking, furniture repair, and general carpentry services"},
    {"name": "Cleaning", "icon": "fas fa-broom", "description": "Home and office cleaning"},
    {"name": "Painting", "icon": "fas fa-paint-roller", "description": "Interior and exterior painting"},
    {"name": "Gardening", "icon": "fas fa-seedling", "description": "Garden upkeep and landscaping"},
    {"name": "General Maintenance", "icon": "fas fa-tools", "description": "Small repairs around the house"},
]


class Command(BaseCommand):
    help = "Charge les catégories de services prédéfinies dans la base."

    def handle(self, *args, **kwargs):
        for cat in CATEGORIES:
            obj, created = ServiceCategory.objects.get_or_create(
                name=cat["name"],
                defaults={
                    "slug": slugify(cat["name"]),
                    "description": cat["description"],
                    "icon": cat["icon"],
                    "is_active": True,
                }
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f"Created: {obj.name}"))
            else:
                self.stdout.write(f"Already present: {obj.name}")
