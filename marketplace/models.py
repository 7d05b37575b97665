import uuid
from decimal import Decimal

from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone


# ---- USERS ----

class User(AbstractUser):
    email = models.EmailField(unique=True)

    USER_TYPES = (
        ('customer', 'Customer'),
        ('artisan', 'Artisan'),
        ('admin', 'Administrator'),
    )
    user_type = models.CharField(max_length=20, choices=USER_TYPES, default='customer', db_index=True)

    # E.164 (ex: +2348012345678)
    phone = models.CharField(max_length=20, blank=True, null=True, unique=True, db_index=True)

    @property
    def is_marketplace_admin(self) -> bool:
        return self.user_type == 'admin' or self.is_staff

    def __str__(self):
        return f"{self.get_full_name() or self.username} ({self.user_type or '-'})"


# ---- CATALOGUE ----

class ServiceCategory(models.Model):
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(unique=True)
    description = models.TextField(blank=True, null=True)
    icon = models.CharField(max_length=50, blank=True, null=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name_plural = "Service Categories"
        ordering = ["name"]

    def __str__(self):
        return self.name


# ---- ARTISAN PROFILE ----

class ArtisanProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='artisan_profile')
    bio = models.TextField(blank=True, null=True)
    photo_url = models.URLField(blank=True, null=True)
    categories = models.ManyToManyField(
        ServiceCategory, through='ArtisanServiceCategory', related_name='artisans', blank=True
    )
    experience_years = models.PositiveIntegerField(default=0)

    average_rating = models.FloatField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(5)]
    )
    service_radius_km = models.FloatField(default=10, validators=[MinValueValidator(0)])

    # position courante, mise à jour par l'artisan
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    is_online = models.BooleanField(default=False, db_index=True)
    last_seen = models.DateTimeField(null=True, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=["is_online", "latitude", "longitude"], name="ap_online_position_idx"),
            models.Index(fields=["average_rating"], name="ap_rating_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(average_rating__gte=0, average_rating__lte=5), name="ap_rating_0_5"
            ),
            models.CheckConstraint(condition=Q(service_radius_km__gte=0), name="ap_radius_gte_0"),
        ]

    @property
    def display_name(self) -> str:
        return self.user.get_full_name() or self.user.username

    def __str__(self):
        return f"Artisan {self.display_name}"


class ArtisanServiceCategory(models.Model):
    artisan = models.ForeignKey(ArtisanProfile, on_delete=models.CASCADE, related_name='service_links')
    category = models.ForeignKey(ServiceCategory, on_delete=models.CASCADE, related_name='artisan_links')
    specialization_level = models.PositiveSmallIntegerField(
        null=True, blank=True, default=1,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["artisan", "category"], name="uniq_artisan_category"),
        ]

    def __str__(self):
        return f"{self.artisan} - {self.category} (niv. {self.specialization_level})"


# ---- JOBS ----

class JobStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    ASSIGNED = 'ASSIGNED', 'Assigned'
    IN_PROGRESS = 'IN_PROGRESS', 'In progress'
    COMPLETED = 'COMPLETED', 'Completed'
    CANCELLED = 'CANCELLED', 'Cancelled'
    EXPIRED = 'EXPIRED', 'Expired'


TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED, JobStatus.EXPIRED})


class Job(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='jobs', db_index=True)
    service = models.ForeignKey(ServiceCategory, on_delete=models.PROTECT, related_name='jobs', db_index=True)
    description = models.TextField()
    photo_urls = models.JSONField(default=list, blank=True)
    latitude = models.FloatField()
    longitude = models.FloatField()
    preferred_time = models.DateTimeField(null=True, blank=True)

    status = models.CharField(max_length=20, choices=JobStatus.choices, default=JobStatus.PENDING, db_index=True)
    estimated_cost = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(Decimal('0'))]
    )
    actual_cost = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(Decimal('0'))]
    )
    assigned_artisan = models.ForeignKey(
        ArtisanProfile, on_delete=models.SET_NULL, null=True, blank=True, related_name='assigned_jobs'
    )
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=["status", "created_at"], name="job_status_created_idx"),
            models.Index(fields=["user", "created_at"], name="job_user_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(latitude__gte=-90, latitude__lte=90), name="job_latitude_range"),
            models.CheckConstraint(condition=Q(longitude__gte=-180, longitude__lte=180), name="job_longitude_range"),
        ]

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def __str__(self):
        return f"Job #{self.id} - {self.service} ({self.status})"


class JobMatchingLog(models.Model):
    """
    Une ligne par artisan évalué lors d'un passage de matching.
    Append-only: jamais mise à jour après l'insertion groupée.
    """
    run_id = models.UUIDField(default=uuid.uuid4, db_index=True)
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='matching_logs')
    artisan = models.ForeignKey(ArtisanProfile, on_delete=models.CASCADE, related_name='matching_logs')
    match_score = models.FloatField()
    distance_km = models.FloatField()
    rating = models.FloatField()
    specialization_level = models.PositiveSmallIntegerField()
    within_radius = models.BooleanField(default=True)
    is_selected = models.BooleanField(default=False, db_index=True)
    notification_sent = models.BooleanField(default=False)
    notification_sent_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-match_score']
        indexes = [
            models.Index(fields=["job", "-match_score"], name="jml_job_score_idx"),
        ]
        constraints = [
            models.UniqueConstraint(fields=["run_id", "artisan"], name="uniq_run_artisan"),
        ]

    def __str__(self):
        return f"Log job #{self.job_id} / artisan #{self.artisan_id} ({self.match_score})"


# ---- PUSH ----

class Device(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='devices')
    device_token = models.CharField(max_length=255, unique=True)
    device_type = models.CharField(max_length=50, choices=[
        ('android', 'Android'),
        ('ios', 'iOS'),
        ('web', 'Web'),
    ])
    is_active = models.BooleanField(default=True, db_index=True)
    last_active = models.DateTimeField(auto_now=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Device {self.device_type} pour {self.user}"
