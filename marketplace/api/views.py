# marketplace/api/views.py
from django.utils import timezone
from rest_framework import viewsets, permissions, status, mixins, exceptions
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.pagination import LimitOffsetPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from marketplace.exceptions import AccessDenied, InvalidInput
from marketplace.models import ServiceCategory, ArtisanProfile, Job, JobMatchingLog, Device
from marketplace.services import jobs as job_service
from marketplace.services.geolocation import validate_coordinates
from marketplace.services.matching import match_artisans_for_job
from marketplace.services.matching_log import matching_analytics
from marketplace.services.pricing import estimate_cost

from .permissions import IsCustomer, IsArtisan, IsMarketplaceAdmin, IsJobOwnerOrAdmin, IsJobParticipant
from .serializers import (
    ServiceCategorySerializer, ArtisanProfileSerializer, ArtisanStatusSerializer,
    JobCreateSerializer, JobSerializer, JobStatusSerializer, AssignArtisanSerializer,
    MatchQuerySerializer, MatchResultSerializer, JobMatchingLogSerializer,
    MatchingAnalyticsQuerySerializer, CostEstimateQuerySerializer, DeviceSerializer,
)


class AccessDeniedMixin:
    """403 au format métier (AccessDenied) au lieu du PermissionDenied DRF."""

    def permission_denied(self, request, message=None, code=None):
        if request.authenticators and not request.successful_authenticator:
            raise exceptions.NotAuthenticated()
        raise AccessDenied(detail=message, code=code)


class JobPagination(LimitOffsetPagination):
    default_limit = 50
    max_limit = 200


# ---- Catégories ----
class ServiceCategoryViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = ServiceCategory.objects.filter(is_active=True)
    serializer_class = ServiceCategorySerializer
    permission_classes = [AllowAny]
    filter_backends = [SearchFilter, OrderingFilter]
    search_fields = ["name", "slug", "description"]
    ordering = ["name"]


# ---- Artisans ----
class ArtisanProfileViewSet(AccessDeniedMixin, viewsets.ReadOnlyModelViewSet):
    queryset = ArtisanProfile.objects.select_related("user").all()
    serializer_class = ArtisanProfileSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ["is_online"]
    ordering = ["-average_rating"]

    @action(detail=False, methods=["post"], url_path="me/status", permission_classes=[IsArtisan])
    def update_status(self, request):
        """
        Body: { "is_online": true, "latitude": ..., "longitude": ... }
        Met à jour la disponibilité et la position courante de l'artisan connecté.
        """
        ser = ArtisanStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        profile = request.user.artisan_profile
        fields = []
        if "is_online" in data:
            profile.is_online = data["is_online"]
            fields.append("is_online")
            if profile.is_online:
                profile.last_seen = timezone.now()
                fields.append("last_seen")
        if "latitude" in data:
            if not validate_coordinates(data["latitude"], data["longitude"]):
                raise InvalidInput("Invalid coordinates.")
            profile.latitude, profile.longitude = data["latitude"], data["longitude"]
            fields += ["latitude", "longitude"]
        profile.save(update_fields=fields)
        return Response(ArtisanProfileSerializer(profile).data)


# ---- Jobs ----
class JobViewSet(AccessDeniedMixin, mixins.CreateModelMixin, mixins.ListModelMixin,
                 mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    queryset = Job.objects.select_related("service", "user", "assigned_artisan__user").all()
    serializer_class = JobSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ["status", "service", "user"]
    ordering = ["-created_at"]
    pagination_class = JobPagination
    lookup_value_regex = r"\d+"

    def get_permissions(self):
        if self.action == "create":
            return [IsAuthenticated(), IsCustomer()]
        if self.action in ("list", "assign", "logs", "analytics"):
            return [IsAuthenticated(), IsMarketplaceAdmin()]
        if self.action in ("retrieve", "matches"):
            return [IsAuthenticated(), IsJobOwnerOrAdmin()]
        if self.action == "update_status":
            return [IsAuthenticated(), IsJobParticipant()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        ser = JobCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        created = job_service.create_job(request.user, ser.to_service_data())
        return Response(JobSerializer(created.job).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"], url_path="my-jobs")
    def my_jobs(self, request):
        qs = self.get_queryset().filter(user=request.user).order_by("-created_at")
        return Response(JobSerializer(qs, many=True).data)

    @action(detail=True, methods=["put"], url_path="status")
    def update_status(self, request, pk=None):
        job = self.get_object()
        ser = JobStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        job = job_service.update_job_status(job.id, ser.validated_data["status"])
        return Response(JobSerializer(job).data)

    @action(detail=True, methods=["post"])
    def assign(self, request, pk=None):
        job = self.get_object()
        ser = AssignArtisanSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        job = job_service.assign_artisan_to_job(job.id, ser.validated_data["artisan_id"])
        return Response(JobSerializer(job).data)

    @action(detail=True, methods=["get"])
    def matches(self, request, pk=None):
        """GET /jobs/{id}/matches/?limit=5 -> artisans classés par score."""
        job = self.get_object()
        query = MatchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        outcome = match_artisans_for_job(job.id, limit=query.validated_data["limit"])
        return Response(MatchResultSerializer(outcome.matches, many=True).data)

    @action(detail=True, methods=["get"])
    def logs(self, request, pk=None):
        job = self.get_object()
        qs = (JobMatchingLog.objects.filter(job=job)
              .select_related("artisan__user")
              .order_by("-match_score", "distance_km"))
        return Response(JobMatchingLogSerializer(qs, many=True).data)

    @action(detail=False, methods=["get"], url_path="analytics/matching")
    def analytics(self, request):
        query = MatchingAnalyticsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response(matching_analytics(**query.validated_data))


# ---- Devices (tokens push) ----
class DeviceViewSet(viewsets.ModelViewSet):
    serializer_class = DeviceSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return Device.objects.filter(user=self.request.user).order_by("-last_active")

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)


# ---- Endpoints “métier” complémentaires ----

@api_view(["GET"])
@permission_classes([AllowAny])
def cost_estimate(request):
    """
    GET /estimate/?service_id=3&description=...&photo_urls=...
    Fourchette de prix indicative pour une catégorie.
    """
    ser = CostEstimateQuerySerializer(data=request.query_params)
    ser.is_valid(raise_exception=True)
    data = ser.validated_data
    estimate = estimate_cost(
        data["service_id"], description=data.get("description"), photo_urls=data.get("photo_urls"),
    )
    return Response(estimate, status=status.HTTP_200_OK)
