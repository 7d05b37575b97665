# marketplace/api/serializers.py
from django.conf import settings
from rest_framework import serializers

from marketplace.models import (
    User, ServiceCategory, ArtisanProfile, Job, JobStatus, JobMatchingLog, Device
)


# ========= UTIL READ-ONLY MINI SERIALIZERS =========

class UserMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "first_name", "last_name", "user_type"]


class ServiceCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceCategory
        fields = ["id", "name", "slug", "description", "icon", "is_active"]


class ArtisanMiniSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="display_name", read_only=True)

    class Meta:
        model = ArtisanProfile
        fields = ["id", "name", "photo_url", "average_rating"]


# ========= ARTISANS =========

class ArtisanProfileSerializer(serializers.ModelSerializer):
    user_detail = UserMiniSerializer(source="user", read_only=True)
    categories = serializers.SerializerMethodField()

    class Meta:
        model = ArtisanProfile
        fields = [
            "id", "user_detail", "bio", "photo_url", "experience_years",
            "average_rating", "service_radius_km",
            "is_online", "latitude", "longitude", "last_seen",
            "categories",
        ]
        read_only_fields = fields

    def get_categories(self, obj):
        return [
            {"id": link.category_id, "name": link.category.name, "specialization_level": link.specialization_level}
            for link in obj.service_links.select_related("category")
        ]


class ArtisanStatusSerializer(serializers.Serializer):
    is_online = serializers.BooleanField(required=False)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False)

    def validate(self, attrs):
        has_lat, has_lng = "latitude" in attrs, "longitude" in attrs
        if has_lat != has_lng:
            raise serializers.ValidationError("latitude et longitude vont ensemble.")
        if not attrs:
            raise serializers.ValidationError("Nothing to update.")
        return attrs


# ========= JOBS =========

class JobCreateSerializer(serializers.Serializer):
    service_id = serializers.PrimaryKeyRelatedField(queryset=ServiceCategory.objects.all(), source="service")
    description = serializers.CharField(min_length=10, max_length=1000)
    photo_urls = serializers.ListField(child=serializers.URLField(), required=False, default=list)
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    preferred_time = serializers.DateTimeField(required=False, allow_null=True)

    def to_service_data(self):
        data = dict(self.validated_data)
        data["service_id"] = data.pop("service").pk
        return data


class JobSerializer(serializers.ModelSerializer):
    service_detail = ServiceCategorySerializer(source="service", read_only=True)
    assigned_artisan_detail = ArtisanMiniSerializer(source="assigned_artisan", read_only=True)

    class Meta:
        model = Job
        fields = [
            "id", "user", "service", "service_detail",
            "description", "photo_urls", "latitude", "longitude", "preferred_time",
            "status", "estimated_cost", "actual_cost",
            "assigned_artisan", "assigned_artisan_detail",
            "completed_at", "created_at", "updated_at",
        ]
        read_only_fields = fields


class JobStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=JobStatus.choices)


class AssignArtisanSerializer(serializers.Serializer):
    artisan_id = serializers.IntegerField(min_value=1)


# ========= MATCHING =========

class MatchQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(
        min_value=1,
        max_value=settings.MARKETPLACE["MATCH_LIMIT_MAX"],
        required=False,
        default=settings.MARKETPLACE["MATCH_LIMIT_DEFAULT"],
    )


class MatchResultSerializer(serializers.Serializer):
    artisan_id = serializers.IntegerField()
    artisan_name = serializers.CharField()
    artisan_photo_url = serializers.URLField(allow_null=True)
    match_score = serializers.FloatField()
    distance_km = serializers.FloatField()
    rating = serializers.FloatField()
    specialization_level = serializers.IntegerField()
    is_online = serializers.BooleanField()
    service_radius_km = serializers.FloatField()


class JobMatchingLogSerializer(serializers.ModelSerializer):
    artisan_name = serializers.CharField(source="artisan.display_name", read_only=True)

    class Meta:
        model = JobMatchingLog
        fields = [
            "id", "run_id", "job", "artisan", "artisan_name",
            "match_score", "distance_km", "rating", "specialization_level",
            "within_radius", "is_selected", "notification_sent", "notification_sent_at", "created_at",
        ]
        read_only_fields = fields


class MatchingAnalyticsQuerySerializer(serializers.Serializer):
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
    service_id = serializers.IntegerField(required=False, min_value=1)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and end < start:
            raise serializers.ValidationError("end_date doit être >= start_date.")
        return attrs


# ========= PRICING =========

class CostEstimateQuerySerializer(serializers.Serializer):
    service_id = serializers.IntegerField(min_value=1)
    description = serializers.CharField(min_length=5, max_length=500, required=False)
    photo_urls = serializers.ListField(child=serializers.URLField(), required=False)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False)


# ========= DEVICES =========

class DeviceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Device
        fields = ["id", "device_token", "device_type", "is_active", "last_active", "created_at"]
        read_only_fields = ["last_active", "created_at"]
