from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import (
    User, ServiceCategory, ArtisanProfile, ArtisanServiceCategory, Job, JobMatchingLog, Device
)


class CustomUserAdmin(UserAdmin):
    model = User
    list_display = ('username', 'email', 'phone', 'user_type', 'is_staff')
    list_filter = ('user_type', 'is_staff', 'is_superuser')
    search_fields = ('username', 'email', 'phone', 'first_name', 'last_name')
    ordering = ('-date_joined',)

    fieldsets = UserAdmin.fieldsets + (
        ('Marketplace', {'fields': ('user_type', 'phone')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Marketplace', {'fields': ('email', 'user_type', 'phone')}),
    )


class ArtisanServiceCategoryInline(admin.TabularInline):
    model = ArtisanServiceCategory
    extra = 1
    autocomplete_fields = ('category',)


@admin.register(ArtisanProfile)
class ArtisanProfileAdmin(admin.ModelAdmin):
    list_display = ('display_name', 'is_online', 'average_rating', 'service_radius_km', 'latitude', 'longitude',
                    'last_seen')
    list_filter = ('is_online',)
    search_fields = ('user__username', 'user__first_name', 'user__last_name', 'user__email')
    inlines = [ArtisanServiceCategoryInline]


@admin.register(ServiceCategory)
class ServiceCategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('name', 'slug')
    prepopulated_fields = {'slug': ('name',)}


class JobMatchingLogInline(admin.TabularInline):
    model = JobMatchingLog
    extra = 0
    can_delete = False
    readonly_fields = ('run_id', 'artisan', 'match_score', 'distance_km', 'rating', 'specialization_level',
                       'within_radius', 'is_selected', 'notification_sent', 'notification_sent_at', 'created_at')

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'service', 'status', 'assigned_artisan', 'created_at')
    list_filter = ('status', 'service')
    search_fields = ('description', 'user__email')
    date_hierarchy = 'created_at'
    raw_id_fields = ('user', 'assigned_artisan')
    inlines = [JobMatchingLogInline]


@admin.register(JobMatchingLog)
class JobMatchingLogAdmin(admin.ModelAdmin):
    list_display = ('job', 'artisan', 'match_score', 'distance_km', 'within_radius', 'is_selected', 'created_at')
    list_filter = ('is_selected', 'within_radius', 'notification_sent')

    # journal append-only
    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Device)
class DeviceAdmin(admin.ModelAdmin):
    list_display = ('user', 'device_type', 'is_active', 'last_active')
    list_filter = ('device_type', 'is_active')
    search_fields = ('user__email', 'device_token')


admin.site.register(User, CustomUserAdmin)
