# marketplace/api/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .views import ServiceCategoryViewSet, ArtisanProfileViewSet, JobViewSet, DeviceViewSet, cost_estimate

router = DefaultRouter()
router.register(r'categories', ServiceCategoryViewSet, basename='categories')
router.register(r'artisans', ArtisanProfileViewSet, basename='artisans')
router.register(r'jobs', JobViewSet, basename='jobs')
router.register(r'devices', DeviceViewSet, basename='devices')

urlpatterns = [
    path('', include(router.urls)),
    path('auth/login/', TokenObtainPairView.as_view(), name='jwt-login'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='jwt-refresh'),
    path('estimate/', cost_estimate, name='cost-estimate'),
]
