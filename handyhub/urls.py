# handyhub/urls.py
from django.contrib import admin
from django.http import HttpResponse
from django.urls import path, include

urlpatterns = [
    path("healthz", lambda r: HttpResponse("ok")),
    path('admin/', admin.site.urls),
    path('api/', include('marketplace.api.urls')),
]
