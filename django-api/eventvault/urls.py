from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("events.urls")),
] + static(settings.UPLOAD_URL, document_root=settings.UPLOAD_ROOT)
