"""
URL configuration for civicfeed project.

All API routes live under /api/; uploaded media is served from MEDIA_URL.
"""
from django.contrib import admin
from django.urls import include, path, re_path
from django.conf import settings
from django.conf.urls.static import static
from rest_framework_simplejwt.views import TokenRefreshView

from api.views import route_not_found

urlpatterns = [
    path('admin/', admin.site.urls),

    # API Routes
    path('api/', include('api.routers')),

    # JWT refresh; login and registration are on the auth viewset
    path('api/auth/token/refresh', TokenRefreshView.as_view(), name='token_refresh'),
]

# Serve uploaded media (development; put a CDN or nginx in front in production)
urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

# Anything else under /api/ answers JSON, DEBUG or not
urlpatterns += [re_path(r'^api/', route_not_found)]

handler404 = 'api.views.route_not_found'
handler500 = 'api.views.server_error'
