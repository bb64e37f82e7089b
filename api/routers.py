from django.urls import path
from rest_framework import routers

from posts.views import PostViewSet
from users.views import AuthViewSet
from .views import health


router = routers.DefaultRouter(trailing_slash=False)

# Register all ViewSets
router.register(r'posts', PostViewSet, basename='post')
router.register(r'auth', AuthViewSet, basename='auth')

urlpatterns = [
    path('health', health, name='health'),
] + router.urls
