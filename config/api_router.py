from django.conf import settings
from django.urls import re_path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from projectsync.notifications.api.views import NotificationViewSet
from projectsync.projects.api.views import ProjectViewSet
from projectsync.users.api.views import LoginView

router = DefaultRouter() if settings.DEBUG else SimpleRouter()
# Clients call both `/api/projects` and `/api/projects/`.
router.trailing_slash = "/?"

router.register("projects", ProjectViewSet, basename="projects")
router.register("notifications", NotificationViewSet, basename="notifications")


app_name = "api"
urlpatterns = [
    re_path(r"^auth/login/?$", LoginView.as_view(), name="auth-login"),
    *router.urls,
]
