from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from projectsync.core.validation import validate_payload
from projectsync.projects.services import get_mutation_coordinator
from projectsync.store import get_record_store
from projectsync.store.records import ProjectFilters
from projectsync.users.authentication import actor_from_request
from projectsync.users.permissions import IsAdminOrReadOnly

from .serializers import ProjectCreateSerializer
from .serializers import ProjectQuerySerializer
from .serializers import ProjectSerializer
from .serializers import ProjectUpdateSerializer

DELETED_MESSAGE = "Project deleted successfully"


@extend_schema_view(
    list=extend_schema(
        tags=["Projects"],
        parameters=[ProjectQuerySerializer],
        responses=ProjectSerializer(many=True),
    ),
    create=extend_schema(
        tags=["Projects"],
        request=ProjectCreateSerializer,
        responses={201: ProjectSerializer},
    ),
    update=extend_schema(
        tags=["Projects"],
        request=ProjectUpdateSerializer,
        responses=ProjectSerializer,
    ),
    destroy=extend_schema(
        tags=["Projects"],
        responses={200: OpenApiResponse(description=DELETED_MESSAGE)},
    ),
)
class ProjectViewSet(viewsets.ViewSet):
    """Projects visible to every signed-in user; writes need the admin role.

    Writes go through the mutation coordinator, which records a notification
    and broadcasts the change to connected clients.
    """

    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]
    lookup_value_regex = "[^/]+"

    def list(self, request):
        query = validate_payload(request.query_params, ProjectQuerySerializer)
        records = get_record_store().list_projects(ProjectFilters(**query))
        return Response(ProjectSerializer(records, many=True).data)

    def create(self, request):
        project = get_mutation_coordinator().create_project(
            actor_from_request(request), request.data
        )
        return Response(ProjectSerializer(project).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        project = get_mutation_coordinator().update_project(
            actor_from_request(request), pk, request.data
        )
        return Response(ProjectSerializer(project).data)

    def destroy(self, request, pk=None):
        get_mutation_coordinator().delete_project(actor_from_request(request), pk)
        return Response({"message": DELETED_MESSAGE})
