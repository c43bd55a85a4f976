from rest_framework import filters, response, status
from rest_framework import viewsets, permissions, views
from django_filters.rest_framework import DjangoFilterBackend

from .serializers import PortalUserSerializer
from apps.users.models import PortalUser
from core.permissions import IsPortalAdmin


class PortalUserViewSet(viewsets.ModelViewSet):
    '''
    Sub-user management; administrators only.
    '''
    queryset = PortalUser.objects.all()
    serializer_class = PortalUserSerializer
    permission_classes = [IsPortalAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['role', 'is_active', 'is_staff']
    search_fields = ['name', 'username']
    ordering_fields = ['created_at', 'name', 'username']
    ordering = ['-created_at']

    def destroy(self, request, *args, **kwargs):
        if self.get_object().pk == request.user.pk:
            return response.Response(
                {"error": "You cannot delete your own account."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return super().destroy(request, *args, **kwargs)


class RoleListView(views.APIView):
    """
    The sub-user roles with the departments and dashboard each one unlocks.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        roles = [
            {
                "role": value,
                "label": str(label),
                "departments": list(PortalUser.ROLE_DEPARTMENTS.get(value, ())),
                "dashboard": PortalUser.ROLE_DASHBOARDS.get(value),
            }
            for value, label in PortalUser.RoleType.choices
        ]
        return response.Response({"roles": roles})


class HealthCheckView(views.APIView):
    """
    Simple health check endpoint for container health monitoring.
    Returns 200 OK if Django is running.
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return response.Response(
            {"status": "healthy", "service": "django", "secure": request.is_secure(), "scheme": request.scheme},
            status=status.HTTP_200_OK
        )
