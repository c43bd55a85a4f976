from rest_framework import permissions


class DepartmentPermission(permissions.BasePermission):
    """
    Server-side role gating for department resources.

    Views declare ``department`` (e.g. "tajneed", "maal"). Staff users may do
    anything; other authenticated sub-users may read, and may write only when
    the view's department is one their role unlocks.
    """
    message = "Your role does not give access to this department."

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if user.is_staff:
            return True
        if request.method in permissions.SAFE_METHODS:
            return True
        department = getattr(view, 'department', None)
        return department is not None and department in user.departments


class IsPortalAdmin(permissions.BasePermission):
    """
    Only staff accounts manage sub-users and organisation structure.
    """

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_staff)


class IsPortalAdminOrReadOnly(IsPortalAdmin):

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return super().has_permission(request, view)


class SectionPermission(permissions.BasePermission):
    """
    Departmental report sections double as departments: a sub-user only
    reaches rows whose section (``view.section_field``) their role unlocks.
    Views also narrow their querysets and check submitted payloads.
    """
    message = "Your role does not give access to this report section."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        user = request.user
        if user.is_staff:
            return True
        section = getattr(obj, getattr(view, 'section_field', 'part'), None)
        return section in user.departments
