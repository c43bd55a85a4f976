from .location_viewsets import (
    RegionViewSet,
    MajlisViewSet,
)
from .member_viewsets import (
    MemberViewSet,
)
from .record_viewsets import (
    ContributionViewSet,
    TarbiyyatReportViewSet,
)
