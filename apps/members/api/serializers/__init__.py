from .location_serializers import (
    RegionSerializer,
    MajlisSerializer,
    NestedMajlisSerializer,
)
from .member_serializers import (
    MemberSerializer,
    SimplifiedMemberSerializer,
)
from .record_serializers import (
    ContributionSerializer,
    TarbiyyatReportSerializer,
)
