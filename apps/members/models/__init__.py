from .location_models import *
from .member_models import *
from .contribution_models import *
from .tarbiyyat_models import *
