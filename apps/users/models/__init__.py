from .user_models import PortalUser
from .user_manager import PortalUserManager
