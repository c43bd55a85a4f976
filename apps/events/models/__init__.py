from .event_models import *
