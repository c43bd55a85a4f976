from .report_models import *
