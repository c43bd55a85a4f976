"""
Core Django project package.

Importing the Celery app here makes sure it is loaded when Django starts,
so `shared_task` decorators in the apps bind to it.
"""

from .celery import app as celery_app

__all__ = ('celery_app',)
