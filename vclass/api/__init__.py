"""
API module for the REST implementation.
"""

from .rest_api import ClassroomRestAPI

__all__ = [
    "ClassroomRestAPI",
]
