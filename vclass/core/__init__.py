"""
Core module containing the classroom object model, enums and exceptions.
"""

from .entities import *
from .exceptions import *
from .enums import *

__all__ = [
    # Entities
    "AbstractEntity",
    "Student",
    "Assignment",
    "Classroom",
    
    # Enums
    "CommandName",
    "CommandStatus",
    "AuditAction",
    
    # Exceptions
    "VClassException",
    "DuplicateClassroomError",
    "ClassroomNotFoundError",
    "InvalidSubmissionContextError",
    "AssignmentNotFoundError",
    "MalformedCommandError",
    "UnknownCommandError",
    "ValidationError",
    "ConcurrencyError",
    "ConfigurationError",
]
