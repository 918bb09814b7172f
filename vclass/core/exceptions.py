"""
Custom exceptions for the VClass registry.
"""

from typing import Optional, Any, Dict


class VClassException(Exception):
    """Base exception for all VClass-related errors."""
    
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class DuplicateClassroomError(VClassException):
    """Raised when creating a classroom whose name is already taken."""
    
    def __init__(self, name: str):
        super().__init__(f"Classroom already exists: {name}", "duplicate_classroom", {'name': name})


class ClassroomNotFoundError(VClassException):
    """Raised when a classroom lookup fails."""
    
    def __init__(self, name: str):
        super().__init__(f"Classroom not found: {name}", "classroom_not_found", {'name': name})


class InvalidSubmissionContextError(VClassException):
    """Raised when the classroom is missing or the student is not enrolled in it."""
    
    def __init__(self, student_id: str, class_name: str):
        super().__init__(
            "Invalid classroom or student for submission.",
            "invalid_submission_context",
            {'student_id': student_id, 'class_name': class_name}
        )


class AssignmentNotFoundError(VClassException):
    """Raised when no assignment in the classroom matches the prompt."""
    
    def __init__(self, class_name: str, prompt: str):
        super().__init__(
            f"Assignment not found in class: {class_name}",
            "assignment_not_found",
            {'class_name': class_name, 'prompt': prompt}
        )


class MalformedCommandError(VClassException):
    """Raised when a command line carries the wrong number of arguments."""
    
    def __init__(self, command: str, usage: str):
        super().__init__(f"Malformed command: usage: {usage}", "malformed_command", {'command': command})


class UnknownCommandError(VClassException):
    """Raised when the command name is not recognised."""
    
    def __init__(self, command: str):
        super().__init__("Unknown command. Type 'help' for commands.", "unknown_command", {'command': command})


class ValidationError(VClassException):
    """Raised when entity data validation fails."""
    pass


class ConcurrencyError(VClassException):
    """Raised when a registry lock cannot be acquired in time."""
    pass


class ConfigurationError(VClassException):
    """Raised when configuration is invalid."""
    pass
