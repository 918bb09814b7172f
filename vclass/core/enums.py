"""
Enumerations and constants for the VClass registry.
"""

from enum import Enum


class CommandName(Enum):
    """Commands understood by the interpreter."""
    ADD_CLASSROOM = "add_classroom"
    REMOVE_CLASSROOM = "remove_classroom"
    LIST_CLASSROOMS = "list_classrooms"
    ADD_STUDENT = "add_student"
    LIST_STUDENTS = "list_students"
    SCHEDULE_ASSIGNMENT = "schedule_assignment"
    SUBMIT_ASSIGNMENT = "submit_assignment"
    LIST_ASSIGNMENTS = "list_assignments"
    CHECK_SUBMISSION = "check_submission"
    HELP = "help"
    EXIT = "exit"


class CommandStatus(Enum):
    """Outcome of a single interpreted command."""
    SUCCESS = "success"
    FAILED = "failed"
    TERMINATED = "terminated"


class AuditAction(Enum):
    """Registry mutations, used as log record context."""
    CREATE_CLASSROOM = "create_classroom"
    REMOVE_CLASSROOM = "remove_classroom"
    ENROLL_STUDENT = "enroll_student"
    SCHEDULE_ASSIGNMENT = "schedule_assignment"
    SUBMIT_ASSIGNMENT = "submit_assignment"
