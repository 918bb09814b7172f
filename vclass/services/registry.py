"""
Classroom registry: the single owner of every classroom in a session.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.entities import Assignment, Classroom, Student
from ..core.enums import AuditAction
from ..core.exceptions import (
    AssignmentNotFoundError, ClassroomNotFoundError, DuplicateClassroomError,
    InvalidSubmissionContextError
)
from .concurrency_manager import ConcurrencyManager


logger = logging.getLogger(__name__)


class Registry:
    """
    Owns all classrooms, keyed by name.

    Every operation either completes and mutates state, or raises a
    VClassException subclass and leaves state untouched. Mutations hold the
    write lock; queries hold the read lock.
    """

    def __init__(self, concurrency_manager: Optional[ConcurrencyManager] = None):
        self._concurrency_manager = concurrency_manager or ConcurrencyManager()
        self._classrooms: Dict[str, Classroom] = {}

    def create_classroom(self, name: str) -> Classroom:
        """Create an empty classroom."""
        with self._concurrency_manager.write_lock():
            if name in self._classrooms:
                logger.warning("Classroom already exists: %s", name)
                raise DuplicateClassroomError(name)
            classroom = Classroom(name)
            self._classrooms[name] = classroom
        self._audit(AuditAction.CREATE_CLASSROOM, classroom=name)
        return classroom

    def remove_classroom(self, name: str) -> Classroom:
        """Remove a classroom together with its students and assignments."""
        with self._concurrency_manager.write_lock():
            classroom = self._classrooms.pop(name, None)
        if classroom is None:
            logger.warning("Attempted to remove non-existing classroom: %s", name)
            raise ClassroomNotFoundError(name)
        self._audit(AuditAction.REMOVE_CLASSROOM, classroom=name)
        return classroom

    def list_classrooms(self) -> List[str]:
        """Get classroom names in creation order."""
        with self._concurrency_manager.read_lock():
            return list(self._classrooms.keys())

    def get_classroom(self, name: str) -> Classroom:
        """Get a classroom by name."""
        with self._concurrency_manager.read_lock():
            return self._require_classroom(name)

    def enroll_student(self, student_id: str, class_name: str) -> Student:
        """Enroll a student; re-enrolling the same id is a no-op."""
        with self._concurrency_manager.write_lock():
            classroom = self._require_classroom(class_name)
            student = Student(student_id)
            classroom.enroll_student(student)
        self._audit(AuditAction.ENROLL_STUDENT, classroom=class_name, student=student_id)
        return student

    def list_students(self, class_name: str) -> List[str]:
        """Get enrolled student ids in enrollment order."""
        with self._concurrency_manager.read_lock():
            return self._require_classroom(class_name).student_ids

    def schedule_assignment(self, class_name: str, prompt: str) -> Assignment:
        """Append a new assignment with no submissions."""
        with self._concurrency_manager.write_lock():
            classroom = self._require_classroom(class_name)
            assignment = Assignment(prompt)
            classroom.add_assignment(assignment)
        self._audit(AuditAction.SCHEDULE_ASSIGNMENT, classroom=class_name, assignment=assignment.id)
        return assignment

    def list_assignments(self, class_name: str) -> List[Assignment]:
        """Get assignments in scheduling order."""
        with self._concurrency_manager.read_lock():
            return self._require_classroom(class_name).assignments

    def submit_assignment(self, student_id: str, class_name: str, prompt: str) -> Assignment:
        """
        Record a submission against the first assignment whose prompt matches.

        Assignments sharing a prompt are resolved to the earliest scheduled one.
        Resubmitting is accepted and leaves the submitter set unchanged.
        """
        with self._concurrency_manager.write_lock():
            assignment = self._resolve_submission(student_id, class_name, prompt)
            recorded = assignment.submit(student_id)
        if recorded:
            self._audit(AuditAction.SUBMIT_ASSIGNMENT, classroom=class_name,
                        student=student_id, assignment=assignment.id)
        else:
            logger.debug("Duplicate submission by %s for %s ignored", student_id, assignment.id)
        return assignment

    def has_submitted(self, student_id: str, class_name: str, prompt: str) -> bool:
        """Check a submission using the same matching rules as submit_assignment."""
        with self._concurrency_manager.read_lock():
            assignment = self._resolve_submission(student_id, class_name, prompt)
            return assignment.is_submitted(student_id)

    def statistics(self) -> Dict[str, Any]:
        """Get registry statistics."""
        with self._concurrency_manager.read_lock():
            classrooms = list(self._classrooms.values())
            assignments = [a for classroom in classrooms for a in classroom.assignments]
            return {
                'classrooms': len(classrooms),
                'students': sum(len(classroom.student_ids) for classroom in classrooms),
                'assignments': len(assignments),
                'submissions': sum(a.submission_count for a in assignments),
            }

    def lock_statistics(self) -> Dict[str, int]:
        """Get usage counters of the registry lock."""
        return self._concurrency_manager.get_statistics()

    def _require_classroom(self, name: str) -> Classroom:
        classroom = self._classrooms.get(name)
        if classroom is None:
            logger.warning("Classroom not found: %s", name)
            raise ClassroomNotFoundError(name)
        return classroom

    def _resolve_submission(self, student_id: str, class_name: str, prompt: str) -> Assignment:
        classroom = self._classrooms.get(class_name)
        if classroom is None or not classroom.has_student(student_id):
            logger.warning("Invalid classroom or student for submission: %s in %s", student_id, class_name)
            raise InvalidSubmissionContextError(student_id, class_name)
        assignment = classroom.find_assignment(prompt)
        if assignment is None:
            logger.warning("Assignment not found in class: %s", class_name)
            raise AssignmentNotFoundError(class_name, prompt)
        return assignment

    def _audit(self, action: AuditAction, **context: str) -> None:
        logger.info("%s %s", action.value, " ".join(f"{k}={v}" for k, v in context.items()))
