"""
Core entities for the VClass registry: students, assignments and classrooms.
"""

import uuid
from abc import ABC
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

from .exceptions import ValidationError


class AbstractEntity(ABC):
    """Base abstract entity with a universal ID and creation timestamp."""

    def __init__(self, entity_id: Optional[str] = None):
        self._id = entity_id or str(uuid.uuid4())
        self._created_at = datetime.now(timezone.utc)

    @property
    def id(self) -> str:
        """Get the entity ID."""
        return self._id

    @property
    def created_at(self) -> datetime:
        """Get creation timestamp."""
        return self._created_at

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary."""
        return {
            'id': self._id,
            'created_at': self._created_at.isoformat(),
        }

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id})"


class Student(AbstractEntity):
    """A student, identified solely by its student id."""

    def __init__(self, student_id: str):
        if not student_id:
            raise ValidationError("Student id cannot be empty", "invalid_student")
        super().__init__(entity_id=student_id)

    @property
    def student_id(self) -> str:
        return self._id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Student):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)


class Assignment(AbstractEntity):
    """A scheduled prompt together with the ids of students who submitted it."""

    def __init__(self, prompt: str, **kwargs):
        super().__init__(**kwargs)
        self._prompt = prompt
        self._submitters: Set[str] = set()

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def submitters(self) -> Set[str]:
        return self._submitters.copy()

    @property
    def submission_count(self) -> int:
        return len(self._submitters)

    def submit(self, student_id: str) -> bool:
        """Record a submission. Returns False when it was already recorded."""
        if student_id in self._submitters:
            return False
        self._submitters.add(student_id)
        return True

    def is_submitted(self, student_id: str) -> bool:
        """Check whether a student has submitted this assignment."""
        return student_id in self._submitters

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            'prompt': self._prompt,
            'submitters': sorted(self._submitters),
        })
        return data


class Classroom(AbstractEntity):
    """
    A named classroom.

    Owns its enrolled students (keyed by student id, in enrollment order) and
    its assignments (in scheduling order). All lookups scoped to a classroom
    go through it.
    """

    def __init__(self, name: str, **kwargs):
        if not name:
            raise ValidationError("Classroom name cannot be empty", "invalid_classroom")
        super().__init__(**kwargs)
        self._name = name
        self._students: Dict[str, Student] = {}
        self._assignments: List[Assignment] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def students(self) -> List[Student]:
        return list(self._students.values())

    @property
    def student_ids(self) -> List[str]:
        return list(self._students.keys())

    @property
    def assignments(self) -> List[Assignment]:
        return self._assignments.copy()

    def enroll_student(self, student: Student) -> None:
        """Enroll a student, replacing any student with the same id."""
        self._students[student.student_id] = student

    def has_student(self, student_id: str) -> bool:
        """Check if a student is enrolled."""
        return student_id in self._students

    def add_assignment(self, assignment: Assignment) -> None:
        """Append an assignment to the schedule."""
        self._assignments.append(assignment)

    def find_assignment(self, prompt: str) -> Optional[Assignment]:
        """Return the first scheduled assignment whose prompt equals ``prompt``."""
        for assignment in self._assignments:
            if assignment.prompt == prompt:
                return assignment
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            'name': self._name,
            'students': self.student_ids,
            'assignments': [assignment.to_dict() for assignment in self._assignments],
        })
        return data
