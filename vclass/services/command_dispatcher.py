"""
Command parsing and dispatch for the line-oriented interpreter.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Union

from ..core.enums import CommandName, CommandStatus
from ..core.exceptions import MalformedCommandError, UnknownCommandError, VClassException
from .registry import Registry


logger = logging.getLogger(__name__)


class ArgumentShape(Enum):
    """How the text after the command name is split into arguments."""
    NONE = "none"              # no arguments
    REST = "rest"              # the whole remainder is one argument
    TOKENS = "tokens"          # exactly N whitespace-separated tokens
    TOKENS_THEN_REST = "tokens_then_rest"  # N tokens, then the remainder


@dataclass(frozen=True)
class CommandSpec:
    """Argument layout and usage text for one command."""
    name: CommandName
    shape: ArgumentShape
    usage: str
    token_count: int = 0


COMMAND_SPECS: Dict[CommandName, CommandSpec] = {
    spec.name: spec for spec in (
        CommandSpec(CommandName.ADD_CLASSROOM, ArgumentShape.REST, "add_classroom <name>"),
        CommandSpec(CommandName.REMOVE_CLASSROOM, ArgumentShape.REST, "remove_classroom <name>"),
        CommandSpec(CommandName.LIST_CLASSROOMS, ArgumentShape.NONE, "list_classrooms"),
        CommandSpec(CommandName.ADD_STUDENT, ArgumentShape.TOKENS, "add_student <id> <className>", 2),
        CommandSpec(CommandName.LIST_STUDENTS, ArgumentShape.REST, "list_students <className>"),
        CommandSpec(CommandName.SCHEDULE_ASSIGNMENT, ArgumentShape.TOKENS_THEN_REST,
                    "schedule_assignment <className> <details>", 1),
        CommandSpec(CommandName.SUBMIT_ASSIGNMENT, ArgumentShape.TOKENS_THEN_REST,
                    "submit_assignment <id> <className> <details>", 2),
        CommandSpec(CommandName.LIST_ASSIGNMENTS, ArgumentShape.REST, "list_assignments <className>"),
        CommandSpec(CommandName.CHECK_SUBMISSION, ArgumentShape.TOKENS_THEN_REST,
                    "check_submission <id> <className> <details>", 2),
        CommandSpec(CommandName.HELP, ArgumentShape.NONE, "help"),
        CommandSpec(CommandName.EXIT, ArgumentShape.NONE, "exit"),
    )
}

HELP_TEXT = "\n".join(["Available commands:"] + [spec.usage for spec in COMMAND_SPECS.values()])

UNEXPECTED_ERROR_MESSAGE = "An error occurred. Please try again."


@dataclass(frozen=True)
class ParsedCommand:
    """A well-formed command ready for dispatch."""
    name: CommandName
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ParseFailure:
    """A line that could not be turned into a command."""
    error: VClassException


ParseResult = Union[ParsedCommand, ParseFailure]


@dataclass(frozen=True)
class CommandResult:
    """The single human-readable outcome of one command."""
    status: CommandStatus
    message: str

    @property
    def success(self) -> bool:
        return self.status != CommandStatus.FAILED

    @property
    def terminate(self) -> bool:
        return self.status == CommandStatus.TERMINATED


def parse_line(line: str) -> ParseResult:
    """
    Split a raw input line into a command and its arguments.

    Never raises; malformed or unknown input comes back as a ParseFailure so
    that registry methods are only ever called with every argument present.
    """
    parts = line.strip().split(None, 1)
    token = parts[0] if parts else ""
    remainder = parts[1] if len(parts) > 1 else ""

    try:
        name = CommandName(token)
    except ValueError:
        return ParseFailure(UnknownCommandError(token))

    spec = COMMAND_SPECS[name]
    args = _split_arguments(spec, remainder)
    if args is None:
        return ParseFailure(MalformedCommandError(name.value, spec.usage))
    return ParsedCommand(name, args)


def _split_arguments(spec: CommandSpec, remainder: str) -> Optional[Tuple[str, ...]]:
    if spec.shape == ArgumentShape.NONE:
        return () if not remainder else None

    if spec.shape == ArgumentShape.REST:
        return (remainder,) if remainder else None

    if spec.shape == ArgumentShape.TOKENS:
        tokens = remainder.split()
        return tuple(tokens) if len(tokens) == spec.token_count else None

    # TOKENS_THEN_REST
    pieces = remainder.split(None, spec.token_count)
    if len(pieces) != spec.token_count + 1:
        return None
    pieces[-1] = pieces[-1].strip()
    return tuple(pieces) if pieces[-1] else None


class CommandDispatcher:
    """Runs one parsed command against the registry and renders its outcome."""

    def __init__(self, registry: Registry):
        self._registry = registry
        self._handlers: Dict[CommandName, Callable[..., CommandResult]] = {
            CommandName.ADD_CLASSROOM: self._add_classroom,
            CommandName.REMOVE_CLASSROOM: self._remove_classroom,
            CommandName.LIST_CLASSROOMS: self._list_classrooms,
            CommandName.ADD_STUDENT: self._add_student,
            CommandName.LIST_STUDENTS: self._list_students,
            CommandName.SCHEDULE_ASSIGNMENT: self._schedule_assignment,
            CommandName.SUBMIT_ASSIGNMENT: self._submit_assignment,
            CommandName.LIST_ASSIGNMENTS: self._list_assignments,
            CommandName.CHECK_SUBMISSION: self._check_submission,
            CommandName.HELP: self._help,
            CommandName.EXIT: self._exit,
        }

    @property
    def registry(self) -> Registry:
        return self._registry

    def dispatch(self, line: str) -> CommandResult:
        """Parse and execute one line of input."""
        parsed = parse_line(line)
        if isinstance(parsed, ParseFailure):
            logger.debug("Rejected input %r: %s", line, parsed.error.error_code)
            return CommandResult(CommandStatus.FAILED, parsed.error.message)
        return self.execute(parsed)

    def execute(self, command: ParsedCommand) -> CommandResult:
        """Execute an already parsed command."""
        handler = self._handlers[command.name]
        try:
            return handler(*command.args)
        except VClassException as e:
            return CommandResult(CommandStatus.FAILED, e.message)
        except Exception:
            logger.exception("Error processing command %s", command.name.value)
            return CommandResult(CommandStatus.FAILED, UNEXPECTED_ERROR_MESSAGE)

    def _add_classroom(self, name: str) -> CommandResult:
        self._registry.create_classroom(name)
        return CommandResult(CommandStatus.SUCCESS, f"Classroom {name} has been created.")

    def _remove_classroom(self, name: str) -> CommandResult:
        self._registry.remove_classroom(name)
        return CommandResult(CommandStatus.SUCCESS, f"Classroom {name} has been removed.")

    def _list_classrooms(self) -> CommandResult:
        names = self._registry.list_classrooms()
        if not names:
            return CommandResult(CommandStatus.SUCCESS, "No classrooms available.")
        return CommandResult(CommandStatus.SUCCESS, f"Classrooms: {', '.join(names)}")

    def _add_student(self, student_id: str, class_name: str) -> CommandResult:
        self._registry.enroll_student(student_id, class_name)
        return CommandResult(CommandStatus.SUCCESS,
                             f"Student {student_id} has been enrolled in {class_name}.")

    def _list_students(self, class_name: str) -> CommandResult:
        student_ids = self._registry.list_students(class_name)
        if not student_ids:
            return CommandResult(CommandStatus.SUCCESS, f"No students in {class_name}")
        return CommandResult(CommandStatus.SUCCESS,
                             f"Students in {class_name}: {', '.join(student_ids)}")

    def _schedule_assignment(self, class_name: str, prompt: str) -> CommandResult:
        self._registry.schedule_assignment(class_name, prompt)
        return CommandResult(CommandStatus.SUCCESS, f"Assignment for {class_name} has been scheduled.")

    def _submit_assignment(self, student_id: str, class_name: str, prompt: str) -> CommandResult:
        self._registry.submit_assignment(student_id, class_name, prompt)
        return CommandResult(CommandStatus.SUCCESS,
                             f"Assignment submitted by Student {student_id} in {class_name}.")

    def _list_assignments(self, class_name: str) -> CommandResult:
        assignments = self._registry.list_assignments(class_name)
        if not assignments:
            return CommandResult(CommandStatus.SUCCESS, f"No assignments in {class_name}")
        summary = ", ".join(f"{a.prompt} ({a.submission_count} submitted)" for a in assignments)
        return CommandResult(CommandStatus.SUCCESS, f"Assignments in {class_name}: {summary}")

    def _check_submission(self, student_id: str, class_name: str, prompt: str) -> CommandResult:
        if self._registry.has_submitted(student_id, class_name, prompt):
            message = f"Student {student_id} has submitted {prompt} in {class_name}."
        else:
            message = f"Student {student_id} has not submitted {prompt} in {class_name}."
        return CommandResult(CommandStatus.SUCCESS, message)

    def _help(self) -> CommandResult:
        return CommandResult(CommandStatus.SUCCESS, HELP_TEXT)

    def _exit(self) -> CommandResult:
        return CommandResult(CommandStatus.TERMINATED, "Exiting Virtual Classroom Manager.")
