import pytest
from unittest.mock import MagicMock

from vclass.core.enums import CommandName, CommandStatus
from vclass.core.exceptions import MalformedCommandError, UnknownCommandError
from vclass.services import CommandDispatcher, ParsedCommand, ParseFailure, Registry, parse_line
from vclass.services.command_dispatcher import HELP_TEXT, UNEXPECTED_ERROR_MESSAGE


class TestParseLine:
    """Tests for turning raw lines into tagged parse results."""

    @pytest.mark.parametrize("line, expected", [
        ("add_classroom Math101", ParsedCommand(CommandName.ADD_CLASSROOM, ("Math101",))),
        ("add_classroom Intro to Logic\n", ParsedCommand(CommandName.ADD_CLASSROOM, ("Intro to Logic",))),
        ("remove_classroom Math101", ParsedCommand(CommandName.REMOVE_CLASSROOM, ("Math101",))),
        ("list_classrooms", ParsedCommand(CommandName.LIST_CLASSROOMS)),
        ("add_student S1 Math101", ParsedCommand(CommandName.ADD_STUDENT, ("S1", "Math101"))),
        ("list_students Math101", ParsedCommand(CommandName.LIST_STUDENTS, ("Math101",))),
        ("schedule_assignment Math101 Read  chapter 2",
         ParsedCommand(CommandName.SCHEDULE_ASSIGNMENT, ("Math101", "Read  chapter 2"))),
        ("submit_assignment S1 Math101 Read chapter 2",
         ParsedCommand(CommandName.SUBMIT_ASSIGNMENT, ("S1", "Math101", "Read chapter 2"))),
        ("check_submission S1 Math101 HW1",
         ParsedCommand(CommandName.CHECK_SUBMISSION, ("S1", "Math101", "HW1"))),
        ("help", ParsedCommand(CommandName.HELP)),
        ("  exit  ", ParsedCommand(CommandName.EXIT)),
    ])
    def test_well_formed(self, line: str, expected: ParsedCommand) -> None:
        assert parse_line(line) == expected

    @pytest.mark.parametrize("line", [
        "add_classroom",
        "add_classroom   ",
        "remove_classroom",
        "add_student S1",
        "add_student S1 Math101 extra",
        "list_students",
        "schedule_assignment Math101",
        "submit_assignment S1 Math101",
        "submit_assignment S1",
        "list_classrooms now",
    ])
    def test_malformed(self, line: str) -> None:
        """Missing or surplus arguments never reach the registry."""
        result = parse_line(line)
        assert isinstance(result, ParseFailure)
        assert isinstance(result.error, MalformedCommandError)

    @pytest.mark.parametrize("line", ["", "   ", "fly_away", "ADD_CLASSROOM Math101"])
    def test_unknown(self, line: str) -> None:
        result = parse_line(line)
        assert isinstance(result, ParseFailure)
        assert isinstance(result.error, UnknownCommandError)


class TestCommandDispatcher:
    """Tests for executing commands and rendering outcomes."""

    def test_scenario_success_messages(self, dispatcher: CommandDispatcher) -> None:
        """Create, enroll, schedule and submit each report success; resubmitting does too."""
        lines = [
            "add_classroom Math101",
            "add_student S1 Math101",
            "schedule_assignment Math101 HW1",
            "submit_assignment S1 Math101 HW1",
            "submit_assignment S1 Math101 HW1",
        ]
        messages = [dispatcher.dispatch(line) for line in lines]
        assert all(result.status == CommandStatus.SUCCESS for result in messages)
        assert [result.message for result in messages] == [
            "Classroom Math101 has been created.",
            "Student S1 has been enrolled in Math101.",
            "Assignment for Math101 has been scheduled.",
            "Assignment submitted by Student S1 in Math101.",
            "Assignment submitted by Student S1 in Math101.",
        ]
        assert dispatcher.registry.list_assignments("Math101")[0].submitters == {"S1"}

    def test_list_students_unknown_classroom(self, dispatcher: CommandDispatcher) -> None:
        result = dispatcher.dispatch("list_students Unknown")
        assert result.status == CommandStatus.FAILED
        assert result.message == "Classroom not found: Unknown"

    def test_duplicate_classroom(self, dispatcher: CommandDispatcher) -> None:
        dispatcher.dispatch("add_classroom Math101")
        result = dispatcher.dispatch("add_classroom Math101")
        assert not result.success
        assert result.message == "Classroom already exists: Math101"

    def test_remove_classroom(self, dispatcher: CommandDispatcher) -> None:
        dispatcher.dispatch("add_classroom Math101")
        assert dispatcher.dispatch("remove_classroom Math101").message == "Classroom Math101 has been removed."
        assert dispatcher.dispatch("remove_classroom Math101").message == "Classroom not found: Math101"

    def test_list_classrooms(self, dispatcher: CommandDispatcher) -> None:
        assert dispatcher.dispatch("list_classrooms").message == "No classrooms available."
        dispatcher.dispatch("add_classroom Math101")
        dispatcher.dispatch("add_classroom Physics")
        assert dispatcher.dispatch("list_classrooms").message == "Classrooms: Math101, Physics"

    def test_list_students(self, dispatcher: CommandDispatcher) -> None:
        dispatcher.dispatch("add_classroom Math101")
        assert dispatcher.dispatch("list_students Math101").message == "No students in Math101"
        dispatcher.dispatch("add_student S1 Math101")
        dispatcher.dispatch("add_student S2 Math101")
        dispatcher.dispatch("add_student S1 Math101")
        assert dispatcher.dispatch("list_students Math101").message == "Students in Math101: S1, S2"

    def test_submission_diagnostics(self, dispatcher: CommandDispatcher) -> None:
        dispatcher.dispatch("add_classroom Math101")
        dispatcher.dispatch("add_student S1 Math101")
        dispatcher.dispatch("schedule_assignment Math101 HW1")
        assert (dispatcher.dispatch("submit_assignment S2 Math101 HW1").message
                == "Invalid classroom or student for submission.")
        assert (dispatcher.dispatch("submit_assignment S1 Math101 HW2").message
                == "Assignment not found in class: Math101")

    def test_list_assignments_and_check_submission(self, dispatcher: CommandDispatcher) -> None:
        dispatcher.dispatch("add_classroom Math101")
        assert dispatcher.dispatch("list_assignments Math101").message == "No assignments in Math101"
        dispatcher.dispatch("add_student S1 Math101")
        dispatcher.dispatch("schedule_assignment Math101 HW1")
        dispatcher.dispatch("schedule_assignment Math101 HW2")
        assert (dispatcher.dispatch("check_submission S1 Math101 HW1").message
                == "Student S1 has not submitted HW1 in Math101.")
        dispatcher.dispatch("submit_assignment S1 Math101 HW1")
        assert (dispatcher.dispatch("check_submission S1 Math101 HW1").message
                == "Student S1 has submitted HW1 in Math101.")
        assert (dispatcher.dispatch("list_assignments Math101").message
                == "Assignments in Math101: HW1 (1 submitted), HW2 (0 submitted)")

    def test_list_assignments_unknown_classroom(self, dispatcher: CommandDispatcher) -> None:
        result = dispatcher.dispatch("list_assignments Nope")
        assert result.status == CommandStatus.FAILED
        assert result.message == "Classroom not found: Nope"

    @pytest.mark.parametrize("line, expected", [
        ("check_submission S1 Nope HW1", "Invalid classroom or student for submission."),
        ("check_submission S2 Math101 HW1", "Invalid classroom or student for submission."),
        ("check_submission S1 Math101 HW2", "Assignment not found in class: Math101"),
    ])
    def test_check_submission_diagnostics(self, dispatcher: CommandDispatcher, line: str,
                                          expected: str) -> None:
        """check_submission fails the same way submit_assignment does."""
        dispatcher.dispatch("add_classroom Math101")
        dispatcher.dispatch("add_student S1 Math101")
        dispatcher.dispatch("schedule_assignment Math101 HW1")
        result = dispatcher.dispatch(line)
        assert result.status == CommandStatus.FAILED
        assert result.message == expected

    def test_malformed_does_not_touch_registry(self) -> None:
        registry = MagicMock(spec=Registry)
        result = CommandDispatcher(registry).dispatch("add_student S1")
        assert result.message == "Malformed command: usage: add_student <id> <className>"
        registry.enroll_student.assert_not_called()

    def test_unknown_command(self, dispatcher: CommandDispatcher) -> None:
        result = dispatcher.dispatch("teleport S1")
        assert result.status == CommandStatus.FAILED
        assert result.message == "Unknown command. Type 'help' for commands."

    def test_help_lists_every_command(self, dispatcher: CommandDispatcher) -> None:
        result = dispatcher.dispatch("help")
        assert result.message == HELP_TEXT
        for name in CommandName:
            assert name.value in result.message

    def test_exit_terminates(self, dispatcher: CommandDispatcher) -> None:
        result = dispatcher.dispatch("exit")
        assert result.terminate
        assert result.message == "Exiting Virtual Classroom Manager."

    def test_unexpected_error_is_contained(self) -> None:
        registry = MagicMock(spec=Registry)
        registry.list_classrooms.side_effect = RuntimeError("boom")
        result = CommandDispatcher(registry).dispatch("list_classrooms")
        assert result.status == CommandStatus.FAILED
        assert result.message == UNEXPECTED_ERROR_MESSAGE
