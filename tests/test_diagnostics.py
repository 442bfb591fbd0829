"""Diagnostic, error template and formatter tests."""

import json

import pytest

from doubleengine.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    DiagnosticFormatter,
    DoubleConfigurationError,
    DoubleError,
    DoubleInvocationError,
    ErrorPhase,
    ErrorTemplate,
    OutputFormat,
    UnexpectedInvocationError,
    UnknownMethodError,
    UnsatisfiedExpectationError,
    VerificationError,
)


class TestDiagnosticCode:
    """Code ranges and phases."""

    @pytest.mark.parametrize(
        ("code", "phase"),
        [
            (DiagnosticCode.TARGET_NOT_FOUND, ErrorPhase.CONFIGURATION),
            (DiagnosticCode.INVALID_RETURN_VALUE, ErrorPhase.CONFIGURATION),
            (DiagnosticCode.UNEXPECTED_INVOCATION, ErrorPhase.INVOCATION),
            (DiagnosticCode.UNSATISFIED_EXPECTATION, ErrorPhase.VERIFICATION),
        ],
    )
    def test_phase_from_range(self, code: DiagnosticCode, phase: ErrorPhase) -> None:
        """The thousand-range of a code selects its phase."""
        assert Diagnostic(code=code, message="m").phase is phase

    def test_codes_unique(self) -> None:
        """No two codes share a value."""
        values = [code.value for code in DiagnosticCode]
        assert len(values) == len(set(values))


class TestErrorTemplate:
    """Template rendering."""

    def test_unknown_method_truncates_listing(self) -> None:
        """Long operation listings are cut off."""
        names = [f"op{i:02d}" for i in range(15)]
        diagnostic = ErrorTemplate.unknown_method("Big", "missing", names)
        assert diagnostic.hint is not None
        assert diagnostic.hint.endswith("op09, ...")

    def test_unknown_method_on_empty_surface(self) -> None:
        """Empty surfaces say so."""
        diagnostic = ErrorTemplate.unknown_method("Empty", "missing", [])
        assert diagnostic.hint == "The surface has no operations"

    def test_invalid_return_value(self) -> None:
        """Return-type errors name the value, its type and the declaration."""
        diagnostic = ErrorTemplate.invalid_return_value("Repository", "fetch", "str", 5)
        assert diagnostic.message == (
            "Return value 5 of type int is not compatible with Repository.fetch() -> str"
        )
        assert diagnostic.actual == "int"


class TestFormatter:
    """Output formats."""

    @pytest.fixture
    def diagnostic(self) -> Diagnostic:
        return ErrorTemplate.unexpected_invocation("Repository", "fetch", "exactly once", 2, "(1)")

    def test_rust(self, diagnostic: Diagnostic) -> None:
        """Compiler-style output lists location, details and help."""
        lines = DiagnosticFormatter().format(diagnostic).splitlines()
        assert lines[0] == (
            "error[UNEXPECTED_INVOCATION]: Repository.fetch() was called 2 time(s), "
            "expected exactly once"
        )
        assert lines[1:] == [
            "  --> Repository.fetch",
            "  = arguments: (1)",
            "  = expected: exactly once",
            "  = actual: 2",
            "  = help: Raise the expected count or remove the extra call",
        ]

    def test_simple(self, diagnostic: Diagnostic) -> None:
        """Single-line output."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        assert formatter.format(diagnostic) == (
            "UNEXPECTED_INVOCATION: Repository.fetch() was called 2 time(s), expected exactly once"
        )

    def test_json(self, diagnostic: Diagnostic) -> None:
        """JSON output carries code, phase and the populated fields."""
        data = json.loads(DiagnosticFormatter(output_format=OutputFormat.JSON).format(diagnostic))
        assert data["code"] == "UNEXPECTED_INVOCATION"
        assert data["code_value"] == 3002
        assert data["phase"] == "invocation"
        assert data["arguments"] == "(1)"
        assert "hint" in data

    def test_sanitize(self) -> None:
        """Sanitizing truncates long content."""
        diagnostic = Diagnostic(code=DiagnosticCode.INVALID_CONFIGURATION, message="x" * 50)
        formatter = DiagnosticFormatter(
            output_format=OutputFormat.SIMPLE, sanitize=True, max_content_length=10
        )
        assert formatter.format(diagnostic) == "INVALID_CONFIGURATION: " + "x" * 10 + "..."

    def test_color(self) -> None:
        """ANSI colors wrap the severity."""
        diagnostic = Diagnostic(code=DiagnosticCode.INVALID_CONFIGURATION, message="m")
        output = DiagnosticFormatter(color=True).format(diagnostic)
        assert output.startswith("\033[1;31merror\033[0m[INVALID_CONFIGURATION]")

    def test_format_all(self, diagnostic: Diagnostic) -> None:
        """Several diagnostics are separated by blank lines."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        assert formatter.format_all([diagnostic, diagnostic]).count("\n\n") == 1


class TestErrors:
    """Exception hierarchy."""

    def test_string_message(self) -> None:
        """Plain messages carry no diagnostic."""
        error = DoubleError("plain")
        assert str(error) == "plain"
        assert error.diagnostic is None

    def test_diagnostic_message(self) -> None:
        """Diagnostics render compiler-style."""
        error = UnknownMethodError(ErrorTemplate.unknown_method("Repository", "drop", ["fetch"]))
        assert str(error).startswith("error[UNKNOWN_METHOD]: Method 'drop' is not an operation")
        assert error.diagnostic is not None
        assert error.diagnostic.method_name == "drop"

    def test_hierarchy(self) -> None:
        """Errors are grouped by lifecycle phase."""
        assert issubclass(UnknownMethodError, DoubleConfigurationError)
        assert issubclass(UnexpectedInvocationError, DoubleInvocationError)
        assert issubclass(VerificationError, DoubleError)

    def test_verification_error_lists_failures(self) -> None:
        """Aggregated errors list every failure message."""
        failures = [
            UnsatisfiedExpectationError(
                ErrorTemplate.unsatisfied_expectation("Repository", name, "exactly once", 0)
            )
            for name in ("fetch", "save")
        ]
        error = VerificationError(ErrorTemplate.verification_failed(2, 1), failures)
        text = str(error)
        assert text.startswith("error[VERIFICATION_FAILED]: 2 expectation(s) unsatisfied")
        assert "  - Expectation failed for Repository.fetch()" in text
        assert "  - Expectation failed for Repository.save()" in text
        assert error.failures == tuple(failures)
