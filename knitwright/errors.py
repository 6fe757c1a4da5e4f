"""
Error hierarchy for the shaping and instruction engine.

Hard errors abort the calculation of one piece. Advisory problems are never
raised; they travel as plain warning strings on the result.
"""

from __future__ import annotations


class KnitwrightError(Exception):
    """Base class for all engine errors."""


class MissingMeasurementError(KnitwrightError, ValueError):
    """A required body measurement is absent.

    Attributes:
        missing: Names of the absent measurement fields, in declaration order.
    """

    def __init__(self, missing: tuple[str, ...]) -> None:
        self.missing = missing
        super().__init__(
            "Missing essential body measurements: " + ", ".join(m.replace("_", " ") for m in missing)
        )


class InvalidShapingInputError(KnitwrightError, ValueError):
    """A target dimension or gauge value is unusable for shaping."""


class InvalidGaugeError(InvalidShapingInputError):
    """A gauge value is zero, negative or not finite."""


class TemplateMismatchError(KnitwrightError, KeyError):
    """A template references a placeholder that was not supplied.

    Also raised with ``placeholder=None`` when no template exists for the
    requested key. Either way this is a contract violation between the
    template tables and the format functions, never a user input problem.
    """

    def __init__(self, template_key: str, placeholder: str | None) -> None:
        self.template_key = template_key
        self.placeholder = placeholder
        if placeholder is None:
            message = f"No template {template_key!r} is defined"
        else:
            message = f"Template {template_key!r} requires placeholder {placeholder!r}"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0])


class RecordError(KnitwrightError, ValueError):
    """A plain input record cannot be turned into a typed calculation input."""
