"""Errors raised by the compliance engine for malformed input.

Compliance findings are never raised; they are returned as violation lists.
"""


class ComplianceError(Exception):
    """Base class for engine input and lookup errors."""


class InvalidShiftError(ComplianceError, ValueError):
    """A shift that cannot exist (end before start, negative break, ...)."""


class UnknownViolationTypeError(ComplianceError, ValueError):
    """A violation whose type the engine does not know how to handle."""


class OrganizationNotFoundError(ComplianceError, LookupError):
    """No organization metadata exists for the requested id."""
