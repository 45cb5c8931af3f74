"""
Domain exceptions for reports app.

These exceptions are raised by the report queries and CSV export builders
and translated into HTTP responses by the views.

Exception Hierarchy:
    ReportsServiceError (base)
    ├── UnknownSectionError
    ├── UnknownExportError
    └── InvalidColumnError

Usage:
    from apps.reports.exceptions import UnknownExportError

    if variant not in EXPORTS:
        raise UnknownExportError(f"Unknown export: {variant}")
"""


class ReportsServiceError(Exception):
    """
    Base exception for all reports service errors.

        try:
            header, rows = build_export('donations', columns=['amount'])
        except ReportsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class UnknownSectionError(ReportsServiceError):
    """
    Raised when a report section name is not recognised.

    Example:
        raise UnknownSectionError("Unknown report section: 'weather'")
    """

    pass


class UnknownExportError(ReportsServiceError):
    """Raised when a CSV export variant is not recognised."""

    pass


class InvalidColumnError(ReportsServiceError):
    """Raised when an export is asked for columns it does not have."""

    pass
