"""
Errors raised by the results feature.

Only structural problems are errors. Bad cells (unknown headers, malformed
times, unknown genders) degrade to default values instead.
"""


class ResultsError(Exception):
    """Base results error."""
    pass


class ResultsFileError(ResultsError):
    """The file could not be read or parsed as a results table."""
    pass


class InvalidDistanceError(ResultsError, ValueError):
    """Race distance is missing, not a number, or not positive."""
    pass


class NoValidResultsError(ResultsError):
    """Ingestion kept no rows with a valid chip time."""

    def __init__(self, omitted: int):
        super().__init__(
            f"No results with a valid chip time to insert ({omitted} omitted)"
        )
        self.omitted = omitted


class RaceNotFoundError(ResultsError, LookupError):
    """Race does not exist."""
    pass


class ReportNotFoundError(ResultsError, LookupError):
    """Report does not exist."""
    pass
