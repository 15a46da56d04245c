"""
Errors that abort report generation. Each carries the pipeline stage it came from.
"""


class ReportError(Exception):
    stage = "report"

    def __init__(self, message, stage=None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class FetchError(ReportError):
    """The CSV resource could not be retrieved."""
    stage = "load"


class ParseError(ReportError):
    """The retrieved content is not well-formed delimited text."""
    stage = "load"


class SchemaError(ReportError):
    """An expected column is missing or holds the wrong kind of data."""
    stage = "clean"


class ModelFitError(ReportError):
    """A regression could not be fitted to the count table."""
    stage = "model"
