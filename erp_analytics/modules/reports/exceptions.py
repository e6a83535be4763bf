"""
Exceptions raised by the reports pipeline
"""

from .utils import REPORT_EXPORTS


class DataUnavailable(Exception):
    """The store could not be queried (connectivity or malformed query)."""

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"Could not fetch {entity}")


class ReportGenerationError(Exception):
    """
    Raised at the router boundary when any stage of a report fails.

    Rendered by the app-level handler as HTTP 500 with the report's
    localized message; no partial output is ever returned.
    """

    def __init__(self, report_key: str):
        self.report_key = report_key
        self.message = REPORT_EXPORTS[report_key]["error_message"]
        super().__init__(self.message)
