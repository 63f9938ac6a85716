"""
app/exceptions.py — Error taxonomy for the scoring pipeline.

The HTTP layer (api/main.py) maps each class to a status code; nothing in
app/ knows about HTTP.
"""


class LeadScoringError(Exception):
    """Base class for all expected pipeline failures."""


class InputValidationError(LeadScoringError):
    """Client input is malformed (offer body, upload type)."""


class ParseError(LeadScoringError):
    """The uploaded CSV could not be read into leads."""


class AIScoringError(LeadScoringError):
    """A single lead's AI call failed, timed out, or returned nothing usable."""


class StateError(LeadScoringError):
    """An operation was requested before the state it needs exists."""


class NoLeadsError(StateError):
    def __init__(self, message: str = "No leads uploaded to score. Upload CSV first"):
        super().__init__(message)


class NoOfferError(StateError):
    def __init__(self, message: str = "No offer submitted. POST /offer first"):
        super().__init__(message)
