"""
Exception types raised by the RTRWH services
"""


class RtrwhError(Exception):
    """Base class for all service errors"""


class InputValidationError(RtrwhError):
    """Caller supplied input that failed one or more range/type checks"""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__('; '.join(self.errors))


class RainfallSourceError(RtrwhError):
    """A single rainfall provider could not produce a result"""


class ReferenceDataError(RtrwhError):
    """Reference tables are structurally unusable and have no safe default"""


class AssessmentError(RtrwhError):
    """Unexpected failure while computing an assessment"""
