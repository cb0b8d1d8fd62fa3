class MatchValidationError(Exception):
    pass


class EmptyPlayerNameError(MatchValidationError):
    pass


class RosterSizeError(MatchValidationError):
    pass


class MatchNotStartedError(MatchValidationError):
    pass


class BoundsError(MatchValidationError, IndexError):
    """
    Player or team index outside the fixed roster.
    Raised for adapter contract violations, never shown to the user.
    """


class ImportFormatError(Exception):
    pass


class InvalidFormatError(ImportFormatError):
    pass


class ParseFailureError(ImportFormatError):
    pass
