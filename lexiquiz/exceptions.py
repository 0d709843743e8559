class InvalidTransition(Exception):
    """
    Operation not allowed in the current session state
    """
    pass


class SessionCompleted(InvalidTransition):
    """
    Session already reported its final score
    """
    pass


class EnrichmentUnavailable(Exception):
    """
    Could not obtain an example sentence
    """
    pass


class LessonLoadError(Exception):
    """
    Lesson catalog could not be loaded
    """
    pass


class ConfigError(Exception):
    """
    Invalid configuration
    """
    pass
