class FlexmanError(Exception):
    """Base for all FlexMan exceptions."""

    pass


class PreconditionError(FlexmanError, ValueError):
    """Invalid arguments handed to an engine operation."""

    pass


class SearchError(FlexmanError):
    """Search process failures."""

    pass


class SerializationError(FlexmanError):
    """Persisted data could not be read or written."""

    pass


class ProblemError(FlexmanError):
    """Domain model construction failures."""

    pass


class ConfigError(FlexmanError):
    """Invalid application configuration."""

    pass
