class ContribCityError(Exception):
    """Base class for every error raised by contribcity."""


class InvalidDimensions(ContribCityError, ValueError):
    """The activity matrix is ragged, empty or holds non-integer values."""


class ConfigError(ContribCityError, ValueError):
    pass


class CalendarFormatError(ContribCityError, ValueError):
    pass


class PipelineOrderError(ContribCityError, RuntimeError):
    """A planning stage ran before the stage it depends on."""
