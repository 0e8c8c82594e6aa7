"""Errors raised while loading the COVID-19 table."""


class CovidDataError(Exception):
    """Base class for data loading failures."""


class DataSourceUnavailable(CovidDataError):
    """The remote CSV could not be fetched or parsed."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"The data source is unreachable: {source}")


class SchemaMismatch(CovidDataError, KeyError):
    """The parsed CSV lacks one or more required columns."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"Missing expected columns: {self.missing}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])
