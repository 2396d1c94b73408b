# engine/exceptions.py

class AnalyticsError(Exception):
    pass


class InsufficientDataError(AnalyticsError):
    pass


class InvalidArgumentError(AnalyticsError, ValueError):
    pass
