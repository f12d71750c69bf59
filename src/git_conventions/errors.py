ExtraInfoType = dict[str, str | None]


class ConventionError(Exception):
    """An error raised by the conventions checker."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        msg = message
        if extra_info:
            msg += " (" + ", ".join([f"{key}: {value}" for key, value in extra_info.items() if value is not None]) + ")"
        super().__init__(msg)


class PreconditionFailedError(ConventionError):
    """The caller broke the contract of a validation function, i.e. by passing `None` as the candidate."""

    def __init__(self, operation: str, message: str, extra_info: ExtraInfoType | None = None):
        if not extra_info:
            extra_info = {}
        super().__init__(message=f"{operation}: {message}", extra_info=extra_info)


class ConfigurationError(ConventionError):
    """The conventions policy could not be loaded."""

    def __init__(self, source: str, message: str | None = None):
        super().__init__(message="The conventions policy is invalid.", extra_info={"source": source, "message": message})
