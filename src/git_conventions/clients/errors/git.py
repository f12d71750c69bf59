ExtraInfoType = dict[str, str | None]


class ClientError(Exception):
    """An error from the local git repository client."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        msg = message
        if extra_info:
            msg += " (" + ", ".join([f"{key}: {value}" for key, value in extra_info.items() if value is not None]) + ")"
        super().__init__(msg)


class RepositoryNotFoundError(ClientError):
    """The path is not inside a git repository."""

    def __init__(self, path: str, message: str | None = None):
        super().__init__(message="No git repository was found.", extra_info={"path": path, "message": message})


class DetachedHeadError(ClientError):
    """HEAD does not point at a branch, so there is no branch name to check."""

    def __init__(self, path: str, commit: str | None = None):
        super().__init__(message="HEAD is detached and is not on a branch.", extra_info={"path": path, "commit": commit})


class RevisionRangeError(ClientError):
    """The revision range could not be resolved."""

    def __init__(self, revision_range: str, message: str | None = None):
        super().__init__(message="The revision range could not be read.", extra_info={"revision_range": revision_range, "message": message})
