# What it does: Defines the exception taxonomy shared by the storage engine and the commands
# How it does: Every failure the core can signal is a subclass of TwigError, so commands can catch one type and report it
# What data structure it uses: None (plain exception classes carrying the offending hash/path/ref as attributes)


class TwigError(Exception):
    """Base exception for all twig errors."""
    pass


class NotARepositoryError(TwigError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"not a twig repository (or any of the parent directories): {path}")


class ObjectNotFoundError(TwigError):
    """Raised when a required object is absent from the object store."""

    def __init__(self, object_hash):
        self.object_hash = object_hash
        super().__init__(f"object not found: {object_hash}")


class MalformedObjectError(TwigError):
    """Raised when an object header, tree record or index record cannot be parsed."""

    def __init__(self, reason, object_hash=None):
        self.reason = reason
        self.object_hash = object_hash
        msg = f"malformed object: {reason}"
        if object_hash:
            msg += f" (hash: {object_hash})"
        super().__init__(msg)


class DirtyWorkingTreeError(TwigError):
    """Raised when tracked files differ from what the index recorded."""

    def __init__(self, paths, action="checkout"):
        self.paths = sorted(paths)
        self.action = action
        listing = "\n".join(f"\t{path}" for path in self.paths)
        super().__init__(
            f"your local changes to the following files would be lost by {action}:\n"
            f"{listing}\n"
            "Please stage or commit your changes first."
        )


class NoCommitsOnBranchError(TwigError):
    def __init__(self, branch=None):
        self.branch = branch
        if branch:
            super().__init__(f"current branch '{branch}' has no commits yet")
        else:
            super().__init__("HEAD does not point at any commit yet")


class InvalidReferenceError(TwigError):
    """Raised when a ref is missing, already exists, or cannot be resolved."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)


class StorageError(TwigError):
    """Raised when a filesystem read or write fails."""

    def __init__(self, operation, path, cause=None):
        self.operation = operation
        self.path = path
        self.cause = cause
        msg = f"storage error during {operation}: {path}"
        if cause:
            msg += f" ({cause})"
        super().__init__(msg)


class RepositoryLockedError(TwigError):
    def __init__(self, lock_path):
        self.lock_path = lock_path
        super().__init__(
            f"unable to create '{lock_path}': another twig process seems to be running "
            "in this repository. Remove the file manually if no such process exists."
        )


class InvalidPathError(TwigError):
    """Raised when a path cannot be recorded in the index."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"invalid path '{path}': {reason}")
