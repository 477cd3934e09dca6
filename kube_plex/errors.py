class KubePlexError(Exception):
    pass


class ConfigurationError(KubePlexError):
    """Raised when the environment or the cluster client cannot be set up."""


class ArgumentShapeError(KubePlexError):
    def __init__(self, flag: str, index: int):
        self.flag = flag
        self.index = index
        super().__init__(f"flag {flag!r} at position {index} has no value after it")


class SubmissionError(KubePlexError):
    def __init__(self, namespace: str, reason: str):
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"could not create pod in namespace {namespace!r}: {reason}")


class PollError(KubePlexError):
    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"could not get status of pod {name!r}: {reason}")


class JobFailedError(KubePlexError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"pod {name!r} failed")


class CleanupError(KubePlexError):
    """The pod may have been leaked and needs deleting by hand."""

    def __init__(self, namespace: str, name: str, reason: str):
        self.namespace = namespace
        self.name = name
        self.reason = reason
        super().__init__(
            f"could not delete pod {namespace}/{name}: {reason}; delete it manually"
        )
