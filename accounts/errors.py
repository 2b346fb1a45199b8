"""Errors raised while assembling instructions."""


class InstructionBuildError(Exception):
    """Base exception for instructions that cannot be assembled from the given inputs."""

    pass


class MissingRequiredAccountError(InstructionBuildError):
    """Raised when a mandatory account role has no supplied key."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing required account: {name}")


class MissingFieldError(InstructionBuildError):
    """Raised when a staged builder is asked for its instruction before all required fields are set."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} is not set")
