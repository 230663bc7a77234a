"""Custom exceptions for project-runner."""


class RunnerError(Exception):
    """Base exception for all project-runner errors."""


class CliError(RunnerError):
    """User-facing fatal error. Printed at the top level and turned into the exit code."""

    def __init__(self, message: str, exit_code: int = 1):
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class ProjectNotFoundError(CliError):
    """Raised when the target directory holds no recognizable project."""

    def __init__(self, project_dir: str):
        self.project_dir = project_dir
        super().__init__(
            f"No project detected in {project_dir}. Make sure the directory contains a package.json"
        )


class ScriptNotFoundError(CliError):
    """Raised when a requested script or role has no matching script."""

    def __init__(self, name: str, available: list[str], *, role: bool = False):
        self.name = name
        self.available = available
        self.role = role
        if role:
            message = f"No script found for '{name}'"
        else:
            message = f'Script "{name}" does not exist'
        super().__init__(message)


class InstallFailedError(CliError):
    """Raised when dependency installation exits non-zero."""

    def __init__(self, package_manager: str, exit_code: int):
        self.package_manager = package_manager
        super().__init__(
            f"Dependency installation with {package_manager} failed (exit code {exit_code})",
            exit_code=exit_code,
        )


class ScriptFailedError(CliError):
    """Raised when the executed script exits non-zero. Carries the child's exit code."""

    def __init__(self, script: str, exit_code: int):
        self.script = script
        super().__init__(f'Script "{script}" exited with code {exit_code}', exit_code=exit_code)


class PackageManagerUnavailableError(CliError):
    """Raised when a package manager cannot be used even after fallback negotiation."""


class CommandSpawnError(CliError):
    """Raised when an interactive command could not be started at all."""

    def __init__(self, argv: list[str], reason: str):
        self.argv = argv
        super().__init__(f"Could not run {argv[0] if argv else '<empty command>'}: {reason}")
