# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Startup-time errors. Runtime failures are logged, never raised."""


class ConfigurationError(Exception):
    """Invalid configuration; aborts startup and is not retried."""


class DuplicateRosterError(ConfigurationError):
    def __init__(self, roster_id: str) -> None:
        super().__init__(f"Roster '{roster_id}' is already registered")
        self.roster_id = roster_id
