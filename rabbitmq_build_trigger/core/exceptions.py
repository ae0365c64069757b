"""
All bridge-level exceptions.

Inbound message problems are never raised; they are logged and dropped by the
listener. These exceptions cover wiring mistakes that must stop startup.
"""


class BuildTriggerError(Exception):
    """Base error for the build trigger bridge"""


class BridgeConfigurationError(BuildTriggerError):
    """
    Raised when the bridge is wired without a required collaborator.

    A missing CI host or AMQP adapter is fatal: no trigger may start.
    """

    def __init__(self, component: str, detail: str | None = None):
        self.component = component
        self.detail = detail

        message = f"Remote build bridge is missing its {component}"
        if detail:
            message = f"{message}: {detail}"

        super().__init__(message)


class TriggerNotStartedError(BuildTriggerError):
    """A trigger was asked to schedule a build before it was started"""
