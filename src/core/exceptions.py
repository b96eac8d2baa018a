"""
Workflow and ingestion error taxonomy.

Workflow errors carry a human-readable reason naming the precondition that
failed; the API layer renders it. Ingestion errors never leave a collector.
"""

class WorkflowError(Exception):
    """Base class for refused workflow operations."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

class NotFound(WorkflowError):
    """Operation on an unknown id."""

class InvalidTransition(WorkflowError):
    """State-machine precondition violated."""

class PreconditionFailed(WorkflowError):
    """Escalation attempted without meeting the decision rule."""

class PermissionDenied(WorkflowError):
    """Caller lacks edit capability on the domain."""

class Conflict(WorkflowError):
    """A pending escalation already exists for the assessment."""

class AlreadyPromoted(WorkflowError):
    """Social signal was already promoted to a formal signal."""

class DuplicateKey(Exception):
    """Idempotency key collision inside an explicit transaction."""

    def __init__(self, model: str, key: str, value):
        super().__init__(f"{model}.{key}={value!r} already exists")
        self.model = model
        self.key = key
        self.value = value

class TransientIngestionError(Exception):
    """Network or parse failure during a collection cycle."""
