"""Domain models for editserver.

Per-request value objects shared by the handler, the editor runners and
the HTTP layer. All models use Pydantic v2 for validation.
"""

from editserver.domain.models import EditorInvocation, EditOutcome, EditStatus

__all__ = [
    "EditorInvocation",
    "EditOutcome",
    "EditStatus",
]
