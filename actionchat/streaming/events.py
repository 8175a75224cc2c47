"""Token type for the normalized output stream.

StreamToken is the shared element yielded by the orchestrator and consumed
by the chat application.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StreamToken:
    """One normalized token of a completion stream.

    Attributes:
        id: 0-based position of the token within its stream.
        text: Text carried by this token (may be empty).
        is_final: True on the token whose chunk carried ``finish_reason="stop"``.
        generated_text: Concatenation of every ``text`` so far, set only when
            ``is_final`` is True.
    """

    id: int
    text: str
    is_final: bool = False
    generated_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render in text-generation stream output format."""
        return {
            "token": {
                "id": self.id,
                "text": self.text,
                "logprob": 0,
                "special": self.is_final,
            },
            "generated_text": self.generated_text,
            "details": None,
        }
