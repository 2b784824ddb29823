from dataclasses import dataclass
from typing import Literal, Protocol


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class GenerationFailure(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable"):
        super().__init__(message)
        self.code = code


class LanguageModelGateway(Protocol):
    def generate(self, prompt_text: str) -> str:
        """Return the model's free-form reply or raise GenerationFailure."""
        ...
