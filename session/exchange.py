from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Exchange:
    """
    One question / response pair in the session history.
    `key` is only set for exchanges made with the encryptor mode.
    """
    question: str
    response: str
    key: Optional[str] = None

    @property
    def has_key(self) -> bool:
        return self.key is not None

    def to_lines(self, position: int):
        lines = [
            f"Q{position}: {self.question}",
            f"R{position}: {self.response}",
        ]
        if self.has_key:
            lines.append(f"Key(Base64): {self.key}")
        return lines

    def to_dict(self):
        return {
            "question": self.question,
            "response": self.response,
            "key": self.key,
        }
