from dataclasses import dataclass


@dataclass(frozen=True)
class Recommendation:
    consultant_id: str
    explanation: str
