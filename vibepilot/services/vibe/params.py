from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class SearchParameters:
    """Structured search parameters resolved from a vibe prompt."""

    query: str  # e.g., "glaive hyperpop"
    bpm_min: int | None = None
    bpm_max: int | None = None
    genre_id: int | None = None  # Deezer genre id; informational, not sent to search
    explanation: str = ""

    def to_dict(self) -> dict:
        return asdict(self)
