"""Chart metrics for a vibe result.

All metrics are on a 0-100 scale. Energy and tempo are derived from the
requested minimum BPM; popularity from the mean Deezer rank of the returned
tracks; mood has no signal from the model and uses a fixed value.
"""

from dataclasses import dataclass
from statistics import mean

# Deezer ranks top out around one million
MAX_DEEZER_RANK = 1_000_000

ENERGY_FULL_BPM = 180
TEMPO_FULL_BPM = 200
DEFAULT_ENERGY = 60.0
DEFAULT_TEMPO = 50.0
DEFAULT_MOOD = 75.0


@dataclass(frozen=True)
class VibeMetrics:
    energy: float
    popularity: float
    tempo: float
    mood: float


def _clamp(value: float) -> float:
    return max(0.0, min(value, 100.0))


def popularity_score(ranks: list[int]) -> float:
    """Mean rank scaled to 0-100; 0 when there are no tracks."""
    if not ranks:
        return 0.0
    mean_rank = mean(ranks)
    return round(_clamp(mean_rank / MAX_DEEZER_RANK * 100), 1)


def compute_vibe_metrics(result) -> VibeMetrics:
    """Compute chart metrics for a VibeResult."""
    bpm_min = result.params.bpm_min

    if bpm_min is not None:
        energy = _clamp(bpm_min / ENERGY_FULL_BPM * 100)
        tempo = _clamp(bpm_min / TEMPO_FULL_BPM * 100)
    else:
        energy = DEFAULT_ENERGY
        tempo = DEFAULT_TEMPO

    return VibeMetrics(
        energy=round(energy, 1),
        popularity=popularity_score([t.rank for t in result.tracks]),
        tempo=round(tempo, 1),
        mood=DEFAULT_MOOD,
    )
