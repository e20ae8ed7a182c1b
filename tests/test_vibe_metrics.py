"""Tests for vibe chart metrics."""

from vibepilot.schemas.deezer import DeezerTrack
from vibepilot.services.vibe.metrics import (
    DEFAULT_ENERGY,
    DEFAULT_MOOD,
    DEFAULT_TEMPO,
    compute_vibe_metrics,
    popularity_score,
)
from vibepilot.services.vibe.params import SearchParameters
from vibepilot.services.vibe.service import VibeResult


def _result(bpm_min: int | None = None, ranks: list[int] | None = None) -> VibeResult:
    tracks = [DeezerTrack(id=i, title=f"T{i}", rank=r) for i, r in enumerate(ranks or [])]
    return VibeResult(
        explanation="",
        params=SearchParameters(query="x", bpm_min=bpm_min),
        tracks=tracks,
    )


class TestPopularityScore:
    def test_empty_is_zero(self):
        assert popularity_score([]) == 0.0

    def test_scaled_mean(self):
        assert popularity_score([400000, 600000]) == 50.0

    def test_clamped(self):
        assert popularity_score([2_500_000]) == 100.0


class TestComputeVibeMetrics:
    def test_defaults_without_bpm(self):
        metrics = compute_vibe_metrics(_result())
        assert metrics.energy == DEFAULT_ENERGY
        assert metrics.tempo == DEFAULT_TEMPO
        assert metrics.mood == DEFAULT_MOOD
        assert metrics.popularity == 0.0

    def test_bpm_driven(self):
        metrics = compute_vibe_metrics(_result(bpm_min=90, ranks=[800000]))
        assert metrics.energy == 50.0
        assert metrics.tempo == 45.0
        assert metrics.popularity == 80.0

    def test_fast_bpm_capped(self):
        metrics = compute_vibe_metrics(_result(bpm_min=210))
        assert metrics.energy == 100.0
        assert metrics.tempo == 100.0

    def test_all_metrics_in_range(self):
        metrics = compute_vibe_metrics(_result(bpm_min=130, ranks=[1, 999999, 123456]))
        for value in (metrics.energy, metrics.popularity, metrics.tempo, metrics.mood):
            assert 0.0 <= value <= 100.0
