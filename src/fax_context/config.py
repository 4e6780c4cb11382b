from dataclasses import dataclass, field
from typing import Tuple

from .exceptions import ConfigurationError


@dataclass
class RecoveryConfig:
    # Arbiter
    acceptance_threshold: float = 0.6

    # Reference code
    reference_match_confidence: float = 0.95

    # Template pattern
    template_annotation_confidence: float = 0.7
    template_match_threshold: float = 0.7
    template_ambiguous_confidence: float = 0.4
    template_no_expectation_score: float = 0.3
    template_match_weight: float = 0.6
    template_coverage_weight: float = 0.4

    # Content similarity
    content_min_text_length: int = 20
    max_keywords: int = 20

    # Look-back windows (days)
    recent_window_days: int = 7
    temporal_lookback_days: int = 30

    # Temporal proximity: (upper bound in hours, confidence), checked in order
    temporal_bands: Tuple[Tuple[float, float], ...] = field(
        default=((1.0, 0.8), (6.0, 0.6), (24.0, 0.4))
    )
    temporal_floor_confidence: float = 0.2

    # Ambiguity detector
    ambiguous_sentinel_confidence: float = 0.3

    def validate(self) -> "RecoveryConfig":
        """
        Check that every threshold is usable.

        :return: self, for chaining
        :raises: ConfigurationError on the first invalid value
        """
        unit_values = {
            "acceptance_threshold": self.acceptance_threshold,
            "reference_match_confidence": self.reference_match_confidence,
            "template_annotation_confidence": self.template_annotation_confidence,
            "template_match_threshold": self.template_match_threshold,
            "template_ambiguous_confidence": self.template_ambiguous_confidence,
            "template_no_expectation_score": self.template_no_expectation_score,
            "template_match_weight": self.template_match_weight,
            "template_coverage_weight": self.template_coverage_weight,
            "temporal_floor_confidence": self.temporal_floor_confidence,
            "ambiguous_sentinel_confidence": self.ambiguous_sentinel_confidence,
        }
        for name, value in unit_values.items():
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be between 0.0 and 1.0, got {value}")

        weight_sum = self.template_match_weight + self.template_coverage_weight
        if abs(weight_sum - 1.0) > 1e-9:
            raise ConfigurationError(
                f"Template weights must sum to 1.0, got {weight_sum}"
            )

        for name in ("content_min_text_length", "max_keywords", "recent_window_days", "temporal_lookback_days"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative, got {getattr(self, name)}")

        # Confidence never rises with age: bands and floor are non-increasing
        previous_hours = 0.0
        previous_confidence = 1.0
        for hours, confidence in self.temporal_bands:
            if hours <= previous_hours:
                raise ConfigurationError(
                    f"Temporal bands must have increasing hour bounds, got {self.temporal_bands}"
                )
            if not 0.0 <= confidence <= 1.0:
                raise ConfigurationError(f"Temporal band confidence out of range: {confidence}")
            if confidence > previous_confidence:
                raise ConfigurationError(
                    f"Temporal band confidences must not increase with age, got {self.temporal_bands}"
                )
            previous_hours = hours
            previous_confidence = confidence

        if self.temporal_floor_confidence > previous_confidence:
            raise ConfigurationError(
                f"temporal_floor_confidence ({self.temporal_floor_confidence}) must not exceed "
                f"the last band confidence ({previous_confidence})"
            )

        return self
