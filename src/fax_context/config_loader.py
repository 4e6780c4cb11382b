"""
Configuration loader with validation.

Builds a RecoveryConfig from FAX_CONTEXT_* environment variables.
"""
from dotenv import find_dotenv, load_dotenv
from .config import RecoveryConfig
from .config_validator import get_float_env, get_int_env, get_optional_env, parse_temporal_bands

ENV_PREFIX = "FAX_CONTEXT_"


def load_config_from_env(use_dotenv: bool = True) -> RecoveryConfig:
    """
    Load recovery thresholds from environment variables with validation.
    
    Every value is optional; unset variables keep the defaults of
    RecoveryConfig.
    
    Usage:
        config = load_config_from_env()
        service = ContextRecoveryService(store, audit_sink, config=config)
    
    :param use_dotenv: Load a .env file first (local development)
    :return: Validated RecoveryConfig instance
    :raises: ConfigurationError if a value is malformed or out of range
    """
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    
    defaults = RecoveryConfig()
    
    def _float(name: str) -> float:
        return get_float_env(ENV_PREFIX + name.upper(), getattr(defaults, name))
    
    def _int(name: str) -> int:
        return get_int_env(ENV_PREFIX + name.upper(), getattr(defaults, name))
    
    bands_key = ENV_PREFIX + "TEMPORAL_BANDS"
    raw_bands = get_optional_env(bands_key)
    temporal_bands = (
        parse_temporal_bands(bands_key, raw_bands) if raw_bands else defaults.temporal_bands
    )
    
    config = RecoveryConfig(
        acceptance_threshold=_float("acceptance_threshold"),
        reference_match_confidence=_float("reference_match_confidence"),
        template_annotation_confidence=_float("template_annotation_confidence"),
        template_match_threshold=_float("template_match_threshold"),
        template_ambiguous_confidence=_float("template_ambiguous_confidence"),
        template_no_expectation_score=_float("template_no_expectation_score"),
        template_match_weight=_float("template_match_weight"),
        template_coverage_weight=_float("template_coverage_weight"),
        content_min_text_length=_int("content_min_text_length"),
        max_keywords=_int("max_keywords"),
        recent_window_days=_int("recent_window_days"),
        temporal_lookback_days=_int("temporal_lookback_days"),
        temporal_bands=temporal_bands,
        temporal_floor_confidence=_float("temporal_floor_confidence"),
        ambiguous_sentinel_confidence=_float("ambiguous_sentinel_confidence"),
    )
    
    return config.validate()
