"""Classification engine, tags and language profiles."""

from .classifier import Classifier, RuleMatch, build_rules, is_separator
from .defaults import (
    C_PROFILE,
    DEFAULT_PROFILES,
    RUST_PROFILE,
    default_registry,
    load_default_profiles,
)
from .profile import PLAIN_PROFILE, LanguageProfile
from .registry import ProfileConflictError, ProfileRegistry, RegistryStats
from .tags import HighlightTag

__all__ = [
    "Classifier",
    "RuleMatch",
    "build_rules",
    "is_separator",
    "HighlightTag",
    "LanguageProfile",
    "PLAIN_PROFILE",
    "ProfileRegistry",
    "ProfileConflictError",
    "RegistryStats",
    "C_PROFILE",
    "RUST_PROFILE",
    "DEFAULT_PROFILES",
    "default_registry",
    "load_default_profiles",
]
