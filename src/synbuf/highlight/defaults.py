"""Built-in language profiles that seed a registry."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from .profile import LanguageProfile
from .registry import ProfileRegistry

RUST_PROFILE = LanguageProfile(
    name="Rust",
    extensions=(".rs",),
    numbers=True,
    strings=True,
    characters=True,
    comments=True,
    multiline_comments=True,
    primary_keywords=(
        "as", "break", "const", "continue", "crate", "else", "enum",
        "extern", "false", "fn", "for", "if", "impl", "in", "let", "loop",
        "match", "mod", "move", "mut", "pub", "ref", "return", "self",
        "Self", "static", "struct", "super", "trait", "true", "type",
        "unsafe", "use", "where", "while", "dyn", "abstract", "become",
        "box", "do", "final", "macro", "override", "priv", "typeof",
        "unsized", "virtual", "yield", "async", "await", "try",
    ),
    secondary_keywords=(
        "bool", "char", "i8", "i16", "i32", "i64", "isize", "u8", "u16",
        "u32", "u64", "usize", "f32", "f64",
    ),
)

C_PROFILE = LanguageProfile(
    name="C",
    extensions=(".c", ".h"),
    numbers=True,
    strings=True,
    characters=True,
    comments=True,
    multiline_comments=True,
    primary_keywords=(
        "auto", "break", "case", "const", "continue", "default", "do",
        "else", "enum", "extern", "for", "goto", "if", "inline", "register",
        "restrict", "return", "sizeof", "static", "struct", "switch",
        "typedef", "union", "volatile", "while",
    ),
    secondary_keywords=(
        "char", "double", "float", "int", "long", "short", "signed",
        "unsigned", "void", "size_t", "bool",
    ),
)

DEFAULT_PROFILES: tuple[LanguageProfile, ...] = (RUST_PROFILE, C_PROFILE)


def load_default_profiles(
    registry: ProfileRegistry,
    *,
    include: Optional[Iterable[str]] = None,
    overrides: Optional[Mapping[str, LanguageProfile]] = None,
) -> ProfileRegistry:
    """Register the built-in profiles, optionally filtered or replaced.

    ``include`` limits registration to the named profiles; ``overrides`` maps
    a built-in name to a profile registered in its place.
    """

    wanted = set(include) if include is not None else None
    replacements = dict(overrides or {})
    for profile in DEFAULT_PROFILES:
        if wanted is not None and profile.name not in wanted:
            continue
        registry.register(replacements.pop(profile.name, profile), replace=True)
    for profile in replacements.values():
        registry.register(profile, replace=True)
    return registry


def default_registry() -> ProfileRegistry:
    return load_default_profiles(ProfileRegistry())


__all__ = [
    "C_PROFILE",
    "DEFAULT_PROFILES",
    "RUST_PROFILE",
    "default_registry",
    "load_default_profiles",
]
