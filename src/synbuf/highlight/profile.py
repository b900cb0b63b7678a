"""Language profiles: the configuration record consumed by the classifier."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

_FLAG_FIELDS = (
    "numbers",
    "strings",
    "characters",
    "comments",
    "multiline_comments",
)
_KEYWORD_FIELDS = ("primary_keywords", "secondary_keywords")


def _normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    values = []
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        values.append(ext if ext.startswith(".") else f".{ext}")
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True, slots=True)
class LanguageProfile:
    """Immutable set of switches and keyword lists for one language.

    Every flag defaults to off, so a bare ``LanguageProfile(name=...)`` tags
    nothing but search matches.
    """

    name: str
    extensions: tuple[str, ...] = ()
    numbers: bool = False
    strings: bool = False
    characters: bool = False
    comments: bool = False
    multiline_comments: bool = False
    primary_keywords: tuple[str, ...] = ()
    secondary_keywords: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("profile name cannot be empty")
        object.__setattr__(self, "extensions", _normalize_extensions(self.extensions))
        for attr in _KEYWORD_FIELDS:
            words = tuple(word for word in getattr(self, attr) if word)
            object.__setattr__(self, attr, words)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LanguageProfile":
        """Build a profile from a plain configuration record.

        Unknown keys are rejected so that typos in user configuration do not
        silently disable a rule.
        """

        known = {"name", "extensions", *_FLAG_FIELDS, *_KEYWORD_FIELDS}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown profile keys: {', '.join(unknown)}")

        name = data.get("name")
        if not isinstance(name, str):
            raise ValueError("profile 'name' must be a string")

        kwargs: dict[str, Any] = {"name": name}
        for attr in _FLAG_FIELDS:
            if attr in data:
                value = data[attr]
                if not isinstance(value, bool):
                    raise ValueError(f"profile '{attr}' must be a boolean")
                kwargs[attr] = value
        for attr in ("extensions", *_KEYWORD_FIELDS):
            if attr in data:
                value = data[attr]
                if not isinstance(value, (list, tuple)) or not all(
                    isinstance(item, str) for item in value
                ):
                    raise ValueError(f"profile '{attr}' must be a list of strings")
                kwargs[attr] = tuple(value)
        return cls(**kwargs)

    def matches_path(self, path: str) -> bool:
        lowered = path.lower()
        return any(lowered.endswith(ext) for ext in self.extensions)


PLAIN_PROFILE = LanguageProfile(name="No filetype")

__all__ = ["LanguageProfile", "PLAIN_PROFILE"]
