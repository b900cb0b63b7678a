"""Registry of language profiles keyed by name and file extension."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional

from synbuf.runtime.telemetry import record_event, span

from .profile import PLAIN_PROFILE, LanguageProfile


@dataclass(slots=True)
class RegistryStats:
    profile_count: int
    extensions: tuple[str, ...]


class ProfileConflictError(RuntimeError):
    """Raised when a profile name or extension is already claimed."""

    def __init__(self, profile: LanguageProfile, conflicts: Iterable[str]):
        conflicts_tuple = tuple(conflicts)
        super().__init__(
            f"Profile '{profile.name}' conflicts with {list(conflicts_tuple)}"
        )
        self.profile = profile
        self.conflicts = conflicts_tuple


class ProfileRegistry:
    """Owns language profiles and resolves one for a file path.

    Resolution is by extension only; a path nothing claims resolves to the
    fallback profile, which defaults to ``PLAIN_PROFILE``.
    """

    def __init__(
        self,
        *,
        fallback: LanguageProfile = PLAIN_PROFILE,
        logger_name: str | None = None,
    ) -> None:
        self._profiles: Dict[str, LanguageProfile] = {}
        self._by_extension: Dict[str, str] = {}
        self._fallback = fallback
        self._logger_name = logger_name

    @property
    def fallback(self) -> LanguageProfile:
        return self._fallback

    def get(self, name: str) -> LanguageProfile:
        try:
            return self._profiles[name]
        except KeyError as exc:
            raise KeyError(f"Profile '{name}' is not registered") from exc

    def register(
        self, profile: LanguageProfile, *, replace: bool = False
    ) -> LanguageProfile:
        with span(
            "profiles::register",
            logger_name=self._logger_name,
            component="profiles",
            metadata={"profile": profile.name},
        ) as handle:
            conflicts = self.detect_conflicts(profile)
            if conflicts and not replace:
                handle.add_metadata("conflicts", ",".join(conflicts))
                raise ProfileConflictError(profile, conflicts)

            for name in conflicts:
                self._remove(name)
            self._profiles[profile.name] = profile
            for ext in profile.extensions:
                self._by_extension[ext] = profile.name
            return profile

    def unregister(self, name: str) -> Optional[LanguageProfile]:
        if name not in self._profiles:
            return None
        return self._remove(name)

    def detect_conflicts(self, profile: LanguageProfile) -> list[str]:
        conflicts: list[str] = []
        if profile.name in self._profiles:
            conflicts.append(profile.name)
        for ext in profile.extensions:
            owner = self._by_extension.get(ext)
            if owner is not None and owner not in conflicts:
                conflicts.append(owner)
        return conflicts

    def resolve(self, path: Optional[str]) -> LanguageProfile:
        if not path:
            return self._fallback
        lowered = path.lower()
        # Longest suffix first so ".d.ts"-style entries beat ".ts".
        for ext in sorted(self._by_extension, key=len, reverse=True):
            if lowered.endswith(ext):
                profile = self._profiles[self._by_extension[ext]]
                record_event(
                    "profiles.resolve",
                    level="debug",
                    data={"path": path, "profile": profile.name},
                    logger_name=self._logger_name,
                )
                return profile
        return self._fallback

    def __iter__(self) -> Iterator[LanguageProfile]:
        return iter(self._profiles.values())

    def __len__(self) -> int:
        return len(self._profiles)

    def stats(self) -> RegistryStats:
        return RegistryStats(
            profile_count=len(self._profiles),
            extensions=tuple(sorted(self._by_extension)),
        )

    def _remove(self, name: str) -> LanguageProfile:
        profile = self._profiles.pop(name)
        for ext in profile.extensions:
            if self._by_extension.get(ext) == name:
                del self._by_extension[ext]
        return profile


__all__ = ["ProfileRegistry", "ProfileConflictError", "RegistryStats"]
