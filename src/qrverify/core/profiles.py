"""Built-in tolerance profiles and YAML overrides."""

from __future__ import annotations

from typing import Any

from qrverify.core.variants import generate_variants
from qrverify.errors import ConfigurationError
from qrverify.models.config import ToleranceProfile

# Value lists are chosen so each profile's attempt count is a round, advertised number:
# medium = 1 x 2 x 2 + 1 = 5, high = 2 x 4 x 3 + 1 = 25.
BUILTIN_PROFILES: dict[str, ToleranceProfile] = {
    "high": ToleranceProfile(
        name="high",
        contrast=(3.0, 1.5),
        brightness=(0.9, 1.1, 1.2, 1.4),
        blur=(0.5, 1.0, 2.0),
        title="High tolerance",
    ),
    "medium": ToleranceProfile(
        name="medium",
        contrast=(1.5,),
        brightness=(0.9, 1.1),
        blur=(0.5, 1.0),
        title="Medium tolerance",
    ),
    "none": ToleranceProfile(name="none", title="No preprocessing"),
}

_AXES = ("contrast", "brightness", "blur")


def _axis_values(name: str, axis: str, raw: Any) -> tuple[float, ...]:
    if raw is None:
        return ()
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        raw = [raw]
    if not isinstance(raw, list):
        raise ConfigurationError(f"profile {name!r}: {axis} must be a list of numbers")
    return tuple(raw)


def _profile_from_dict(name: str, data: Any) -> ToleranceProfile:
    if not isinstance(data, dict):
        raise ConfigurationError(f"profile {name!r} must be a mapping of axis lists")
    unknown = set(data) - set(_AXES) - {"title"}
    if unknown:
        raise ConfigurationError(f"profile {name!r}: unknown keys {sorted(unknown)}")
    axes = {axis: _axis_values(name, axis, data.get(axis)) for axis in _AXES}
    # Validate eagerly so a bad file fails before the batch starts
    generate_variants(**axes)
    return ToleranceProfile(
        name=name,
        contrast=tuple(float(v) for v in axes["contrast"]),
        brightness=tuple(float(v) for v in axes["brightness"]),
        blur=tuple(float(v) for v in axes["blur"]),
        title=str(data.get("title", "")),
    )


def load_profiles(path: str) -> dict[str, ToleranceProfile]:
    """Load tolerance profiles from YAML, merged over the built-ins.

    The file maps profile names to ``contrast``/``brightness``/``blur`` lists
    (and an optional ``title``).
    """
    import yaml  # type: ignore[import-untyped]

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"cannot read profiles from {path}: {e}") from e

    profiles = dict(BUILTIN_PROFILES)
    if data is None:
        return profiles
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping of profile names")

    for name, body in data.items():
        profiles[str(name)] = _profile_from_dict(str(name), body)
    return profiles


def resolve_profile(name: str, profiles_path: str | None = None) -> ToleranceProfile:
    profiles = load_profiles(profiles_path) if profiles_path else BUILTIN_PROFILES
    try:
        return profiles[name]
    except KeyError:
        choices = ", ".join(profiles)
        raise ConfigurationError(
            f"unknown tolerance profile {name!r} (choose from {choices})"
        ) from None
