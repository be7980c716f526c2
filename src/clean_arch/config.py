"""Configuration loading and management for clean-arch.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.clean-arch.toml)
    3. Project config (./clean-arch.toml)
    4. Explicit config file (--config)
    5. Environment variables (CLEAN_ARCH_* prefix, scalar settings only)
    6. CLI overrides (passed as kwargs)

A project config declares the modules and their restrictions:

    max_allowable_distance = 0.5

    [[modules]]
    name = "Core"
    roots = [{ path = "app/core" }, { namespace = "app.core" }]
    excluded = [{ path = "app/core/legacy" }]

    [modules.restrictions]
    forbidden_dependencies = ["Api"]
    public_units = ["app.core.facade.*"]
    max_allowable_distance = 0.3

Example:
    >>> config = load_config(verbose=True)
    >>> config.verbosity
    'verbose'
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Mapping, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "CLEAN_ARCH_"
CONFIG_FILE_NAME = "clean-arch.toml"


@dataclass(frozen=True)
class PathConfig:
    """A namespace prefix and/or a filesystem path prefix."""

    namespace: Optional[str] = None
    path: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.namespace and not self.path:
            raise InvalidConfigError("path", self, "namespace or path is required")

    def as_dict(self) -> dict[str, Optional[str]]:
        return {"namespace": self.namespace, "path": self.path}


@dataclass(frozen=True)
class RestrictionsConfig:
    """Dependency and visibility policy of one module.

    Attributes:
        allowed_dependencies: If set, the only modules this one may depend on
        forbidden_dependencies: Modules this one must not depend on
        public_units: If set, the only units other modules may use
            (fnmatch patterns over qualified names)
        private_units: Units other modules must not use
        max_allowable_distance: Threshold for distance from the main sequence
    """

    allowed_dependencies: tuple[str, ...] = ()
    forbidden_dependencies: tuple[str, ...] = ()
    public_units: tuple[str, ...] = ()
    private_units: tuple[str, ...] = ()
    max_allowable_distance: Optional[float] = None

    def __post_init__(self) -> None:
        if self.max_allowable_distance is not None and not 0.0 <= self.max_allowable_distance <= 1.0:
            raise InvalidConfigError(
                "max_allowable_distance",
                self.max_allowable_distance,
                "must be between 0.0 and 1.0",
            )
        overlap = set(self.allowed_dependencies) & set(self.forbidden_dependencies)
        if overlap:
            raise InvalidConfigError(
                "allowed_dependencies",
                ", ".join(sorted(overlap)),
                "module is both allowed and forbidden",
            )


@dataclass(frozen=True)
class ModuleConfig:
    """One module definition. Order of definition is resolution order."""

    name: str
    roots: tuple[PathConfig, ...] = ()
    excluded: tuple[PathConfig, ...] = ()
    enabled: bool = True
    restrictions: RestrictionsConfig = field(default_factory=RestrictionsConfig)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidConfigError("modules.name", self.name, "must not be empty")
        if self.name.startswith("*"):
            raise InvalidConfigError("modules.name", self.name, "names starting with '*' are reserved")
        if not self.roots:
            raise InvalidConfigError(f"modules.{self.name}.roots", self.roots, "at least one root is required")


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for a check run.

    Attributes:
        Scanning:
            extensions: Source file suffixes to scan
            exclude_patterns: Glob patterns (root-relative) to skip
            max_file_size_mb: Files above this size are skipped
            allow_hidden_files: Include files under dot-directories

        Checks:
            max_allowable_distance: Default D threshold for modules without one
            check_acyclic_dependencies: Report module dependency cycles
            check_stable_dependencies: Report dependencies on less stable modules
            check_distance: Report modules over their D threshold
            check_private_access: Report use of private units of other modules
            fail_on_violations: Non-zero exit code when violations are found

        Output:
            verbosity: Logging verbosity level

        modules: Module definitions, in resolution order
    """

    # Scanning
    extensions: tuple[str, ...] = (".py",)
    exclude_patterns: tuple[str, ...] = (
        "venv/*",
        ".venv/*",
        "build/*",
        "dist/*",
        "node_modules/*",
        "*/__pycache__/*",
        "*.egg-info/*",
        ".tox/*",
    )
    max_file_size_mb: float = 10.0
    allow_hidden_files: bool = False

    # Checks
    max_allowable_distance: Optional[float] = None
    check_acyclic_dependencies: bool = True
    check_stable_dependencies: bool = False
    check_distance: bool = True
    check_private_access: bool = True
    fail_on_violations: bool = True

    # Output
    verbosity: Verbosity = "normal"

    modules: tuple[ModuleConfig, ...] = ()

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")
        if self.max_allowable_distance is not None and not 0.0 <= self.max_allowable_distance <= 1.0:
            raise InvalidConfigError(
                "max_allowable_distance", self.max_allowable_distance, "must be between 0.0 and 1.0"
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet, normal or verbose")
        names = [module.name for module in self.modules]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise InvalidConfigError("modules", ", ".join(duplicates), "duplicate module names")

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is missing or malformed
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / f".{CONFIG_FILE_NAME}"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / CONFIG_FILE_NAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)
    return config_from_dict(merged)


def config_from_dict(data: Mapping[str, Any]) -> AnalysisConfig:
    """Build an AnalysisConfig from plain (TOML-shaped) data."""
    data = dict(data)
    modules = data.pop("modules", ())
    data["modules"] = tuple(
        module if isinstance(module, ModuleConfig) else _module_from_dict(module)
        for module in modules
    )
    for key in ("extensions", "exclude_patterns"):
        if key in data:
            data[key] = tuple(data[key])
    try:
        return AnalysisConfig(**data)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _module_from_dict(entry: Mapping[str, Any]) -> ModuleConfig:
    if not isinstance(entry, Mapping):
        raise InvalidConfigError("modules", entry, "each module must be a table")
    name = entry.get("name", "")
    restrictions = entry.get("restrictions", {})
    if not isinstance(restrictions, Mapping):
        raise InvalidConfigError(f"modules.{name}.restrictions", restrictions, "must be a table")
    try:
        return ModuleConfig(
            name=name,
            roots=tuple(_path_from_entry(root) for root in entry.get("roots", ())),
            excluded=tuple(_path_from_entry(path) for path in entry.get("excluded", ())),
            enabled=_enabled_flag(name, entry.get("enabled", True)),
            restrictions=RestrictionsConfig(
                allowed_dependencies=tuple(restrictions.get("allowed_dependencies", ())),
                forbidden_dependencies=tuple(restrictions.get("forbidden_dependencies", ())),
                public_units=tuple(restrictions.get("public_units", ())),
                private_units=tuple(restrictions.get("private_units", ())),
                max_allowable_distance=restrictions.get("max_allowable_distance"),
            ),
        )
    except TypeError as e:
        raise InvalidConfigError(f"modules.{name}", entry, str(e)) from e


def _enabled_flag(name: str, value: Any) -> bool:
    # TOML has real booleans; a quoted "false" is a mistake, not False
    if not isinstance(value, bool):
        raise InvalidConfigError(f"modules.{name}.enabled", value, "must be true or false")
    return value


def _path_from_entry(entry: Any) -> PathConfig:
    # A bare string is shorthand for a filesystem path
    if isinstance(entry, str):
        return PathConfig(path=entry)
    if isinstance(entry, Mapping):
        unknown = set(entry) - {"namespace", "path"}
        if unknown:
            raise InvalidConfigError("path", entry, f"unknown keys: {', '.join(sorted(unknown))}")
        return PathConfig(namespace=entry.get("namespace"), path=entry.get("path"))
    raise InvalidConfigError("path", entry, "expected a string or a table")


def _load_env_vars() -> dict[str, Any]:
    """Load scalar settings from CLEAN_ARCH_* environment variables.

    Examples: CLEAN_ARCH_MAX_ALLOWABLE_DISTANCE=0.4,
    CLEAN_ARCH_CHECK_STABLE_DEPENDENCIES=true, CLEAN_ARCH_VERBOSITY=quiet.
    Tuple settings (modules, patterns) are not read from the environment.
    """
    type_hints = get_type_hints(AnalysisConfig)
    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e)) from e
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Returns:
        Parsed value, or None for types that can't come from the environment

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is tuple or type_hint is tuple:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file.

    Raises:
        ConfigurationError: If the file can't be read or parsed
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}") from e
