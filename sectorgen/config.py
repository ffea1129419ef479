"""Configuration loading for sectorgen (sectorgen.yml)."""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from re import Pattern
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .errors import ConfigError

CONFIG_FILENAME = "sectorgen.yml"
SECTOR_PLACEHOLDER = "*"

_DEFAULT_TYPES_DIR = "./types"
_DEFAULT_TYPE_COMMAND: Tuple[str, ...] = ("npx", "zod2ts")

_ENDPOINT_GROUPS = ("name", "input", "kind")


@dataclass(frozen=True)
class SourceConfig:
    """Where sectors live and how to find their router and schema files."""

    sectors_dir: str
    router_pattern: str
    schema_pattern: str
    dist_dir: Optional[str] = None


@dataclass(frozen=True)
class OutputConfig:
    """Naming and placement of the generated package."""

    output_dir: str
    package_name: str
    router_name: str


@dataclass(frozen=True)
class ParsingConfig:
    """Compiled extraction patterns applied to router files."""

    endpoint_pattern: Pattern[str]
    router_method_pattern: Pattern[str]


@dataclass(frozen=True)
class TypeGenConfig:
    """Settings for the external validator-to-type tool."""

    enabled: bool = False
    output_dir: str = _DEFAULT_TYPES_DIR
    command: Tuple[str, ...] = _DEFAULT_TYPE_COMMAND


@dataclass(frozen=True)
class GenerationConfig:
    """Validated settings for one generation run."""

    root: Path
    source: SourceConfig
    generation: OutputConfig
    parsing: ParsingConfig
    zod2ts: TypeGenConfig = field(default_factory=TypeGenConfig)

    @property
    def sectors_path(self) -> Path:
        return (self.root / self.source.sectors_dir).resolve()

    @property
    def output_path(self) -> Path:
        return (self.root / self.generation.output_dir).resolve()

    @property
    def dist_path(self) -> Path | None:
        if not self.source.dist_dir:
            return None
        return (self.root / self.source.dist_dir).resolve()

    @property
    def types_path(self) -> Path:
        return (self.output_path / self.zod2ts.output_dir).resolve()

    def router_file(self, sector: str) -> Path:
        return self.sectors_path / substitute_sector(self.source.router_pattern, sector)

    def schema_file(self, sector: str) -> Path:
        return self.sectors_path / substitute_sector(self.source.schema_pattern, sector)


def substitute_sector(pattern: str, sector: str) -> str:
    """Replace every sector placeholder in a path pattern."""
    return pattern.replace(SECTOR_PLACEHOLDER, sector)


def load_config(config_path: Path, project: Path | None = None) -> GenerationConfig:
    """Load and validate configuration from disk.

    Relative paths inside the file resolve against ``project`` when given,
    otherwise against the directory holding the configuration file.
    """
    config_file = _resolve_config_path(Path(config_path))
    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_file}")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    root = Path(project).expanduser().resolve() if project else config_file.parent
    return parse_config(data, root)


def parse_config(data: Dict[str, Any], root: Path) -> GenerationConfig:
    """Build a :class:`GenerationConfig` from an already-loaded mapping."""
    source_data = _as_dict(data.get("source"))
    generation_data = _as_dict(data.get("generation"))
    parsing_data = _as_dict(data.get("parsing"))
    types_data = _as_dict(data.get("zod2ts"))

    source = SourceConfig(
        sectors_dir=_require_str(source_data, "sectorsDir", "source"),
        router_pattern=_require_placeholder(source_data, "routerPattern", "source"),
        schema_pattern=_require_placeholder(source_data, "schemaPattern", "source"),
        dist_dir=_as_str(source_data.get("distDir")),
    )
    generation = OutputConfig(
        output_dir=_require_str(generation_data, "outputDir", "generation"),
        package_name=_require_str(generation_data, "packageName", "generation"),
        router_name=_require_identifier(generation_data, "routerName", "generation"),
    )
    parsing = ParsingConfig(
        endpoint_pattern=_compile_endpoint_pattern(
            _require_str(parsing_data, "endpointPattern", "parsing")
        ),
        router_method_pattern=_compile_router_pattern(
            _require_str(parsing_data, "routerMethodPattern", "parsing")
        ),
    )

    zod2ts = TypeGenConfig()
    if types_data:
        enabled = _as_bool(types_data.get("enabled"))
        if types_data.get("enabled") is not None and enabled is None:
            raise ConfigError("zod2ts.enabled must be a boolean")
        zod2ts = TypeGenConfig(
            enabled=bool(enabled),
            output_dir=_as_str(types_data.get("outputDir")) or _DEFAULT_TYPES_DIR,
            command=_as_command(types_data.get("command")) or _DEFAULT_TYPE_COMMAND,
        )

    return GenerationConfig(
        root=root,
        source=source,
        generation=generation,
        parsing=parsing,
        zod2ts=zod2ts,
    )


def describe_config(config: GenerationConfig, *, debug: bool = False) -> List[str]:
    """Return the human-readable configuration summary printed by the CLI."""
    lines = [
        "Configuration:",
        "  Source:",
        f"    Sectors directory: {config.source.sectors_dir}",
        f"    Router pattern: {config.source.router_pattern}",
        f"    Schema pattern: {config.source.schema_pattern}",
    ]
    if config.source.dist_dir:
        lines.append(f"    Compiled sectors: {config.source.dist_dir}")
    lines.extend(
        [
            "  Generation:",
            f"    Output directory: {config.generation.output_dir}",
            f"    Package name: {config.generation.package_name}",
            f"    Router name: {config.generation.router_name}",
            "  Parsing:",
            f"    Endpoint pattern: {config.parsing.endpoint_pattern.pattern}",
            f"    Router method pattern: {config.parsing.router_method_pattern.pattern}",
            "  Zod2TS:",
            f"    Enabled: {str(config.zod2ts.enabled).lower()}",
        ]
    )
    if config.zod2ts.enabled:
        lines.append(f"    Output directory: {config.zod2ts.output_dir}")
        lines.append(f"    Command: {' '.join(config.zod2ts.command)}")
    if debug:
        lines.extend(
            [
                f"  Base path: {config.root}",
                "  Resolved paths:",
                f"    Sectors: {config.sectors_path}",
                f"    Output: {config.output_path}",
            ]
        )
        if config.zod2ts.enabled:
            lines.append(f"    Types: {config.types_path}")
    return lines


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Error loading config from {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _compile(value: str, field_name: str) -> Pattern[str]:
    try:
        return re.compile(value)
    except re.error as exc:
        raise ConfigError(f"{field_name} is not a valid regular expression: {exc}") from exc


def _compile_endpoint_pattern(value: str) -> Pattern[str]:
    pattern = _compile(value, "parsing.endpointPattern")
    named = all(group in pattern.groupindex for group in _ENDPOINT_GROUPS)
    if not named and pattern.groups < len(_ENDPOINT_GROUPS):
        raise ConfigError(
            "parsing.endpointPattern must capture the endpoint name, input schema and "
            "operation kind (named groups 'name', 'input', 'kind' or three positional groups)"
        )
    return pattern


def _compile_router_pattern(value: str) -> Pattern[str]:
    pattern = _compile(value, "parsing.routerMethodPattern")
    if "body" not in pattern.groupindex and pattern.groups < 1:
        raise ConfigError(
            "parsing.routerMethodPattern must capture the router body "
            "(named group 'body' or the first group)"
        )
    return pattern


def _require_str(data: Dict[str, Any], key: str, section: str) -> str:
    value = _as_str(data.get(key))
    if not value:
        raise ConfigError(f"{section}.{key} is required")
    return value


def _require_placeholder(data: Dict[str, Any], key: str, section: str) -> str:
    value = _require_str(data, key, section)
    if SECTOR_PLACEHOLDER not in value:
        raise ConfigError(
            f"{section}.{key} must contain the '{SECTOR_PLACEHOLDER}' sector placeholder"
        )
    return value


def _require_identifier(data: Dict[str, Any], key: str, section: str) -> str:
    value = _require_str(data, key, section)
    if not value.isidentifier():
        raise ConfigError(f"{section}.{key} must be a valid identifier, got {value!r}")
    return value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_command(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(shlex.split(value))
    if isinstance(value, list):
        return tuple(str(item) for item in value if isinstance(item, (str, int, float)))
    return ()


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GenerationConfig",
    "OutputConfig",
    "ParsingConfig",
    "SourceConfig",
    "TypeGenConfig",
    "describe_config",
    "load_config",
    "parse_config",
    "substitute_sector",
]
