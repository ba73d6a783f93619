import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError

MANIFEST_FILE = "apidecl.toml"


@dataclass
class ApiConfig:
    """Where declarations live and where compiled facts are written."""

    dir: str = "data/api"
    suffixes: list[str] = field(default_factory=lambda: [".ts"])
    cache_file: str = ".apidecl/facts.json"


@dataclass
class TransportConfig:
    """HTTP transport settings."""

    base_url: str = ""
    timeout: float = 30.0
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class StorageConfig:
    """Local storage settings."""

    dir: str = ".apidecl/storage"


@dataclass
class ProjectManifest:
    """
    Project configuration loaded from apidecl.toml.

    Example:

        [api]
        dir = "data/api"
        suffixes = [".ts"]
        cache_file = ".apidecl/facts.json"

        [transport]
        base_url = "http://localhost:8000"
        timeout = 30.0

        [storage]
        dir = ".apidecl/storage"
    """

    root: Path = field(default_factory=Path.cwd)
    api: ApiConfig = field(default_factory=ApiConfig)
    transport: TransportConfig = field(default_factory=TransportConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @classmethod
    def default(cls, root: Path | None = None) -> "ProjectManifest":
        return cls(root=root or Path.cwd())

    @property
    def api_dir(self) -> Path:
        return self.root / self.api.dir

    @property
    def cache_path(self) -> Path:
        return self.root / self.api.cache_file

    @property
    def storage_dir(self) -> Path:
        return self.root / self.storage.dir


def load_manifest(path: Path) -> ProjectManifest:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid {path.name}: {e}") from e

    api_data = data.get("api", {})
    transport_data = data.get("transport", {})
    storage_data = data.get("storage", {})

    suffixes = api_data.get("suffixes", [".ts"])
    if not isinstance(suffixes, list) or not all(isinstance(s, str) for s in suffixes):
        raise ConfigError(f"Invalid {path.name}: api.suffixes must be a list of strings")

    try:
        timeout = float(transport_data.get("timeout", 30.0))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid {path.name}: transport.timeout must be a number") from e

    api_config = ApiConfig(
        dir=api_data.get("dir", "data/api"),
        suffixes=list(suffixes),
        cache_file=api_data.get("cache_file", ".apidecl/facts.json"),
    )

    transport_config = TransportConfig(
        base_url=transport_data.get("base_url", ""),
        timeout=timeout,
        headers=dict(transport_data.get("headers", {})),
    )

    storage_config = StorageConfig(
        dir=storage_data.get("dir", ".apidecl/storage"),
    )

    return ProjectManifest(
        root=path.parent.resolve(),
        api=api_config,
        transport=transport_config,
        storage=storage_config,
    )


def find_manifest(project_dir: Path) -> ProjectManifest:
    """Load apidecl.toml from a project directory, or defaults if there is none."""
    path = project_dir / MANIFEST_FILE
    if path.exists():
        return load_manifest(path)
    return ProjectManifest.default(project_dir.resolve())
