"""Configuration file format for gridsort."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from gridsort.core.entity import EntityDef
from gridsort.core.path_resolver import DEFAULT_MAX_DEPTH

CONFIG_NAMES = ["gridsort.yaml", "gridsort.yml", "gridsort.json"]


class DuckDBConnection(BaseModel):
    """DuckDB connection configuration."""

    type: Literal["duckdb"] = "duckdb"
    path: str = Field(..., description="Path to DuckDB database file or :memory:")


class ListingConfig(BaseModel):
    """A list view: the entity it lists, its columns, and its sortable fields."""

    name: str = Field(..., description="Unique listing name")
    entity: str = Field(..., description="Entity type listed")
    columns: dict[str, str] = Field(default_factory=dict, description="Displayed column -> header title")
    sortable: dict[str, str] = Field(default_factory=dict, description="Sort label -> dotted relation path")


class GridsortConfig(BaseModel):
    """gridsort configuration file format.

    Can be saved as gridsort.yaml or gridsort.json.

    Example YAML:
        connection:
          type: duckdb
          path: data/app.db
        max_path_depth: 4
        entities:
          - name: Team
            table: Team
            relations:
              - name: Cheerleader
                target: Cheerleader
          - name: Cheerleader
            table: Cheerleader
        listings:
          - name: teams
            entity: Team
            sortable:
              City: City
              Cheerleader Name: Cheerleader.Name
    """

    connection: DuckDBConnection | None = Field(default=None, description="Database connection configuration")
    max_path_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, description="Maximum relation hops per sort path")
    entities: list[EntityDef] = Field(default_factory=list, description="Entity definitions")
    listings: list[ListingConfig] = Field(default_factory=list, description="List view definitions")

    def get_listing(self, name: str) -> ListingConfig:
        """Get listing by name.

        Raises:
            KeyError: If listing not found
        """
        for listing in self.listings:
            if listing.name == name:
                return listing
        raise KeyError(f"Listing {name} not found")

    def resolve_paths(self, base_dir: Path | None = None) -> "GridsortConfig":
        """Resolve a relative DuckDB path against ``base_dir`` (defaults to cwd).

        Returns:
            New config with resolved paths
        """
        base = base_dir or Path.cwd()

        connection = self.connection
        if connection and connection.path != ":memory:":
            db_p = Path(connection.path)
            if not db_p.is_absolute():
                db_p = (base / db_p).resolve()
            connection = DuckDBConnection(type="duckdb", path=str(db_p))

        return self.model_copy(update={"connection": connection})


def load_config(config_path: Path) -> GridsortConfig:
    """Load configuration from YAML or JSON file.

    Args:
        config_path: Path to config file (gridsort.yaml or gridsort.json)

    Returns:
        Loaded and validated configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file format is invalid
    """
    import json

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        import yaml

        with open(config_path) as f:
            data = yaml.safe_load(f)
    elif suffix == ".json":
        with open(config_path) as f:
            data = json.load(f)
    else:
        raise ValueError(f"Unsupported config format: {suffix}. Use .yaml, .yml, or .json")

    config = GridsortConfig(**(data or {}))

    return config.resolve_paths(config_path.parent)


def find_config(start_dir: Path | None = None) -> Path | None:
    """Find config file by searching up the directory tree.

    Args:
        start_dir: Directory to start searching from (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for name in CONFIG_NAMES:
            config_path = current / name
            if config_path.exists():
                return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def build_connection_string(config: GridsortConfig) -> str:
    """Build database connection string from config."""
    if not config.connection:
        return "duckdb:///:memory:"
    return f"duckdb:///{config.connection.path}"
