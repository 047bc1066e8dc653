"""Configuration Management with Pydantic.

This module implements configuration models using Pydantic for parsing and
validation of YAML/JSON configuration files with environment variable overrides.
"""

import os
import threading
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field

# Initialize logger
logger = structlog.get_logger(__name__)

# Constants
DEFAULT_EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_TOLERANCE_KM = 25.0  # mean radius vs. equatorial/polar radii
MAX_REPORTED_CYCLES = 1000

_TRUE_VALUES = ("true", "1", "yes")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


class GeodesicConfig(BaseModel):
    """Geodesic distance settings.

    Attributes:
        earth_radius_km: Sphere radius used by haversine distances
    """

    earth_radius_km: float = Field(
        default=DEFAULT_EARTH_RADIUS_KM,
        gt=0,
        description="Earth radius in kilometers",
    )


class ValidationConfig(BaseModel):
    """Road network validation settings.

    Attributes:
        allow_negative_weights: Report negative weights as warnings instead of errors
        check_two_way_reverse: Warn about two-way edges without a reverse edge
        report_cycles: Include directed cycles in the report
        max_reported_cycles: Upper bound on the number of cycles reported
    """

    allow_negative_weights: bool = Field(
        default=False,
        description="Treat negative edge weights as warnings",
    )
    check_two_way_reverse: bool = Field(
        default=True,
        description="Check that two-way edges have a reverse edge",
    )
    report_cycles: bool = Field(
        default=False,
        description="Report directed cycles",
    )
    max_reported_cycles: int = Field(
        default=10,
        ge=1,
        le=MAX_REPORTED_CYCLES,
        description="Maximum number of cycles reported",
    )


class RouteGraphConfig(BaseModel):
    """Main configuration combining all settings.

    Attributes:
        geodesic: Geodesic distance configuration
        validation: Network validation configuration
        logging_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render logs as JSON (True) or for the console (False)
    """

    geodesic: GeodesicConfig = Field(default_factory=GeodesicConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    logging_level: str = Field(
        default="INFO",
        description="Logging level",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    json_logs: bool = Field(
        default=True,
        description="Use JSON log rendering",
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RouteGraphConfig":
        """Load configuration from a YAML (or JSON) file.

        An empty file yields the defaults, with environment overrides applied.

        Args:
            path: Path to the configuration file

        Returns:
            Parsed and validated RouteGraphConfig instance

        Raises:
            FileNotFoundError: If configuration file doesn't exist
            ValueError: If configuration is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            msg = f"Configuration file not found: {config_path}"
            raise FileNotFoundError(msg)

        logger.info("loading_configuration", path=str(config_path))

        try:
            with config_path.open() as f:
                config_data = yaml.safe_load(f) or {}

            if not isinstance(config_data, dict):
                msg = "Configuration file must contain a mapping"
                raise ValueError(msg)

            # Apply environment variable overrides
            config_data = cls._apply_env_overrides(config_data)

            # Parse and validate configuration
            config = cls(**config_data)
        except yaml.YAMLError as e:
            logger.exception("yaml_parse_error", error=str(e), path=str(config_path))
            msg = f"Invalid YAML in configuration file: {e}"
            raise ValueError(msg) from e
        else:
            logger.info(
                "configuration_loaded",
                earth_radius_km=config.geodesic.earth_radius_km,
                logging_level=config.logging_level,
            )

            return config

    @classmethod
    def _apply_env_overrides(cls, config_data: dict) -> dict:
        """Apply environment variable overrides to configuration.

        Environment variables follow the pattern: ROUTEGRAPH_<KEY>
        Example: ROUTEGRAPH_EARTH_RADIUS_KM, ROUTEGRAPH_REPORT_CYCLES

        Args:
            config_data: Base configuration dictionary from file

        Returns:
            Configuration dictionary with environment overrides applied
        """
        env_overrides = {
            # Geodesic configuration
            ("geodesic", "earth_radius_km"): ("ROUTEGRAPH_EARTH_RADIUS_KM", float),
            # Validation configuration
            ("validation", "allow_negative_weights"): ("ROUTEGRAPH_ALLOW_NEGATIVE_WEIGHTS", _parse_bool),
            ("validation", "check_two_way_reverse"): ("ROUTEGRAPH_CHECK_TWO_WAY_REVERSE", _parse_bool),
            ("validation", "report_cycles"): ("ROUTEGRAPH_REPORT_CYCLES", _parse_bool),
            ("validation", "max_reported_cycles"): ("ROUTEGRAPH_MAX_REPORTED_CYCLES", int),
            # Logging
            ("logging_level",): ("ROUTEGRAPH_LOGGING_LEVEL", str.upper),
            ("json_logs",): ("ROUTEGRAPH_JSON_LOGS", _parse_bool),
        }

        for path, (env_var, convert) in env_overrides.items():
            value = os.environ.get(env_var)
            if value is not None:
                # Navigate to nested config section
                current = config_data
                for key in path[:-1]:
                    if key not in current or current[key] is None:
                        current[key] = {}
                    current = current[key]

                current[path[-1]] = convert(value)
                logger.debug(
                    "env_override_applied",
                    env_var=env_var,
                    config_path=".".join(path),
                )

        return config_data

    def validate_config(self) -> list[str]:
        """Validate configuration and return list of warnings.

        Returns:
            List of validation warning messages (empty if no warnings)
        """
        warnings = []

        radius = self.geodesic.earth_radius_km
        if abs(radius - DEFAULT_EARTH_RADIUS_KM) > EARTH_RADIUS_TOLERANCE_KM:
            warnings.append(
                f"Earth radius {radius} km differs from the mean radius "
                f"({DEFAULT_EARTH_RADIUS_KM} km) - distances will be scaled",
            )

        if self.validation.allow_negative_weights:
            warnings.append(
                "Negative edge weights are allowed - Dijkstra results may be incorrect",
            )

        if self.logging_level == "DEBUG":
            warnings.append("DEBUG logging emits one event per graph mutation")

        return warnings


class ConfigManager:
    """Configuration manager using singleton pattern."""

    _instance: RouteGraphConfig | None = None
    _init_lock: threading.Lock = threading.Lock()

    @classmethod
    def load_config(cls, config_path: str | Path | None = None) -> RouteGraphConfig:
        """Load configuration from file.

        Args:
            config_path: Path to configuration file. If None, looks for
                routegraph.yaml, routegraph.yml or routegraph.json in the
                current directory and falls back to defaults (with
                environment overrides) when none exists.

        Returns:
            Loaded RouteGraphConfig instance

        Raises:
            FileNotFoundError: If an explicit config file is not found
            ValueError: If config file is invalid
        """
        if config_path is None:
            # Look for default config files
            for default_name in ["routegraph.yaml", "routegraph.yml", "routegraph.json"]:
                default_path = Path(default_name)
                if default_path.exists():
                    config_path = default_path
                    break
            else:
                logger.info("no_configuration_file_using_defaults")
                return RouteGraphConfig(**RouteGraphConfig._apply_env_overrides({}))

        config_path = Path(config_path)
        if not config_path.exists():
            msg = f"Configuration file not found: {config_path}"
            raise FileNotFoundError(msg)

        return RouteGraphConfig.from_yaml(config_path)

    @classmethod
    def get_config(
        cls,
        config_path: str | Path | None = None,
        reload: bool = False,
    ) -> RouteGraphConfig:
        """Get configuration instance (singleton pattern).

        Uses double-checked locking so concurrent first calls load once.

        Args:
            config_path: Path to configuration file. Only used on first call or when reload=True.
            reload: If True, force reload configuration from file.

        Returns:
            RouteGraphConfig instance
        """
        # First check (without lock) - fast path for already initialized instance
        if cls._instance is not None and not reload:
            return cls._instance

        with cls._init_lock:
            if cls._instance is None or reload:
                cls._instance = cls.load_config(config_path)

            return cls._instance

    @classmethod
    def reset_config(cls) -> None:
        """Reset the configuration instance."""
        cls._instance = None


def load_config(config_path: str | Path | None = None) -> RouteGraphConfig:
    """Load configuration from file."""
    return ConfigManager.load_config(config_path)


def get_config(config_path: str | Path | None = None, reload: bool = False) -> RouteGraphConfig:
    """Get configuration instance (singleton pattern)."""
    return ConfigManager.get_config(config_path, reload)


def reset_config() -> None:
    """Reset the configuration instance."""
    ConfigManager.reset_config()


__all__ = [
    "ConfigManager",
    "GeodesicConfig",
    "RouteGraphConfig",
    "ValidationConfig",
    "get_config",
    "load_config",
    "reset_config",
]
