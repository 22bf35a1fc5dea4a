"""Configuration management for sitenav.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from sitenav.core.navigation import NavigationOptions
from sitenav.errors import ConfigurationError

CONFIG_FILENAME = "sitenav.toml"
UNLIMITED_DEPTH = "unlimited"


@dataclass
class NavigationConfig:
    """Default navigation request settings."""

    depth: int | None = 1
    flat: bool = False
    context: str | None = None

    def to_options(self) -> NavigationOptions:
        """Convert to NavigationOptions for the navigation service."""
        return NavigationOptions(depth=self.depth, flat=self.flat, context=self.context)


@dataclass
class ContentConfig:
    """Content source configuration."""

    source: Path | None = None
    webspace: str | None = None
    locale: str = "en"


@dataclass
class Config:
    """Application configuration."""

    navigation: NavigationConfig
    content: ContentConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for sitenav.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ConfigurationError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        return cls(navigation=NavigationConfig(), content=ContentConfig())

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid configuration file {path}: {e}") from e

        navigation = cls._parse_navigation(data.get("navigation"))
        content = cls._parse_content(data.get("content"), path.parent)

        return cls(navigation=navigation, content=content, config_path=path)

    @classmethod
    def _parse_navigation(cls, data: object) -> NavigationConfig:
        """Parse navigation configuration section.

        Args:
            data: Raw navigation section data

        Returns:
            NavigationConfig instance
        """
        if data is None:
            return NavigationConfig()

        if not isinstance(data, dict):
            raise ConfigurationError("navigation section must be a dictionary")

        depth_raw = data.get("depth", 1)
        depth: int | None
        if depth_raw == UNLIMITED_DEPTH:
            depth = None
        elif isinstance(depth_raw, int) and not isinstance(depth_raw, bool):
            if depth_raw < 0:
                raise ConfigurationError("navigation.depth must not be negative")
            depth = depth_raw
        else:
            raise ConfigurationError(
                f'navigation.depth must be an integer or "{UNLIMITED_DEPTH}"',
            )

        flat = data.get("flat", False)
        if not isinstance(flat, bool):
            raise ConfigurationError("navigation.flat must be a boolean")

        context = data.get("context")
        if context is not None and not isinstance(context, str):
            raise ConfigurationError("navigation.context must be a string")

        return NavigationConfig(depth=depth, flat=flat, context=context)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ContentConfig instance
        """
        if data is None:
            return ContentConfig()

        if not isinstance(data, dict):
            raise ConfigurationError("content section must be a dictionary")

        source = data.get("source")
        if source is not None and not isinstance(source, str):
            raise ConfigurationError("content.source must be a string")

        webspace = data.get("webspace")
        if webspace is not None and not isinstance(webspace, str):
            raise ConfigurationError("content.webspace must be a string")

        locale = data.get("locale", "en")
        if not isinstance(locale, str):
            raise ConfigurationError("content.locale must be a string")

        return ContentConfig(
            source=config_dir / source if source is not None else None,
            webspace=webspace,
            locale=locale,
        )

    def with_overrides(
        self,
        *,
        depth: int | None = None,
        unlimited_depth: bool = False,
        flat: bool | None = None,
        context: str | None = None,
        source: Path | None = None,
        webspace: str | None = None,
        locale: str | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            depth: Override navigation.depth
            unlimited_depth: Remove the depth limit (takes precedence over depth)
            flat: Override navigation.flat
            context: Override navigation.context
            source: Override content.source
            webspace: Override content.webspace
            locale: Override content.locale

        Returns:
            New Config instance with overrides applied
        """
        navigation = self.navigation
        if unlimited_depth:
            navigation = replace(navigation, depth=None)
        elif depth is not None:
            navigation = replace(navigation, depth=depth)
        if flat is not None:
            navigation = replace(navigation, flat=flat)
        if context is not None:
            navigation = replace(navigation, context=context)

        content = self.content
        if source is not None:
            content = replace(content, source=source)
        if webspace is not None:
            content = replace(content, webspace=webspace)
        if locale is not None:
            content = replace(content, locale=locale)

        return replace(self, navigation=navigation, content=content)
