"""
Configuration for the emission timeline.

All settings live in one JSON document (config/config.json by default):

- colors.palette: named colours of every canvas element
- colors.fonts: label font family and point size
- strings: user-visible texts, grouped by category
- ui: layout values, with the timeline geometry under ui.timeline
- logging: options read by logging_config.setup_logging
"""
import json
import pathlib
import sys
import logging
from typing import Any

logger = logging.getLogger(__name__)

PROJECT_ROOT = pathlib.Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "config.json"

# Sections whose absence makes the document unusable
REQUIRED_SECTIONS = ("colors", "strings", "ui")


class ConfigManager:
    """Loads the JSON configuration and answers lookups with fallbacks.

    Attributes:
        colors: Palette name -> colour string
        fonts: Font role -> family (or size)
        strings: Category -> key -> text
        ui: UI category -> settings
    """

    colors: dict[str, str]
    fonts: dict[str, str]
    strings: dict[str, Any]
    ui: dict[str, Any]
    exit_on_error: bool
    cfg_path: pathlib.Path
    _cfg: dict[str, Any]

    def __init__(
        self,
        cfg_path: str | pathlib.Path | None = None,
        exit_on_error: bool = True
    ) -> None:
        """
        Args:
            cfg_path: JSON file to read, DEFAULT_CONFIG_PATH when None
            exit_on_error: Exit the process on an unusable file instead of raising
        """
        self.cfg_path = pathlib.Path(cfg_path) if cfg_path is not None else DEFAULT_CONFIG_PATH
        self.exit_on_error = exit_on_error
        self.colors, self.fonts, self.strings, self.ui = {}, {}, {}, {}
        self._cfg = {}
        self.load_config()

    def _fail(self, message: str, error_type: type[Exception]) -> None:
        logger.error(message)
        if self.exit_on_error:
            sys.exit(1)
        raise error_type(message)

    def load_config(self) -> None:
        """(Re)read the configuration file.

        Raises:
            RuntimeError: File missing or not valid JSON (when not exiting)
            KeyError: A required section is missing (when not exiting)
        """
        try:
            with open(self.cfg_path, 'r', encoding='utf-8') as f:
                self._cfg = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self._fail(f"Cannot load configuration '{self.cfg_path}': {e}", RuntimeError)

        missing = [name for name in REQUIRED_SECTIONS if name not in self._cfg]
        if missing or "palette" not in self._cfg.get("colors", {}):
            self._fail(f"Configuration '{self.cfg_path}' lacks: {missing or ['colors.palette']}", KeyError)

        self.colors = self._cfg["colors"]["palette"]
        self.fonts = self._cfg["colors"].get("fonts", {})
        self.strings = self._cfg["strings"]
        self.ui = self._cfg["ui"]
        self._cfg.setdefault("logging", {})
        logger.debug("Configuration loaded from %s", self.cfg_path)

    # Lookups
    # -------

    def get_color(self, key: str, default: str | None = None) -> str:
        """Palette colour for `key`; black when neither it nor a default exists."""
        return self.colors.get(key, default or "#000000")

    def get_font(self, key: str = "primary") -> str:
        return self.fonts.get(key, "Arial")

    def get_string(self, category: str, key: str, default: str | None = None) -> str:
        """User-visible text; falls back to `default`, then to the key itself."""
        return self.strings.get(category, {}).get(key, default or key)

    def get_ui_setting(self, category: str, key: str, default: Any = None) -> Any:
        return self.ui.get(category, {}).get(key, default)

    def get_setting(self, section: str, key: str, default: Any = None) -> Any:
        """Value from any top-level section."""
        section_values = self._cfg.get(section)
        if not isinstance(section_values, dict):
            return default
        return section_values.get(key, default)

    def get_logging_setting(self, key: str, default: Any = None) -> Any:
        return self.get_setting("logging", key, default)

    def get_timeline_setting(self, key: str, default: Any = None) -> Any:
        """Timeline geometry value from ui.timeline."""
        return self.get_ui_setting("timeline", key, default)


# Shared instance used throughout the application
config = ConfigManager()
