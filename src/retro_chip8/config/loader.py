import re
import yaml
from dataclasses import replace
from typing import Dict, Any, Optional

from retro_chip8.errors import ConfigError
from retro_chip8.ui.keymap import qt_key_code
from .models import HostConfig, DEFAULT_KEYMAP

COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

class ConfigLoader:
    def load_from_file(self, path: str) -> HostConfig:
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        return self._parse_config(data or {})

    def _parse_config(self, data: Dict[str, Any]) -> HostConfig:
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping")

        defaults = HostConfig()
        seed = data.get("seed")

        keymap = dict(DEFAULT_KEYMAP)
        entries = data.get("keymap") or {}
        if not isinstance(entries, dict):
            raise ConfigError("keymap must be a mapping of host key names to keys 0x0 - 0xF")
        for name, key in entries.items():
            # 未知のホストキー名はここでConfigErrorにする
            qt_key_code(name)
            value = self._parse_int(key)
            if not 0 <= value <= 0xF:
                raise ConfigError(f"Keymap entry {name!r} must map to a key between 0x0 and 0xF, got {key!r}")
            keymap[str(name).upper()] = value

        return HostConfig(
            clock=self._parse_positive_int(data.get("clock", defaults.clock), "clock"),
            scale=self._parse_positive_int(data.get("scale", defaults.scale), "scale"),
            background=self.parse_color(data.get("background", defaults.background)),
            foreground=self.parse_color(data.get("foreground", defaults.foreground)),
            volume=self.parse_volume(data.get("volume", defaults.volume)),
            tone=self._parse_float(data.get("tone", defaults.tone), "tone"),
            seed=self._parse_int(seed) if seed is not None else None,
            keymap=keymap,
        )

    # @intent:responsibility コマンドライン引数で指定された値で設定を上書きします（Noneは上書きしない）。
    def apply_overrides(self, config: HostConfig, **overrides: Optional[Any]) -> HostConfig:
        values = {name: value for name, value in overrides.items() if value is not None}
        if "background" in values:
            values["background"] = self.parse_color(values["background"])
        if "foreground" in values:
            values["foreground"] = self.parse_color(values["foreground"])
        if "volume" in values:
            values["volume"] = self.parse_volume(values["volume"])
        for name in ("clock", "scale"):
            if name in values:
                values[name] = self._parse_positive_int(values[name], name)
        return replace(config, **values)

    def parse_color(self, value: Any) -> str:
        if not isinstance(value, str) or not COLOR_PATTERN.match(value):
            raise ConfigError(f"Invalid color {value!r}, expected #RRGGBB")
        return value.upper()

    def parse_volume(self, value: Any) -> float:
        volume = self._parse_float(value, "volume")
        if not 0.0 <= volume <= 1.0:
            raise ConfigError(f"Invalid volume value {value!r}, expected 0.0 - 1.0")
        return volume

    def _parse_positive_int(self, value: Any, name: str) -> int:
        result = self._parse_int(value)
        if result <= 0:
            raise ConfigError(f"Invalid {name} value {value!r}, expected a positive integer")
        return result

    def _parse_float(self, value: Any, name: str) -> float:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid {name} value: {value!r}")
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid {name} value: {value!r}") from e

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError as e:
                raise ConfigError(f"Invalid integer format: {value}") from e
        raise ConfigError(f"Invalid integer format: {value}")
