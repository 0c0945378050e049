# ipsview/config.py
import os
import json
from typing import Any, Optional

from ipsview.errors import IpsViewConfigError

OUTPUT_FORMATS = ("text", "html", "tree")

DEFAULT_CONFIG = {
    "output_format": "text",
    "compact_uuids": True,
    "log_level": "INFO",
    "log_to_file": False,
    "log_file": "~/.ipsview/ipsview.log",
}


class IpsViewConfig:
    def __init__(self, config_path: Optional[str] = None, **kwargs):
        self._data = dict(DEFAULT_CONFIG)
        self._data.update(kwargs)
        self._data["config_path"] = config_path

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def __getattr__(self, name: str) -> Any:
        if name in self._data:
            return self._data[name]
        raise AttributeError(f"'IpsViewConfig' object has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "_data":
            super().__setattr__(name, value)
        else:
            self._data[name] = value

    def to_dict(self) -> dict:
        return {k: v for k, v in self._data.items() if k != "config_path"}

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "IpsViewConfig":
        if config_path is None:
            config_path = os.path.join(_ensure_ipsview_dir(), "config.json")
            if not os.path.exists(config_path):
                try:
                    with open(config_path, "w") as f:
                        json.dump(DEFAULT_CONFIG, f, indent=2)
                except OSError as e:
                    raise IpsViewConfigError(f"Failed to write default config to {config_path}: {e}")
                return cls(config_path=config_path, **DEFAULT_CONFIG)
        else:
            config_path = os.path.expanduser(config_path)

        try:
            with open(config_path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise IpsViewConfigError(f"Failed to load config from {config_path}: {e}")
        if not isinstance(data, dict):
            raise IpsViewConfigError(f"Config file {config_path} must contain a JSON object")

        fmt = data.get("output_format", DEFAULT_CONFIG["output_format"])
        if fmt not in OUTPUT_FORMATS:
            raise IpsViewConfigError(f"Unknown output_format '{fmt}' in {config_path}")
        data.pop("config_path", None)
        return cls(config_path=config_path, **data)

    def save(self) -> None:
        config_path = self._data.get("config_path")
        if not config_path:
            config_path = os.path.join(_ensure_ipsview_dir(), "config.json")
        try:
            with open(config_path, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
        except OSError as e:
            raise IpsViewConfigError(f"Failed to save ipsview config: {e}")


def _ensure_ipsview_dir() -> str:
    """Ensure that ~/.ipsview/ directory exists. Return its path."""
    home = os.path.expanduser("~")
    ipsview_dir = os.path.join(home, ".ipsview")
    os.makedirs(ipsview_dir, exist_ok=True)
    return ipsview_dir
