"""Loading, merging and selecting the bar configuration."""

from __future__ import annotations

import json
import logging
import os
import re
import shlex
from typing import Any, Iterable, Sequence

logger = logging.getLogger(__name__)

SYSCONFDIR = "/usr/local/etc"
MAX_INCLUDE_DEPTH = 100

_VAR_RE = re.compile(r"\$\{([^}]*)\}|\$(\w+)")


class ConfigError(RuntimeError):
    """Raised when the configuration cannot be found, read or parsed."""


def _strip_comments(text: str) -> str:
    out: list[str] = []
    pos = 0
    length = len(text)
    in_string = False
    while pos < length:
        char = text[pos]
        if in_string:
            out.append(char)
            if char == "\\" and pos + 1 < length:
                out.append(text[pos + 1])
                pos += 2
                continue
            if char == '"':
                in_string = False
            pos += 1
        elif char == '"':
            in_string = True
            out.append(char)
            pos += 1
        elif text.startswith("//", pos):
            end = text.find("\n", pos)
            pos = length if end == -1 else end
        elif text.startswith("/*", pos):
            end = text.find("*/", pos + 2)
            pos = length if end == -1 else end + 2
        else:
            out.append(char)
            pos += 1
    return "".join(out)


def parse_json(text: str) -> Any:
    """Parse JSON text that may carry // and /* */ comments."""
    try:
        return json.loads(_strip_comments(text))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON: {exc}") from exc


def _expand_vars(path: str) -> str:
    def replace(match: re.Match[str]) -> str:
        name = match.group(1) if match.group(1) is not None else match.group(2)
        return os.environ.get(name, "")

    return _VAR_RE.sub(replace, path)


def try_expand_path(path: str) -> str | None:
    """Expand variables and ``~`` in ``path``; return it if the result exists."""
    expanded = _expand_vars(path)
    try:
        words = shlex.split(expanded)
    except ValueError:
        return None
    if not words:
        return None
    first = os.path.expanduser(words[0])
    return first if os.path.exists(first) else None


def merge_config(a: Any, b: Any) -> Any:
    """Merge ``b`` into ``a`` without overriding values already set in ``a``.

    Objects are merged in place; the merged value is returned.
    """
    if a is None:
        return b
    if isinstance(a, dict) and isinstance(b, dict):
        for key, value in b.items():
            if isinstance(a.get(key), dict) and isinstance(value, dict):
                merge_config(a[key], value)
            elif key not in a:
                a[key] = value
            else:
                logger.debug("Option %s is already set; ignoring value %r", key, value)
    else:
        logger.error("Cannot merge config, conflicting or invalid JSON types")
    return a


def is_valid_output(config: dict, name: str, identifier: str) -> bool:
    """Tell whether a bar configuration applies to the given output."""
    output = config.get("output")
    if isinstance(output, list):
        return any(isinstance(item, str) and item in (name, identifier) for item in output)
    if isinstance(output, str) and output:
        if output.startswith("!"):
            excluded = output[1:]
            return excluded != name and excluded != identifier
        return output in (name, identifier)
    return True


class Config:
    """The merged configuration of all bars."""

    CONFIG_DIRS: tuple[str, ...] = (
        "$XDG_CONFIG_HOME/waybar/",
        "$HOME/.config/waybar/",
        "$HOME/waybar/",
        "/etc/xdg/waybar/",
        SYSCONFDIR + "/xdg/waybar/",
        "./resources/",
    )

    def __init__(self) -> None:
        self.config: Any = None
        self.config_file: str = ""

    @staticmethod
    def find_config_path(
        names: Iterable[str], dirs: Sequence[str] | None = None
    ) -> str | None:
        """Return the first existing ``dir + name``, searching dirs in order."""
        names = list(names)
        for directory in Config.CONFIG_DIRS if dirs is None else dirs:
            for name in names:
                found = try_expand_path(directory + name)
                if found:
                    return found
        return None

    def load(self, config: str = "") -> None:
        """Load the given configuration file, or search the default places."""
        path = self.find_config_path(["config", "config.jsonc"]) if not config else config
        if not path:
            raise ConfigError("Missing required resource files")
        self.config_file = path
        logger.info("Using configuration file %s", path)
        self.config = self._setup_config(self.config, path, 0)

    def _setup_config(self, dst: Any, config_file: str, depth: int) -> Any:
        if depth > MAX_INCLUDE_DEPTH:
            raise ConfigError("Aborting due to likely recursive include in config files")
        try:
            with open(config_file, encoding="utf-8") as handle:
                text = handle.read()
        except OSError as exc:
            raise ConfigError("Can't open config file") from exc
        loaded = parse_json(text)
        if isinstance(loaded, list):
            for part in loaded:
                self._resolve_includes(part, depth)
        else:
            self._resolve_includes(loaded, depth)
        return merge_config(dst, loaded)

    def _resolve_includes(self, config: Any, depth: int) -> None:
        if not isinstance(config, dict):
            return
        includes = config.get("include")
        if isinstance(includes, str):
            includes = [includes]
        elif not isinstance(includes, list):
            return
        for include in includes:
            include = include if isinstance(include, str) else ""
            logger.info("Including resource file: %s", include)
            depth += 1
            self._setup_config(config, try_expand_path(include) or "", depth)

    def get_output_configs(self, name: str, identifier: str) -> list[dict]:
        """Return the bar configurations that apply to an output."""
        if isinstance(self.config, list):
            return [
                part
                for part in self.config
                if isinstance(part, dict) and is_valid_output(part, name, identifier)
            ]
        if isinstance(self.config, dict) and is_valid_output(self.config, name, identifier):
            return [self.config]
        if self.config is None:
            return [self.config]
        return []