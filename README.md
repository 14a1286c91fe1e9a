# waybar

Building blocks for a Wayland status bar: loading and merging a JSON (with
comments) configuration, choosing which bar configurations belong to which
output, label modules that turn system readings into markup, and the geometry
of the layer surface that holds a bar.

## Installation

```
pip install .
```

Run the tests with `pip install .[test]` followed by `pytest`.

## Configuration

`waybar.config` reads the configuration.

- `Config.load(path)` loads `path`, or, given an empty string, searches for
  `config` or `config.jsonc` in `$XDG_CONFIG_HOME/waybar/`,
  `$HOME/.config/waybar/`, `$HOME/waybar/`, `/etc/xdg/waybar/`,
  `/usr/local/etc/xdg/waybar/` and `./resources/`. It raises `ConfigError`
  when nothing is found or a file cannot be read or parsed.
- A configuration may pull in other files with `"include"` (a string or a
  list). Values set first always win; nested objects are merged.
- `Config.get_output_configs(name, identifier)` returns the bar
  configurations whose `"output"` matches the output's name or identifier
  (a string, a `!`-prefixed exclusion, or a list).
- `parse_json`, `merge_config`, `is_valid_output`, `try_expand_path` and
  `Config.find_config_path` are available on their own.

```python
from waybar.config import Config

config = Config()
config.load("")
for bar_config in config.get_output_configs("eDP-1", "Example Display"):
    print(bar_config.get("position", "top"))
```

## Modules

`waybar.module` holds the base classes:

- `Module` handles clicks (`handle_toggle(button)`) and scrolls
  (`handle_scroll(ScrollEvent)`), including smooth scrolling with
  `smooth-scrolling-threshold`. Commands configured under `on-click`,
  `on-click-middle`, `on-click-right`, `on-click-backward`,
  `on-click-forward`, `on-scroll-up`, `on-scroll-down` and `on-update` are
  appended to `Module.commands`; running them is left to the caller.
  Functions in `Module.listeners` are called when the module asks to be
  redrawn.
- `Label` adds `format`, `format-alt` toggling, `interval` (`"once"`
  included), `max-length`, `min-length`, `rotate` and `align`, plus
  `get_icon` (from `format-icons`) and `get_state` (from `states`). The
  rendered text is kept in `markup`, the tooltip in `tooltip`, style classes
  in `classes` and visibility in `visible`.
- `Group` is a container of other modules.

`waybar.modules` holds concrete label modules:

- `disk.Disk` — used and free space of `path` (default `/`), with
  `{free}`, `{used}`, `{total}`, `{percentage_free}`, `{percentage_used}` and
  `{path}`; `format_size` prints sizes with binary prefixes.
- `clock.Clock` — time in the local zone or in `timezone`/`timezones`
  (switched by scrolling), with a month calendar for `{calendar}` in
  `tooltip-format` and `today-format` for the current day. Weeks start on
  Sunday.
- `custom.Custom` — shows a command's output given to it through
  `set_output(exit_code, out)`, read as raw lines (text, tooltip, class) or,
  with `"return-type": "json"`, as a JSON object with `text`, `alt`,
  `tooltip`, `class` and `percentage`. `refresh(sig)` and user interaction
  count requests to run the command again in `wakeups`.
- `backlight.Backlight` — brightness in percent of the best device under
  `/sys/class/backlight` (or another root), preferring `device` when set.

```python
from waybar.modules.custom import Custom

weather = Custom("weather", "", {"exec": "weather-cmd", "interval": 600})
weather.set_output(0, "Sunny\nClear sky\nsunny\n")
weather.update()
print(weather.markup, weather.tooltip, weather.classes)
# Sunny Clear sky {'sunny'}
```

## Surface geometry

`waybar.surface.Surface` works out anchoring (`set_position`), margins
(`Margins`), the exclusive zone to reserve (`exclusive_zone()`), the size to
request from the compositor (`surface_size(width, height)`) and whether a
size sent by the compositor changes the bar (`configure(width, height)`).
`Layer` and `Anchor` name the layer and edges.

## What this package does not do

There is no command to start a bar, and nothing here connects to a Wayland
display, draws windows or runs the configured commands. There are no battery
or CPU modules, no module factory and no bar layout that places modules on
the left, centre and right. The package provides the configuration, module and
geometry logic for a program that does those things.