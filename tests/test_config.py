import pytest

from waybar.config import (
    Config,
    ConfigError,
    is_valid_output,
    merge_config,
    parse_json,
    try_expand_path,
)


def test_parse_json_strips_comments_but_keeps_strings():
    text = '{\n  // comment\n  "a": "x // y", /* block */ "b": 2\n}'
    assert parse_json(text) == {"a": "x // y", "b": 2}


def test_parse_json_escaped_quote_in_string():
    assert parse_json('{"a": "q\\" // not a comment"}') == {"a": 'q" // not a comment'}


def test_parse_json_invalid_raises():
    with pytest.raises(ConfigError):
        parse_json("{not json")


def test_merge_into_none_returns_other():
    b = {"height": 30}
    assert merge_config(None, b) is b


def test_merge_does_not_override_existing_keys():
    a = {"height": 30, "modules": {"x": 1}}
    b = {"height": 40, "width": 10, "modules": {"x": 2, "y": 3}}
    result = merge_config(a, b)
    assert result is a
    assert a == {"height": 30, "width": 10, "modules": {"x": 1, "y": 3}}


def test_merge_conflicting_types_keeps_first():
    a = [1, 2]
    assert merge_config(a, {"k": 1}) == [1, 2]


def test_is_valid_output_variants():
    assert is_valid_output({}, "DP-1", "Dell")
    assert is_valid_output({"output": ""}, "DP-1", "Dell")
    assert is_valid_output({"output": "DP-1"}, "DP-1", "Dell")
    assert is_valid_output({"output": "Dell"}, "DP-1", "Dell")
    assert not is_valid_output({"output": "HDMI-1"}, "DP-1", "Dell")
    assert not is_valid_output({"output": "!DP-1"}, "DP-1", "Dell")
    assert is_valid_output({"output": "!HDMI-1"}, "DP-1", "Dell")
    assert is_valid_output({"output": ["HDMI-1", "Dell"]}, "DP-1", "Dell")
    assert not is_valid_output({"output": ["HDMI-1", 3]}, "DP-1", "Dell")


def test_try_expand_path_expands_variables(tmp_path, monkeypatch):
    target = tmp_path / "config"
    target.write_text("{}")
    monkeypatch.setenv("WAYBAR_TEST_DIR", str(tmp_path))
    assert try_expand_path("$WAYBAR_TEST_DIR/config") == str(target)
    assert try_expand_path("${WAYBAR_TEST_DIR}/config") == str(target)
    assert try_expand_path("$WAYBAR_TEST_DIR/missing") is None


def test_find_config_path_respects_dir_order(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (second / "config").write_text("{}")
    (first / "config.jsonc").write_text("{}")
    found = Config.find_config_path(
        ["config", "config.jsonc"], [str(first) + "/", str(second) + "/"]
    )
    assert found == str(first / "config.jsonc")
    assert Config.find_config_path(["nothing"], [str(first) + "/"]) is None


def test_load_with_include(tmp_path):
    extra = tmp_path / "extra.json"
    extra.write_text('{"height": 99, "width": 12}')
    main = tmp_path / "config"
    main.write_text('{"height": 30, "include": "%s"}' % extra)
    config = Config()
    config.load(str(main))
    assert config.config_file == str(main)
    assert config.config["height"] == 30
    assert config.config["width"] == 12


def test_load_recursive_include_aborts(tmp_path):
    main = tmp_path / "config"
    main.write_text('{"include": ["%s"]}' % main)
    with pytest.raises(ConfigError):
        Config().load(str(main))


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        Config().load(str(tmp_path / "absent"))


def test_get_output_configs_for_array(tmp_path):
    main = tmp_path / "config"
    main.write_text('[{"output": "DP-1", "name": "a"}, 5, {"name": "b"}, {"output": "!DP-1"}]')
    config = Config()
    config.load(str(main))
    names = [c["name"] for c in config.get_output_configs("DP-1", "Dell")]
    assert names == ["a", "b"]
    assert len(config.get_output_configs("HDMI-1", "Other")) == 2