"""Tests for lint options and the config loader (.i18nlint.yml)."""

import pytest

import i18nlint.config as config_mod
from i18nlint.config import (
    DEFAULT_ATTRIBUTES,
    DEFAULT_IGNORE_TAGS,
    LintOptions,
    load_config,
)


@pytest.fixture(autouse=True)
def no_user_config(tmp_path, monkeypatch):
    """Keep the real ~/.i18nlint/config.yml out of every test."""
    monkeypatch.setattr(config_mod, "USER_CONFIG_PATH", tmp_path / "absent" / "config.yml")


class TestLintOptions:
    def test_defaults(self):
        opts = LintOptions()
        assert opts.attributes == list(DEFAULT_ATTRIBUTES)
        assert opts.ignore_tags == list(DEFAULT_IGNORE_TAGS)
        assert opts.template_delimiters is None

    def test_from_mapping_camel_case(self):
        opts = LintOptions.from_mapping({
            "attributes": ["aria-label"],
            "templateDelimiters": ["<%", "%>"],
            "ignoreTags": ["pre"],
        })
        assert opts.attributes == ["aria-label"]
        assert opts.template_delimiters == ("<%", "%>")
        assert opts.ignore_tags == ["pre"]

    def test_from_mapping_snake_case(self):
        opts = LintOptions.from_mapping({"template_delimiters": ("{{", "}}")})
        assert opts.template_delimiters == ("{{", "}}")

    def test_empty_list_disables(self):
        assert LintOptions.from_mapping({"attributes": []}).attributes == []

    def test_none_means_default(self):
        opts = LintOptions.from_mapping({"attributes": None, "ignoreTags": None})
        assert opts.attributes == list(DEFAULT_ATTRIBUTES)
        assert opts.ignore_tags == list(DEFAULT_IGNORE_TAGS)

    def test_unknown_keys_ignored(self):
        assert LintOptions.from_mapping({"verbose": True}) == LintOptions()

    def test_comma_separated_strings(self):
        opts = LintOptions(attributes="alt, title", template_delimiters="<%,%>")
        assert opts.attributes == ["alt", "title"]
        assert opts.template_delimiters == ("<%", "%>")

    def test_empty_string_disables(self):
        opts = LintOptions(attributes="", template_delimiters="")
        assert opts.attributes == []
        assert opts.template_delimiters is None

    @pytest.mark.parametrize("bad", [["<%"], ["<%", ""], ["a", "b", "c"], "<%"])
    def test_bad_delimiters(self, bad):
        with pytest.raises(ValueError, match="templateDelimiters"):
            LintOptions(template_delimiters=bad)

    def test_coerce(self):
        opts = LintOptions(attributes=[])
        assert LintOptions.coerce(opts) is opts
        assert LintOptions.coerce(None) == LintOptions()
        assert LintOptions.coerce({"attributes": []}).attributes == []
        with pytest.raises(TypeError):
            LintOptions.coerce(["alt"])


class TestDefaultConfig:
    def test_no_config_file_returns_defaults(self, tmp_path):
        cfg = load_config(scan_path=str(tmp_path))
        assert cfg.attributes is None
        assert cfg.template_delimiters is None
        assert cfg.ignore_tags is None
        assert cfg.include == []
        assert cfg.exclude == []
        assert cfg.project_config_path is None
        assert cfg.user_config_path is None
        assert cfg.to_options() == LintOptions()


class TestLoadConfig:
    def test_loads_full_config(self, tmp_path):
        config = tmp_path / ".i18nlint.yml"
        config.write_text("""\
lint:
  attributes: [alt, aria-label]
  template_delimiters: ["{{", "}}"]
  ignore_tags:
    - script
    - pre
  include:
    - "*.hbs"
  exclude:
    - "vendor/**"
""")
        cfg = load_config(scan_path=str(tmp_path))
        assert cfg.attributes == ["alt", "aria-label"]
        assert cfg.template_delimiters == ("{{", "}}")
        assert cfg.ignore_tags == ["script", "pre"]
        assert cfg.include == ["*.hbs"]
        assert cfg.exclude == ["vendor/**"]
        assert cfg.project_config_path == str(config)

        opts = cfg.to_options()
        assert opts.attributes == ["alt", "aria-label"]
        assert opts.template_delimiters == ("{{", "}}")

    def test_partial_config_uses_defaults(self, tmp_path):
        (tmp_path / ".i18nlint.yml").write_text("lint:\n  attributes: []\n")
        opts = load_config(scan_path=str(tmp_path)).to_options()
        assert opts.attributes == []
        assert opts.ignore_tags == list(DEFAULT_IGNORE_TAGS)

    def test_empty_file_returns_defaults(self, tmp_path):
        (tmp_path / ".i18nlint.yml").write_text("")
        cfg = load_config(scan_path=str(tmp_path))
        assert cfg.to_options() == LintOptions()
        assert cfg.project_config_path is None

    def test_malformed_yaml_returns_defaults(self, tmp_path):
        (tmp_path / ".i18nlint.yml").write_text(": : invalid yaml [[[")
        cfg = load_config(scan_path=str(tmp_path))
        assert cfg.to_options() == LintOptions()

    def test_bad_delimiters_ignored(self, tmp_path):
        (tmp_path / ".i18nlint.yml").write_text("lint:\n  template_delimiters: ['{{']\n")
        assert load_config(scan_path=str(tmp_path)).template_delimiters is None

    def test_walks_up_to_find_config(self, tmp_path):
        """Config in parent dir is found when scanning a subdirectory."""
        (tmp_path / ".i18nlint.yml").write_text("lint:\n  ignore_tags: [pre]\n")
        subdir = tmp_path / "src" / "views"
        subdir.mkdir(parents=True)
        cfg = load_config(scan_path=str(subdir))
        assert cfg.ignore_tags == ["pre"]

    def test_stops_at_repository_root(self, tmp_path):
        (tmp_path / ".i18nlint.yml").write_text("lint:\n  ignore_tags: [pre]\n")
        repo = tmp_path / "repo"
        (repo / ".git").mkdir(parents=True)
        views = repo / "views"
        views.mkdir()
        cfg = load_config(scan_path=str(views))
        assert cfg.ignore_tags is None

    def test_scan_path_may_be_a_file(self, tmp_path):
        (tmp_path / ".i18nlint.yml").write_text("lint:\n  attributes: [title]\n")
        page = tmp_path / "page.html"
        page.write_text("<p>x</p>")
        assert load_config(scan_path=str(page)).attributes == ["title"]


class TestUserConfig:
    def write_user_config(self, tmp_path, monkeypatch, body):
        user_dir = tmp_path / "user_home" / ".i18nlint"
        user_dir.mkdir(parents=True)
        user_cfg = user_dir / "config.yml"
        user_cfg.write_text(body)
        monkeypatch.setattr(config_mod, "USER_CONFIG_PATH", user_cfg)
        return user_cfg

    def test_project_overrides_user(self, tmp_path, monkeypatch):
        self.write_user_config(tmp_path, monkeypatch, """\
lint:
  attributes: [alt]
  ignore_tags: [pre]
""")
        project = tmp_path / "myproject"
        project.mkdir()
        (project / ".i18nlint.yml").write_text("lint:\n  attributes: [title]\n")

        cfg = load_config(scan_path=str(project))
        # Project wins key by key
        assert cfg.attributes == ["title"]
        # User value preserved where the project doesn't override
        assert cfg.ignore_tags == ["pre"]

    def test_user_fallback_when_no_project(self, tmp_path, monkeypatch):
        user_cfg = self.write_user_config(
            tmp_path, monkeypatch, "lint:\n  template_delimiters: '<%,%>'\n"
        )
        project = tmp_path / "no_config_project"
        project.mkdir()

        cfg = load_config(scan_path=str(project))
        assert cfg.template_delimiters == ("<%", "%>")
        assert cfg.project_config_path is None
        assert cfg.user_config_path == str(user_cfg)

    def test_explicit_config_path_skips_search(self, tmp_path, monkeypatch):
        self.write_user_config(tmp_path, monkeypatch, "lint:\n  ignore_tags: [pre]\n")
        explicit = tmp_path / "custom.yml"
        explicit.write_text("lint:\n  attributes: [placeholder]\n")

        cfg = load_config(config_path=str(explicit))
        assert cfg.attributes == ["placeholder"]
        assert cfg.ignore_tags is None
        assert cfg.project_config_path == str(explicit)
