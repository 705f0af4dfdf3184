"""Lint options and the configuration file loader.

Options passed to :func:`i18nlint.lint` are a :class:`LintOptions`; a
missing field means "use the built-in default" and an explicit empty list
means "disabled" (``attributes=[]`` turns attribute checks off).

The CLI additionally reads YAML configuration, resolved in priority order
**project > user > defaults**:

1. **Project-level** — ``.i18nlint.yml`` in (or above) the scanned
   directory, up to the repository root.
2. **User-level** — ``~/.i18nlint/config.yml``.
3. **Built-in defaults**.

Both files share the same format::

    # .i18nlint.yml  or  ~/.i18nlint/config.yml
    lint:
      attributes: [alt, title, placeholder]
      template_delimiters: ["{{", "}}"]
      ignore_tags: [script, style, pre]
      include: ["*.html", "*.hbs"]
      exclude: ["vendor/**"]

Project-level values override user-level values.  CLI flags override both.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = ".i18nlint.yml"
USER_CONFIG_DIR = Path.home() / ".i18nlint"
USER_CONFIG_PATH = USER_CONFIG_DIR / "config.yml"

DEFAULT_ATTRIBUTES: tuple[str, ...] = ("alt", "title", "placeholder")
DEFAULT_IGNORE_TAGS: tuple[str, ...] = ("script", "style")

# Option keys accepted from mappings, camelCase and snake_case.
_OPTION_KEYS = {
    "attributes": "attributes",
    "templateDelimiters": "template_delimiters",
    "template_delimiters": "template_delimiters",
    "ignoreTags": "ignore_tags",
    "ignore_tags": "ignore_tags",
}


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class LintOptions:
    """What to check in one scan."""

    attributes: list[str] = field(default_factory=lambda: list(DEFAULT_ATTRIBUTES))
    template_delimiters: tuple[str, str] | None = None
    ignore_tags: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_TAGS))

    def __post_init__(self) -> None:
        self.attributes = _as_list(self.attributes)
        self.ignore_tags = _as_list(self.ignore_tags)
        self.template_delimiters = _as_delimiters(self.template_delimiters)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> LintOptions:
        """Build options from a mapping, ignoring unrecognized keys."""
        kwargs: dict[str, Any] = {}
        for key, value in raw.items():
            name = _OPTION_KEYS.get(key)
            if name is not None and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, options: LintOptions | Mapping[str, Any] | None) -> LintOptions:
        if options is None:
            return cls()
        if isinstance(options, LintOptions):
            return options
        if isinstance(options, Mapping):
            return cls.from_mapping(options)
        raise TypeError(
            f"options must be a LintOptions or a mapping, not {type(options).__name__}"
        )


@dataclass
class FileConfig:
    """The ``lint`` section of a configuration file."""

    attributes: list[str] | None = None
    template_delimiters: tuple[str, str] | None = None
    ignore_tags: list[str] | None = None
    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)

    # Where the effective config was loaded from (None = defaults only).
    project_config_path: str | None = None
    user_config_path: str | None = None

    def to_options(self) -> LintOptions:
        return LintOptions.from_mapping({
            "attributes": self.attributes,
            "template_delimiters": self.template_delimiters,
            "ignore_tags": self.ignore_tags,
        })


# ---------------------------------------------------------------------------
# Public loaders
# ---------------------------------------------------------------------------


def load_config(
    scan_path: str | None = None,
    config_path: str | Path | None = None,
) -> FileConfig:
    """Load merged configuration (project > user > defaults).

    Parameters
    ----------
    scan_path:
        Directory to search for ``.i18nlint.yml``.  When *None*, only
        the user-level file (and defaults) are considered.
    config_path:
        Explicit config file path.  When given, *only* this file is
        loaded (no project/user search).
    """
    if config_path is not None:
        raw = _load_yaml(Path(config_path))
        cfg = _raw_to_config(raw)
        cfg.project_config_path = str(config_path) if raw is not None else None
        return cfg

    user_raw = _load_yaml(USER_CONFIG_PATH)
    user_source = str(USER_CONFIG_PATH) if user_raw else None

    project_raw: dict | None = None
    project_source: str | None = None
    if scan_path is not None:
        project_path = _find_project_config(scan_path)
        if project_path is not None:
            project_raw = _load_yaml(project_path)
            project_source = str(project_path) if project_raw is not None else None

    cfg = _raw_to_config(_merge_raw(project_raw, user_raw))
    cfg.project_config_path = project_source
    cfg.user_config_path = user_source
    return cfg


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _find_project_config(scan_path: str) -> Path | None:
    """Search for ``.i18nlint.yml`` in *scan_path* and ancestors."""
    p = Path(scan_path)
    if p.is_file():
        p = p.parent
    candidates = [p / CONFIG_FILENAME]
    if not (p / ".git").exists():
        for parent in p.parents:
            candidates.append(parent / CONFIG_FILENAME)
            if (parent / ".git").exists():
                break
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def _load_yaml(path: Path) -> dict | None:
    """Load a YAML file, returning *None* on missing/invalid files."""
    path = path.expanduser()
    if not path.is_file():
        return None
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError):
        return None
    return raw if isinstance(raw, dict) else None


def _merge_raw(project: dict | None, user: dict | None) -> dict:
    """Merge project and user raw dicts (project wins, key by key)."""
    merged: dict = {}
    for source in (user, project):
        if not source:
            continue
        section = source.get("lint")
        if isinstance(section, dict):
            merged.update(section)
    return {"lint": merged}


def _raw_to_config(raw: dict | None) -> FileConfig:
    """Convert a raw YAML dict to a ``FileConfig``."""
    if not raw:
        return FileConfig()

    lint_raw = raw.get("lint", {})
    if not isinstance(lint_raw, dict):
        return FileConfig()

    try:
        delimiters = _as_delimiters(lint_raw.get("template_delimiters"))
    except ValueError:
        delimiters = None

    return FileConfig(
        attributes=_as_list(lint_raw["attributes"]) if lint_raw.get("attributes") is not None else None,
        template_delimiters=delimiters,
        ignore_tags=_as_list(lint_raw["ignore_tags"]) if lint_raw.get("ignore_tags") is not None else None,
        include=_as_list(lint_raw.get("include", [])),
        exclude=_as_list(lint_raw.get("exclude", [])),
    )


def _as_list(val: object) -> list[str]:
    """Coerce a value to a list of strings."""
    if isinstance(val, str):
        return [v.strip() for v in val.split(",") if v.strip()]
    if isinstance(val, (list, tuple, set, frozenset)):
        return [str(v) for v in val]
    return []


def _as_delimiters(val: object) -> tuple[str, str] | None:
    """Validate a template delimiter pair; empty/None means no masking."""
    if val is None:
        return None
    if isinstance(val, str):
        if not val.strip():
            return None
        val = [v.strip() for v in val.split(",")]
    if isinstance(val, Sequence) and len(val) == 0:
        return None
    if (
        not isinstance(val, Sequence)
        or len(val) != 2
        or not all(isinstance(v, str) and v for v in val)
    ):
        raise ValueError("templateDelimiters must be a pair of non-empty strings")
    return (val[0], val[1])
