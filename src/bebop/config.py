"""AutoConfig dataclasses and loader for .bebop-auto.yaml override files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from bebop.fs_utils import find_up

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".bebop-auto.yaml", ".bebop-auto.yml")
OVERRIDE_KEYWORDS = ("test", "security", "performance")


@dataclass
class ProjectOverrides:
    type: str | None = None
    framework: str | None = None
    language: list[str] | None = None
    is_monorepo: bool | None = None
    service_name: str | None = None


@dataclass
class AutoSelect:
    type_specific: bool = True
    framework_specific: bool = True
    service_specific: bool = True
    language_specific: bool = True
    keyword_specific: bool = True


@dataclass
class PacksConfig:
    always_include: list[str] | None = None
    additional: list[str] = field(default_factory=list)
    auto_select: AutoSelect = field(default_factory=AutoSelect)
    max_constraints: int | None = None
    min_confidence: float | None = None


@dataclass
class KeywordOverride:
    add_packs: list[str] = field(default_factory=list)
    remove_packs: list[str] = field(default_factory=list)


@dataclass
class CompilationConfig:
    max_constraints: int | None = None
    min_confidence: float | None = None
    include_all_rules: bool = False
    keyword_overrides: dict[str, KeywordOverride] = field(default_factory=dict)


@dataclass
class DebugConfig:
    enabled: bool = False
    log_file: str | None = None
    show_selected_packs: bool = False
    show_compiled_prompt: bool = False


@dataclass
class AutoConfig:
    project: ProjectOverrides = field(default_factory=ProjectOverrides)
    packs: PacksConfig = field(default_factory=PacksConfig)
    keywords: dict[str, list[str]] = field(default_factory=dict)
    compilation: CompilationConfig = field(default_factory=CompilationConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)
    path: Path | None = None

    def max_constraints(self, default: int) -> int:
        if self.compilation.max_constraints is not None:
            return self.compilation.max_constraints
        if self.packs.max_constraints is not None:
            return self.packs.max_constraints
        return default


def find_auto_config(cwd: Path) -> Path | None:
    return find_up(cwd, CONFIG_FILENAMES)


def load_auto_config(cwd: Path) -> AutoConfig | None:
    """Find the nearest override file above ``cwd`` and parse it.

    Returns None when no file exists or the file cannot be read or parsed.
    """
    path = find_auto_config(cwd)
    if path is None:
        return None
    return load_auto_config_file(path)


def load_auto_config_file(path: Path) -> AutoConfig | None:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to load auto-config from {path}: {e}")
        return None
    if not isinstance(data, dict):
        return None
    config = parse_auto_config(data)
    config.path = path
    return config


def parse_auto_config(data: dict[str, object]) -> AutoConfig:
    config = AutoConfig()
    if isinstance(section := data.get("project"), dict):
        _apply_project(config.project, section)
    if isinstance(section := data.get("packs"), dict):
        _apply_packs(config.packs, section)
    if isinstance(section := data.get("keywords"), dict):
        config.keywords = {
            str(k): packs for k, v in section.items() if (packs := _str_list(v)) is not None
        }
    if isinstance(section := data.get("compilation"), dict):
        _apply_compilation(config.compilation, section)
    if isinstance(section := data.get("debug"), dict):
        _apply_debug(config.debug, section)
    return config


def _apply_project(cfg: ProjectOverrides, data: dict[str, object]) -> None:
    if isinstance(data.get("type"), str) and data["type"]:
        cfg.type = data["type"]
    if isinstance(data.get("framework"), str) and data["framework"]:
        cfg.framework = data["framework"]
    language = data.get("language")
    if isinstance(language, str) and language:
        cfg.language = [language.lower()]
    elif (langs := _str_list(language)) is not None:
        cfg.language = [lang.lower() for lang in langs]
    if isinstance(data.get("is_monorepo"), bool):
        cfg.is_monorepo = data["is_monorepo"]
    if isinstance(data.get("service_name"), str) and data["service_name"]:
        cfg.service_name = data["service_name"]


def _apply_packs(cfg: PacksConfig, data: dict[str, object]) -> None:
    if (always := _str_list(data.get("always_include"))) is not None:
        cfg.always_include = always
    if (additional := _str_list(data.get("additional"))) is not None:
        cfg.additional = additional
    auto_select = data.get("auto_select")
    if isinstance(auto_select, dict):
        for name in (
            "type_specific",
            "framework_specific",
            "service_specific",
            "language_specific",
            "keyword_specific",
        ):
            if isinstance(auto_select.get(name), bool):
                setattr(cfg.auto_select, name, auto_select[name])
    if (max_constraints := _int(data.get("max_constraints"))) is not None:
        cfg.max_constraints = max_constraints
    if (min_confidence := _float(data.get("min_confidence"))) is not None:
        cfg.min_confidence = min_confidence


def _apply_compilation(cfg: CompilationConfig, data: dict[str, object]) -> None:
    if (max_constraints := _int(data.get("max_constraints"))) is not None:
        cfg.max_constraints = max_constraints
    if (min_confidence := _float(data.get("min_confidence"))) is not None:
        cfg.min_confidence = min_confidence
    if isinstance(data.get("include_all_rules"), bool):
        cfg.include_all_rules = data["include_all_rules"]
    for keyword in OVERRIDE_KEYWORDS:
        section = data.get(f"on_keyword_{keyword}")
        if not isinstance(section, dict):
            continue
        cfg.keyword_overrides[keyword] = KeywordOverride(
            add_packs=_str_list(section.get("add_packs")) or [],
            remove_packs=_str_list(section.get("remove_packs")) or [],
        )


def _apply_debug(cfg: DebugConfig, data: dict[str, object]) -> None:
    for name in ("enabled", "show_selected_packs", "show_compiled_prompt"):
        if isinstance(data.get(name), bool):
            setattr(cfg, name, data[name])
    if isinstance(data.get("log_file"), str):
        cfg.log_file = data["log_file"]


def _str_list(value: object) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [str(v) for v in value if v is not None and str(v)]


def _int(value: object) -> int | None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _float(value: object) -> float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return None
