from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from gaswiz.core.protocol import DEFAULT_TARGET_MODEL
from gaswiz.llm.client import DEFAULT_WIZARD_MODEL
from gaswiz.prompting.prompt_builder import DEFAULT_LOCALE, get_labels

DEFAULT_CONFIG_FILE = "gaswiz.yaml"
DEFAULT_CREDENTIAL_FILE = "~/.gaswiz/credentials.json"


@dataclass
class WizardConfig:
    wizard_model: str = DEFAULT_WIZARD_MODEL   # model the wizard itself calls
    target_model: str = DEFAULT_TARGET_MODEL   # default model baked into generated apps
    locale: str = DEFAULT_LOCALE
    credential_file: Path = Path(DEFAULT_CREDENTIAL_FILE).expanduser()
    output_dir: Path = Path(".")


def load_config(
    path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None
) -> WizardConfig:
    """
    Build a WizardConfig from an optional YAML file, then env overrides.

    YAML layout:

        llm:
          model: gemini-2.5-flash
        target:
          default_model: gemini-2.5-flash
        locale: en
        credential_file: ~/.gaswiz/credentials.json
        output_dir: ./out

    Env overrides: GASWIZ_MODEL, GASWIZ_LOCALE.
    """
    env = os.environ if env is None else env
    cfg_path = Path(path) if path is not None else Path(DEFAULT_CONFIG_FILE)

    raw: dict[str, Any] = {}
    if cfg_path.exists():
        raw = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    elif path is not None:
        raise FileNotFoundError(f"Config file not found: {cfg_path}")

    llm_cfg = raw.get("llm") or {}
    target_cfg = raw.get("target") or {}

    cfg = WizardConfig(
        wizard_model=env.get("GASWIZ_MODEL") or llm_cfg.get("model", DEFAULT_WIZARD_MODEL),
        target_model=target_cfg.get("default_model", DEFAULT_TARGET_MODEL),
        locale=env.get("GASWIZ_LOCALE") or raw.get("locale", DEFAULT_LOCALE),
        credential_file=Path(raw.get("credential_file", DEFAULT_CREDENTIAL_FILE)).expanduser(),
        output_dir=Path(raw.get("output_dir", ".")),
    )

    # fail fast on a bad locale rather than at the first prompt
    get_labels(cfg.locale)
    return cfg
