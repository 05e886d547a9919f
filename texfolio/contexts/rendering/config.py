"""
Renderer configuration.

The renderer never reads environment-specific literals itself; it is handed a
RenderConfig at construction time. from_env() and from_yaml() build one from a .env
file / process environment and from an OmegaConf YAML file respectively.
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from texfolio.contexts.templating.template_store import TEMPLATES_PATH

load_dotenv()

DEFAULT_WORK_DIR = Path("outs/render")
DEFAULT_COMPILE_TIMEOUT_S = 60.0


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class RenderConfig:
    """
    Attributes:
        latex_compiler: Compiler executable (name on PATH or absolute path)
        templates_path: Directory of *.tex.jinja templates
        work_dir: Directory for job files and compiled PDFs
        compile_timeout_s: Wall-clock limit per compiler pass
        num_passes: Compiler passes per render (2+ only for cross-references)
        keep_artifacts: Skip deleting .tex/.aux/.log/.out/.toc files (debugging)
        events_file: JSON Lines file for render events, None to disable
    """

    latex_compiler: str = "pdflatex"
    templates_path: Path = TEMPLATES_PATH
    work_dir: Path = DEFAULT_WORK_DIR
    compile_timeout_s: float = DEFAULT_COMPILE_TIMEOUT_S
    num_passes: int = 1
    keep_artifacts: bool = False
    events_file: Optional[Path] = None

    def __post_init__(self):
        if self.num_passes < 1:
            raise ValueError(f"num_passes must be at least 1, got {self.num_passes}")
        if self.compile_timeout_s <= 0:
            raise ValueError(f"compile_timeout_s must be positive, got {self.compile_timeout_s}")

    @classmethod
    def from_env(cls) -> "RenderConfig":
        """
        Build a config from TEXFOLIO_* environment variables (after loading .env).

        Unset variables fall back to the dataclass defaults.
        """
        events_file = os.getenv("TEXFOLIO_EVENTS_FILE")
        return cls(
            latex_compiler=os.getenv("TEXFOLIO_LATEX_COMPILER", "pdflatex"),
            templates_path=Path(os.getenv("TEXFOLIO_TEMPLATES_PATH", str(TEMPLATES_PATH))),
            work_dir=Path(os.getenv("TEXFOLIO_WORK_DIR", str(DEFAULT_WORK_DIR))),
            compile_timeout_s=float(
                os.getenv("TEXFOLIO_COMPILE_TIMEOUT_S", DEFAULT_COMPILE_TIMEOUT_S)
            ),
            num_passes=int(os.getenv("TEXFOLIO_NUM_PASSES", 1)),
            keep_artifacts=_env_bool("TEXFOLIO_KEEP_LATEX_ARTIFACTS"),
            events_file=Path(events_file) if events_file else None,
        )

    @classmethod
    def from_yaml(cls, config_path: Path, base: Optional["RenderConfig"] = None) -> "RenderConfig":
        """
        Layer a YAML config file over a base config (default: from_env()).

        The file uses the attribute names as keys:

            latex_compiler: xelatex
            work_dir: /var/tmp/texfolio
            compile_timeout_s: 30

        Raises:
            ValueError: If the file contains keys that are not config attributes
        """
        base = base or cls.from_env()
        overrides = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True) or {}

        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown render config keys in {config_path}: {sorted(unknown)}")

        for key in ("templates_path", "work_dir", "events_file"):
            if overrides.get(key) is not None:
                overrides[key] = Path(overrides[key])

        return replace(base, **overrides)
