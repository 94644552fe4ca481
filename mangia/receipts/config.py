"""TOML configuration loader for receipt scanning."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

# Tesseract character whitelist; receipts only need Latin letters, digits and prices
DEFAULT_WHITELIST = (
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz.,$"
)
DEFAULT_VERYFI_URL = "https://api.veryfi.com/api/v8/partner/documents"


@dataclass
class TesseractConfig:
    lang: str = "eng"
    whitelist: str = DEFAULT_WHITELIST
    tesseract_cmd: str = ""


@dataclass
class VeryfiConfig:
    client_id: str = ""
    username: str = ""
    api_key: str = ""
    url: str = DEFAULT_VERYFI_URL
    categories: list[str] = field(default_factory=lambda: ["Grocery", "Food"])
    auto_delete: bool = True
    timeout: float = 25.0


@dataclass
class ClaudeSourceConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class GeminiSourceConfig:
    api_key: str = ""
    model: str = "gemini-2.5-flash-lite"
    store_hint: str = ""


@dataclass
class SourceConfig:
    backend: str = "tesseract"
    tesseract: TesseractConfig = field(default_factory=TesseractConfig)
    veryfi: VeryfiConfig = field(default_factory=VeryfiConfig)
    claude: ClaudeSourceConfig = field(default_factory=ClaudeSourceConfig)
    gemini: GeminiSourceConfig = field(default_factory=GeminiSourceConfig)


@dataclass
class CameraConfig:
    index: int = 0
    save_dir: str = "/tmp/receipts"  # empty: keep photos in memory only
    warmup_frames: int = 5
    jpeg_quality: int = 90


@dataclass
class DatabaseConfig:
    path: str = "~/.config/mangia/pantry.db"


@dataclass
class ReceiptsConfig:
    source: SourceConfig = field(default_factory=SourceConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


def load_config(path: str | Path | None = None) -> ReceiptsConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    Credentials left empty in the file are read from environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    src = raw.get("source", {})
    cam = raw.get("camera", {})
    dbs = raw.get("database", {})

    tess_cfg = src.get("tesseract", {})
    veryfi_cfg = src.get("veryfi", {})
    claude_cfg = src.get("claude", {})
    gemini_cfg = src.get("gemini", {})

    # Resolve secrets: config file → environment variable
    def _secret(section: dict, key: str, env: str) -> str:
        return section.get(key, "") or os.environ.get(env, "")

    return ReceiptsConfig(
        source=SourceConfig(
            backend=src.get("backend", "tesseract"),
            tesseract=TesseractConfig(
                lang=tess_cfg.get("lang", "eng"),
                whitelist=tess_cfg.get("whitelist", DEFAULT_WHITELIST),
                tesseract_cmd=_secret(tess_cfg, "tesseract_cmd", "TESSERACT_CMD"),
            ),
            veryfi=VeryfiConfig(
                client_id=_secret(veryfi_cfg, "client_id", "VERYFI_CLIENT_ID"),
                username=_secret(veryfi_cfg, "username", "VERYFI_AUTH_USERNAME"),
                api_key=_secret(veryfi_cfg, "api_key", "VERYFI_AUTH_APIKEY"),
                url=veryfi_cfg.get("url", DEFAULT_VERYFI_URL),
                categories=veryfi_cfg.get("categories", ["Grocery", "Food"]),
                auto_delete=veryfi_cfg.get("auto_delete", True),
                timeout=veryfi_cfg.get("timeout", 25.0),
            ),
            claude=ClaudeSourceConfig(
                api_key=_secret(claude_cfg, "api_key", "ANTHROPIC_API_KEY"),
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
            gemini=GeminiSourceConfig(
                api_key=_secret(gemini_cfg, "api_key", "GEMINI_API_KEY"),
                model=gemini_cfg.get("model", "gemini-2.5-flash-lite"),
                store_hint=gemini_cfg.get("store_hint", ""),
            ),
        ),
        camera=CameraConfig(
            index=cam.get("index", 0),
            save_dir=cam.get("save_dir", "/tmp/receipts"),
            warmup_frames=cam.get("warmup_frames", 5),
            jpeg_quality=cam.get("jpeg_quality", 90),
        ),
        database=DatabaseConfig(
            path=dbs.get("path", "~/.config/mangia/pantry.db"),
        ),
    )
