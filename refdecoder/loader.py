"""
loader.py — Load category definitions from a folder or a web location.

Reads config/decoder.yaml for the base location and the ordered list of
category files. Every file is fetched concurrently; a file that cannot be
read or parsed is skipped with a warning and never aborts the load.

The resulting store keeps the configured file order, which is also the
order categories are tried in when matching a reference.
"""

from __future__ import annotations

import asyncio
import json
import warnings
from pathlib import Path

import httpx
import yaml

from refdecoder.categories import CategoryDefinition, CategoryFormatError, CategoryStore, parse_category
from refdecoder.decoder import decode_reference

_ROOT = Path(__file__).resolve().parent.parent
_CONFIG_PATH = _ROOT / "config" / "decoder.yaml"

DEFAULT_TIMEOUT = 10.0


# ── Config ─────────────────────────────────────────────────

def load_settings(path: str | Path | None = None) -> dict:
    cfg_path = Path(path) if path else _CONFIG_PATH
    with open(cfg_path) as f:
        return yaml.safe_load(f) or {}


def _is_url(base: str | Path) -> bool:
    return str(base).startswith(("http://", "https://"))


def _resolve_base(base: str | Path) -> str | Path:
    if _is_url(base):
        return str(base)
    p = Path(base)
    return p if p.is_absolute() else _ROOT / p


# ── Fetch + parse ──────────────────────────────────────────

def _join_url(base: str, name: str) -> str:
    return base.rstrip("/") + "/" + name


async def _fetch_text(base: str | Path, name: str, client: httpx.AsyncClient | None) -> str:
    if client is not None:
        resp = await client.get(_join_url(str(base), name))
        resp.raise_for_status()
        return resp.text
    path = Path(base) / name
    return await asyncio.to_thread(path.read_text, encoding="utf-8")


def parse_resource(name: str, text: str) -> dict:
    """Parse a category resource as YAML (.yaml/.yml) or JSON (anything else)."""
    if Path(name).suffix.lower() in (".yaml", ".yml"):
        raw = yaml.safe_load(text)
    else:
        raw = json.loads(text)
    if not isinstance(raw, dict):
        raise CategoryFormatError(f"{name}: top level is {type(raw).__name__}, expected a mapping")
    return raw


async def _load_one(base, name: str, client) -> CategoryDefinition:
    try:
        text = await _fetch_text(base, name, client)
        return parse_category(name, parse_resource(name, text))
    except Exception as e:
        warnings.warn(f"Could not load category file {name}: {e}")
        raise


# ── Public API ─────────────────────────────────────────────

class CategoryLoad:
    """Result of loading category files: the store plus what was skipped and why."""

    def __init__(self):
        self.store = CategoryStore()
        self.loaded_files: list[str] = []
        self.skipped_files: list[dict] = []
        self.warnings: list[str] = []

    @property
    def categories(self) -> dict[str, CategoryDefinition]:
        return {c.category_id: c for c in self.store}

    def summary(self) -> dict:
        return {
            "loaded": len(self.loaded_files),
            "skipped": len(self.skipped_files),
            "files": [
                {"file": c.category_id, "prefixes": list(c.prefixes), "blocks": len(c.structure)}
                for c in self.store
            ],
        }


async def load_categories(
    base: str | Path,
    names: list[str],
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> CategoryLoad:
    """
    Fetch and parse every category file under `base` concurrently.
    `base` is a folder path or an http(s) URL; `client` overrides the HTTP client.
    """
    data = CategoryLoad()
    if not names:
        data.warnings.append("No category files configured")
        return data

    base = _resolve_base(base)

    async def _gather(http_client):
        return await asyncio.gather(
            *(_load_one(base, name, http_client) for name in names),
            return_exceptions=True,
        )

    if client is None and _is_url(base):
        async with httpx.AsyncClient(timeout=timeout) as owned:
            outcomes = await _gather(owned)
    else:
        outcomes = await _gather(client)

    loaded = []
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            data.skipped_files.append({"file": name, "reason": str(outcome)})
            data.warnings.append(f"Skipped (unreadable or malformed): {name}")
            continue
        loaded.append(outcome)
        data.loaded_files.append(name)

    data.store = CategoryStore(loaded)
    return data


def load_all(settings: dict | None = None) -> CategoryLoad:
    """Synchronous load driven by config/decoder.yaml."""
    if settings is None:
        settings = load_settings()
    cfg = settings.get("categories", {})
    return asyncio.run(load_categories(
        cfg.get("base_path", "data/categories"),
        list(cfg.get("files", [])),
        timeout=float(cfg.get("request_timeout", DEFAULT_TIMEOUT)),
    ))


async def analyze_reference(reference: str, base: str | Path | None = None, settings: dict | None = None) -> dict:
    """Load all configured categories, then decode one reference. Returns the output dict."""
    if settings is None:
        settings = load_settings()
    cfg = settings.get("categories", {})
    data = await load_categories(
        base if base is not None else cfg.get("base_path", "data/categories"),
        list(cfg.get("files", [])),
        timeout=float(cfg.get("request_timeout", DEFAULT_TIMEOUT)),
    )
    return decode_reference(reference, data.store).to_dict()
