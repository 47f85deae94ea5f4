"""
Vendored asset discovery for rendered documents.

Vendored front-end assets live under an asset root (served at
``/third_party`` by default) and are pinned by a lock file:

    third_party/VENDOR.lock:
        {"tailwind": "docz-theme-1.2.0", "katex": "0.16.9"}

The lock is JSON. A value may be a plain string, a number, or a mapping
carrying a ``version`` key. From it the renderer emits:

  - tailwind: {root}/tailwind/{label}/css/docz.tailwind.css
  - katex:    {root}/katex/{ver}/dist/katex.min.css
              {root}/katex/{ver}/dist/katex.min.js
              {root}/katex/{ver}/dist/contrib/auto-render.min.js

A missing, unreadable or malformed lock file, or a missing key, simply
means no tags for that asset.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .log import LOG


LOCK_TAILWIND = 'tailwind'
LOCK_KATEX = 'katex'


class VendorLockError(Exception):
    """Raised when the vendor lock file cannot be read or parsed"""
    pass


class VendorLock:
    """
    Parsed VENDOR.lock file.

    Attributes:
        path: Location of the lock file
        entries: Top-level mapping read from the file
    """

    def __init__(self, path: Union[str, Path]):
        """
        Load a lock file.

        Args:
            path: Path to VENDOR.lock

        Raises:
            VendorLockError: If the file is missing, unreadable, or not a mapping
        """
        self.path = Path(path)
        if not self.path.is_file():
            raise VendorLockError(f"Vendor lock not found: {self.path}")
        self.entries = self._entries_load()

    def _entries_load(self) -> Dict[str, Any]:
        """Load and parse the lock file"""
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                text: str = f.read()
            entries: Any = json.loads(text) if text.strip() else None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise VendorLockError(f"Failed to parse {self.path}: {e}")
        except OSError as e:
            raise VendorLockError(f"Failed to read {self.path}: {e}")

        if entries is None:
            return {}
        if not isinstance(entries, dict):
            raise VendorLockError(f"{self.path} does not hold a mapping")
        return entries

    def version_get(self, key: str) -> Optional[str]:
        """
        Get the pinned version/label for an asset.

        Args:
            key: Asset key ('tailwind' or 'katex')

        Returns:
            Version string, or None when absent or not a string
        """
        value: Any = self.entries.get(key)
        if isinstance(value, dict):
            value = value.get('version')
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    def __repr__(self) -> str:
        return f"VendorLock(path='{self.path}')"


def assetRoot_join(asset_root: str, *parts: str) -> str:
    """Join URL path segments under the asset root"""
    return '/'.join([asset_root.rstrip('/')] + list(parts))


def tailwindTags_make(asset_root: str, label: str) -> List[str]:
    """Stylesheet link for the vendored Tailwind theme build"""
    href = assetRoot_join(asset_root, 'tailwind', label, 'css', 'docz.tailwind.css')
    return [f'<link rel="stylesheet" href="{href}">']


def katexTags_make(asset_root: str, version: str) -> List[str]:
    """Stylesheet and scripts for vendored KaTeX with auto-render"""
    dist = assetRoot_join(asset_root, 'katex', version, 'dist')
    return [
        f'<link rel="stylesheet" href="{dist}/katex.min.css">',
        f'<script defer src="{dist}/katex.min.js"></script>',
        f'<script defer src="{dist}/contrib/auto-render.min.js" '
        f'onload="renderMathInElement(document.body);"></script>',
    ]


def vendorAssets_render(
    lock_path: Union[str, Path],
    asset_root: str,
    enable_tailwind: bool = False,
    enable_katex: bool = False,
) -> List[str]:
    """
    Build the <head> tags for enabled vendored assets.

    Args:
        lock_path: Path to VENDOR.lock
        asset_root: URL prefix the vendored tree is served under
        enable_tailwind: Emit the Tailwind stylesheet
        enable_katex: Emit KaTeX stylesheet and scripts

    Returns:
        HTML tags in emission order; empty when nothing is enabled or the
        lock file cannot be used
    """
    if not (enable_tailwind or enable_katex):
        return []

    try:
        lock: VendorLock = VendorLock(lock_path)
    except VendorLockError as e:
        LOG(f"No vendored assets: {e}", level=2)
        return []

    tags: List[str] = []
    if enable_tailwind:
        label = lock.version_get(LOCK_TAILWIND)
        if label:
            tags.extend(tailwindTags_make(asset_root, label))
        else:
            LOG(f"{lock.path} has no '{LOCK_TAILWIND}' entry", level=2)
    if enable_katex:
        version = lock.version_get(LOCK_KATEX)
        if version:
            tags.extend(katexTags_make(asset_root, version))
        else:
            LOG(f"{lock.path} has no '{LOCK_KATEX}' entry", level=2)
    return tags
