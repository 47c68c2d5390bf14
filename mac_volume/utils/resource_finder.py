# resource_finder.py
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Optional, Union

PathLike = Union[str, Path]
APP_NAME = "mac-volume"
_ENV_KEYS = ("MAC_VOLUME_DATA_DIR", "MAC_VOLUME_HOME")


class ResourceFinder:
    """
    Resolve the project root, the per-user data directory and config files.
    """

    _instance: "ResourceFinder" = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if getattr(self, "_initd", False):
            return
        self._initd = True

        self._base_dir = self._detect_project_root(
            default=Path(__file__).resolve().parents[2]
        )
        self._search_dirs = self._build_search_dirs()

    # -------------- Public API --------------

    def get_user_data_dir(self, create: bool = True) -> Path:
        """
        User data (writable) directory; env overrides win.
        """
        override = self._env_dir()
        if override is not None:
            p = override
        elif sys.platform == "darwin":
            p = Path.home() / "Library" / "Application Support" / APP_NAME
        else:
            p = Path.home() / ".local" / "share" / APP_NAME
        if create:
            p.mkdir(parents=True, exist_ok=True)
        return p.resolve()

    def find_directory(self, relpath: PathLike) -> Optional[Path]:
        """
        Find a directory by relative path.
        """
        return self._find(relpath, want_dir=True)

    def find_config_dir(self) -> Optional[Path]:
        return self.find_directory("config")

    # -------------- Internal implementation --------------

    def _env_dir(self) -> Optional[Path]:
        for key in _ENV_KEYS:
            v = os.getenv(key)
            if v:
                return Path(v).expanduser()
        return None

    def _detect_project_root(self, default: Path) -> Optional[Path]:
        """
        Walk upward for the source checkout holding this package.

        The nearest marker directory only counts when it contains
        mac_volume/cli.py; an installed copy inside some other repo has none.
        """
        markers = {"pyproject.toml", ".git"}
        for parent in [default] + list(default.parents):
            try:
                entries = {e.name for e in parent.iterdir()}
            except OSError:
                continue
            if markers & entries:
                if (parent / "mac_volume" / "cli.py").is_file():
                    return parent.resolve()
                return None
        return None

    def _build_search_dirs(self) -> List[Path]:
        dirs: List[Path] = []

        # 1) User data, honouring the env overrides.
        dirs.append(self.get_user_data_dir(create=False))

        # 2) Project root for source checkouts.
        if self._base_dir is not None:
            dirs.append(self._base_dir)

        # Deduplicate while preserving order.
        out, seen = [], set()
        for d in dirs:
            d = d.resolve()
            if d not in seen:
                out.append(d)
                seen.add(d)
        return out

    def _find(self, relpath: PathLike, want_dir: bool) -> Optional[Path]:
        rp = Path(relpath)
        candidates = [rp] if rp.is_absolute() else [b / rp for b in self._search_dirs]
        for p in candidates:
            try:
                ok = p.is_dir() if want_dir else p.is_file()
            except OSError:
                ok = False
            if ok:
                return p.resolve()
        return None


# --------- Singleton and convenience functions ---------
resource_finder = ResourceFinder()


def get_user_data_dir(create: bool = True) -> Path:
    return resource_finder.get_user_data_dir(create)

