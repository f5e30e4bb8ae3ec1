# debug.py
from __future__ import annotations
import logging
from typing import Dict, Iterable

_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class Debug:
    """Per-component switches over the shared ``ENIGMA`` logger.

    Every module keeps its own ``debug = Debug()``; the switches and the
    file handler live on the class, so ``main.py`` flips them for all.
    """

    _root_configured: bool = False
    _file_handler: logging.FileHandler | None = None

    components: Dict[str, bool] = {
        "alphabet":    False,
        "permutation": False,
        "rotor":       False,
        "stepping":    False,
        "plugboard":   False,
        "convert":     False,
        "config":      False,
    }

    def __init__(self) -> None:
        if not Debug._root_configured:
            logging.basicConfig(level=logging.DEBUG, format=_FORMAT, datefmt=_DATEFMT)
            Debug._root_configured = True
        self.logger = logging.getLogger("ENIGMA")
        self.logger.setLevel(logging.DEBUG)  # components gate output

    def log(self, component: str, message: str) -> None:
        if Debug.components.get(component, False):
            self.logger.debug("[%s] %s", component.upper(), message)

    # ── switches ─────────────────────────────────────────────────
    def enable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            Debug.components[c] = True

    def disable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            Debug.components[c] = False

    def enable_all(self, names: Iterable[str]) -> None:
        """Enable each of *names*; the word ``all`` switches on everything."""
        for name in names:
            if name == "all":
                self.enable(*Debug.components)
            else:
                self.enable(name)

    # ── file output (--log-file) ─────────────────────────────────
    def log_to(self, path: str) -> None:
        """Also write ENIGMA records to *path*, replacing any earlier file."""
        self.close_file()
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_FORMAT, _DATEFMT))
        self.logger.addHandler(handler)
        Debug._file_handler = handler

    def close_file(self) -> None:
        handler = Debug._file_handler
        if handler is not None:
            self.logger.removeHandler(handler)
            handler.close()
            Debug._file_handler = None

    def _require(self, component: str) -> None:
        if component not in Debug.components:
            raise ValueError(f"No such component: {component!r}")
