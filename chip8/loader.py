"""
Program loaders.

A loader turns some description of a ROM (a path, a name, an embedded
resource) into the raw program image. Failures surface as LoadError and
never reach emulator memory.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from .errors import LoadError

logger = logging.getLogger(__name__)

ROM_SUFFIXES = (".ch8", ".c8")


class Loader(Protocol):
    def load(self, config) -> bytes:
        ...


class FileLoader:
    """Read ROM images from disk"""

    def __init__(self, rom_dir: Optional[Union[str, Path]] = None):
        self.rom_dir = Path(rom_dir) if rom_dir else None

    def resolve(self, config: Union[str, Path]) -> Path:
        """Find the file for `config`, trying the ROM directory and known suffixes"""
        path = Path(config)
        candidates = [path]
        if self.rom_dir is not None and not path.is_absolute():
            candidates.insert(0, self.rom_dir / path)
        if not path.suffix:
            candidates += [c.with_suffix(s) for c in list(candidates) for s in ROM_SUFFIXES]

        for candidate in candidates:
            if candidate.is_file():
                return candidate
        raise LoadError(config, "file not found")

    def load(self, config: Union[str, Path]) -> bytes:
        path = self.resolve(config)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise LoadError(config, str(e)) from e
        logger.debug("Read %d bytes from %s", len(data), path)
        return data

    def list_roms(self):
        """ROM files available in the ROM directory (current directory by default)"""
        rom_dir = self.rom_dir or Path(".")
        roms = [p for s in ROM_SUFFIXES for p in rom_dir.glob(f"*{s}")]
        return sorted(roms)


class BytesLoader:
    """Serve program images held in memory, keyed by name"""

    def __init__(self, images: Optional[Dict[str, bytes]] = None, **named: bytes):
        self.images: Dict[str, bytes] = dict(images or {})
        self.images.update(named)

    def add(self, name: str, data: bytes):
        self.images[name] = bytes(data)

    def load(self, config: str) -> bytes:
        try:
            return bytes(self.images[config])
        except KeyError:
            raise LoadError(config, "no such image") from None
