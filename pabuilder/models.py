import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class HostPlatform(str, Enum):
    UNIX_GENERIC = "unix-generic"
    LINUX = "linux"
    WINDOWS = "windows"


def detect_host_platform(platform_name: Optional[str] = None) -> HostPlatform:
    """Map ``sys.platform`` (or the given name) onto a build strategy family."""
    name = (platform_name or sys.platform).lower()
    if name.startswith(("win", "cygwin")) or name == HostPlatform.WINDOWS.value:
        return HostPlatform.WINDOWS
    if name.startswith("linux"):
        return HostPlatform.LINUX
    return HostPlatform.UNIX_GENERIC


@dataclass(frozen=True)
class BuildContext:
    output_dir: str
    host_platform: HostPlatform
    cross_target: Optional[str] = None
    work_dir: str = field(default_factory=os.getcwd)

    def __post_init__(self):
        object.__setattr__(self, "output_dir", os.path.abspath(self.output_dir))
        object.__setattr__(self, "work_dir", os.path.abspath(self.work_dir))


@dataclass(frozen=True)
class ProbeResult:
    found: bool
    version: Optional[str] = None


@dataclass(frozen=True)
class SourceArchive:
    url: str
    local_filename: str
    extracted_folder_name: str
    sha256: Optional[str] = None


PORTAUDIO_SOURCE = SourceArchive(
    url="http://www.portaudio.com/archives/pa_stable_v19_20140130.tgz",
    local_filename="pa_stable_v19_20140130.tgz",
    extracted_folder_name="portaudio",
)


@dataclass(frozen=True)
class BuildArtifact:
    static_library_path: str
    install_prefix: str

    def exists(self) -> bool:
        return os.path.isfile(self.static_library_path)


@dataclass(frozen=True)
class LinkDirectives:
    """Final linker instructions; ``system_libraries`` are linked dynamically."""

    search_paths: Tuple[str, ...]
    library_names: Tuple[str, ...]
    static_link: bool
    system_libraries: Tuple[str, ...] = ()

    def to_cargo(self):
        lines = [f"cargo:rustc-link-search=native={path}" for path in self.search_paths]
        kind = "static=" if self.static_link else ""
        lines += [f"cargo:rustc-link-lib={kind}{name}" for name in self.library_names]
        lines += [f"cargo:rustc-link-lib={name}" for name in self.system_libraries]
        return lines

    def to_flags(self):
        flags = [f"-L{path}" for path in self.search_paths]
        flags += [f"-l{name}" for name in self.library_names + self.system_libraries]
        return flags

    def to_dict(self):
        return {
            "search_paths": list(self.search_paths),
            "library_names": list(self.library_names),
            "static_link": self.static_link,
            "system_libraries": list(self.system_libraries),
        }
