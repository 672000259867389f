import os
import platform

from . import downloader
from .cli_logger import logger
from .errors import FilesystemError, MalformedInputError
from .models import BuildArtifact, HostPlatform, LinkDirectives, PORTAUDIO_SOURCE
from .utils import extract, remove_paths, resolve_build_commands, run_command
from .utils import pkg_config

LIBRARY_NAME = "portaudio"
PC_FILE = "portaudio-2.0.pc"

# CMake names the static target after the architecture it was built for.
WINDOWS_ARCH_LIBRARIES = {
    "x86": "portaudio_static_x86.lib",
    "i386": "portaudio_static_x86.lib",
    "i686": "portaudio_static_x86.lib",
    "amd64": "portaudio_static_x64.lib",
    "x86_64": "portaudio_static_x64.lib",
}


class UnixBuilder:
    """configure + make build into ``<out>/lib``; fetches with curl."""

    host_platform = HostPlatform.UNIX_GENERIC

    def __init__(self, archive=PORTAUDIO_SOURCE, fetch_tool=None):
        self.archive = archive
        self.fetch_tool = fetch_tool

    def expected_artifact(self, ctx):
        return BuildArtifact(
            static_library_path=os.path.join(ctx.output_dir, "lib", f"lib{LIBRARY_NAME}.a"),
            install_prefix=ctx.output_dir,
        )

    def download(self, ctx):
        return downloader.download_source(
            self.archive, ctx.work_dir, self.host_platform, self.fetch_tool
        )

    def source_dir(self, ctx):
        return os.path.join(ctx.work_dir, self.archive.extracted_folder_name)

    def build(self, ctx):
        archive_path = os.path.join(ctx.work_dir, self.archive.local_filename)
        source_dir = self.source_dir(ctx)
        logger.info(f"Building static {LIBRARY_NAME} into {ctx.output_dir}...")

        extract(archive_path, ctx.work_dir)
        if not os.path.isdir(source_dir):
            raise FilesystemError(
                f"Expected source folder '{self.archive.extracted_folder_name}' after extracting {self.archive.local_filename}",
                context={"work_dir": ctx.work_dir},
            )

        commands = resolve_build_commands(
            "autotools", source_dir, ctx.output_dir, cross_target=ctx.cross_target
        )
        run_command(commands["configure_command"], cwd=source_dir)
        run_command(commands["build_command"], cwd=source_dir)
        run_command(commands["install_command"], cwd=source_dir)

        logger.info("  - Cleaning up PortAudio sources...")
        remove_paths(archive_path, source_dir)

        artifact = self.expected_artifact(ctx)
        logger.success(f"Built {artifact.static_library_path}")
        return artifact

    def _require_artifact(self, ctx):
        artifact = self.expected_artifact(ctx)
        if not artifact.exists():
            raise FilesystemError(
                f"Static library missing: {artifact.static_library_path}",
                hint="The build did not produce the archive; remove the output directory and rebuild.",
            )
        return artifact

    def link_directives(self, ctx):
        self._require_artifact(ctx)
        return LinkDirectives(
            search_paths=(os.path.join(ctx.output_dir, "lib"),),
            library_names=(LIBRARY_NAME,),
            static_link=True,
        )


class LinuxBuilder(UnixBuilder):
    """Same build as generic Unix; fetches with wget and links via the .pc file."""

    host_platform = HostPlatform.LINUX

    def pc_file(self, ctx):
        return os.path.join(ctx.output_dir, "lib", "pkgconfig", PC_FILE)

    def link_directives(self, ctx):
        self._require_artifact(ctx)
        pc_file = self.pc_file(ctx)
        if not os.path.isfile(pc_file):
            raise FilesystemError(f"pkg-config descriptor missing: {pc_file}")
        return pkg_config.static_link_directives(pc_file)


class WindowsBuilder(UnixBuilder):
    """CMake build of the ``portaudio_static`` target into ``<out>``."""

    host_platform = HostPlatform.WINDOWS

    def __init__(self, archive=PORTAUDIO_SOURCE, fetch_tool=None, machine=None):
        super().__init__(archive, fetch_tool)
        self.machine = machine or platform.machine()

    def expected_artifact(self, ctx):
        return BuildArtifact(
            static_library_path=os.path.join(ctx.output_dir, f"{LIBRARY_NAME}.lib"),
            install_prefix=ctx.output_dir,
        )

    def source_dir(self, ctx):
        return os.path.join(ctx.output_dir, self.archive.extracted_folder_name)

    def arch_library_name(self):
        name = WINDOWS_ARCH_LIBRARIES.get(self.machine.lower())
        if name is None:
            raise MalformedInputError(f"Unsupported Windows architecture: {self.machine}")
        return name

    def build(self, ctx):
        archive_path = os.path.join(ctx.work_dir, self.archive.local_filename)
        source_dir = self.source_dir(ctx)
        logger.info(f"Building static {LIBRARY_NAME} with CMake into {ctx.output_dir}...")
        if ctx.cross_target:
            logger.warning(f"Ignoring cross target {ctx.cross_target}: CMake builds are native only.")

        extract(archive_path, ctx.output_dir)
        if not os.path.isdir(source_dir):
            raise FilesystemError(f"Expected source folder {source_dir} after extraction")

        commands = resolve_build_commands(
            "cmake", source_dir, ctx.output_dir, build_dir=os.path.join(ctx.output_dir, "build")
        )
        run_command(commands["configure_command"], cwd=ctx.output_dir)
        run_command(commands["build_command"], cwd=ctx.output_dir)

        built = os.path.join(ctx.output_dir, self.arch_library_name())
        artifact = self.expected_artifact(ctx)
        try:
            os.replace(built, artifact.static_library_path)
        except OSError as e:
            raise FilesystemError(f"Could not rename {built} to {artifact.static_library_path}: {e}") from e

        # The CMake build tree under the output dir is left in place.
        remove_paths(archive_path)
        logger.success(f"Built {artifact.static_library_path}")
        return artifact

    def link_directives(self, ctx):
        self._require_artifact(ctx)
        # The consumer names the library itself; portaudio.lib is on the search path.
        return LinkDirectives(
            search_paths=(ctx.output_dir,),
            library_names=(),
            static_link=True,
        )


PLATFORM_BUILDERS = {
    HostPlatform.UNIX_GENERIC: UnixBuilder,
    HostPlatform.LINUX: LinuxBuilder,
    HostPlatform.WINDOWS: WindowsBuilder,
}


def get_platform_builder(host_platform, archive=PORTAUDIO_SOURCE, fetch_tool=None):
    return PLATFORM_BUILDERS[host_platform](archive=archive, fetch_tool=fetch_tool)
