import os

from ..cli_logger import logger
from .target import configure_cross_args

CMAKE_STATIC_TARGET = "portaudio_static"
# Newer PortAudio releases fix this; the pinned one needs the define on MSVC.
WDMKS_WORKAROUND_CFLAG = "-DPA_WDMKS_NO_KSGUID_LIB"


def generate_autotools_commands(package_source_path, install_dir, cross_target=None):
    """Return (configure, build, install) for a static, PIC autotools build."""
    logger.info("  - Generating autotools build commands.")
    configure_cmd = [
        "./configure",
        "--disable-shared",
        "--enable-static",
        "--prefix", install_dir,
        "--with-pic",
    ] + configure_cross_args(cross_target)
    build_cmd = ["make"]
    install_cmd = ["make", "install"]
    return configure_cmd, build_cmd, install_cmd


def generate_cmake_commands(package_source_path, build_dir, install_dir):
    """Return (configure, build) for the CMake static target."""
    logger.info("  - Generating CMake build commands.")
    configure_cmd = [
        "cmake",
        "-S", package_source_path,
        "-B", build_dir,
        "-DCMAKE_BUILD_TYPE=Release",
        f"-DCMAKE_INSTALL_PREFIX={install_dir}",
        f"-DCMAKE_ARCHIVE_OUTPUT_DIRECTORY_DEBUG={install_dir}",
        f"-DCMAKE_ARCHIVE_OUTPUT_DIRECTORY_RELEASE={install_dir}",
        f"-DCMAKE_C_FLAGS={WDMKS_WORKAROUND_CFLAG}",
    ]
    build_cmd = [
        "cmake", "--build", build_dir,
        "--target", CMAKE_STATIC_TARGET,
        "--config", "Release",
    ]
    return configure_cmd, build_cmd


def resolve_build_commands(build_system, package_source_path, install_dir, cross_target=None, build_dir=None):
    """
    Resolve the command lists for one build system.

    Returns:
        dict: 'configure_command', 'build_command' and 'install_command'
        lists; 'install_command' is empty for CMake, whose archive output
        directory already points at the install dir.

    Raises:
        ValueError: If an unsupported build system is given.
    """
    if build_system == "autotools":
        configure_cmd, build_cmd, install_cmd = generate_autotools_commands(
            package_source_path, install_dir, cross_target
        )
    elif build_system == "cmake":
        build_dir = build_dir or os.path.join(package_source_path, "build")
        configure_cmd, build_cmd = generate_cmake_commands(package_source_path, build_dir, install_dir)
        install_cmd = []
    else:
        raise ValueError(f"Unsupported build system: {build_system}")

    return {
        "configure_command": configure_cmd,
        "build_command": build_cmd,
        "install_command": install_cmd,
    }
