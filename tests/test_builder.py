import io
import os
import tarfile
import tempfile
import unittest
from unittest.mock import patch

from pabuilder.builder import LinuxBuilder, UnixBuilder, WindowsBuilder, get_platform_builder
from pabuilder.errors import FilesystemError, MalformedInputError, ToolExitError
from pabuilder.models import BuildContext, HostPlatform, LinkDirectives


def make_source_tarball(directory, filename="pa_stable_v19_20140130.tgz"):
    path = os.path.join(directory, filename)
    with tarfile.open(path, "w:gz") as tar:
        data = b"#!/bin/sh\nexit 0\n"
        info = tarfile.TarInfo("portaudio/configure")
        info.size = len(data)
        info.mode = 0o755
        tar.addfile(info, io.BytesIO(data))
    return path


class FakeTools:
    """Stands in for configure/make/cmake and records what was run."""

    def __init__(self, output_dir, fail_on=None):
        self.output_dir = output_dir
        self.fail_on = fail_on
        self.commands = []

    def __call__(self, command, cwd=None, env=None):
        self.commands.append(list(command))
        if self.fail_on and command[0] == self.fail_on:
            raise ToolExitError(f"`{' '.join(command)}` did not execute successfully (exit status 1)",
                                returncode=1)
        if command == ["make", "install"]:
            lib_dir = os.path.join(self.output_dir, "lib")
            os.makedirs(os.path.join(lib_dir, "pkgconfig"), exist_ok=True)
            open(os.path.join(lib_dir, "libportaudio.a"), "wb").close()
            open(os.path.join(lib_dir, "pkgconfig", "portaudio-2.0.pc"), "w").close()
        if command[:2] == ["cmake", "--build"]:
            open(os.path.join(self.output_dir, "portaudio_static_x64.lib"), "wb").close()


class BuilderTestCase(unittest.TestCase):

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.work_dir = os.path.join(tmp.name, "work")
        self.out_dir = os.path.join(tmp.name, "out")
        os.makedirs(self.work_dir)
        os.makedirs(self.out_dir)
        patcher = patch('pabuilder.builder.logger')
        patcher.start()
        self.addCleanup(patcher.stop)

    def context(self, host_platform=HostPlatform.UNIX_GENERIC, cross_target=None):
        return BuildContext(output_dir=self.out_dir, host_platform=host_platform,
                            cross_target=cross_target, work_dir=self.work_dir)


class TestUnixBuilder(BuilderTestCase):

    def test_expected_artifact(self):
        artifact = UnixBuilder().expected_artifact(self.context())
        self.assertEqual(artifact.static_library_path, os.path.join(self.out_dir, "lib", "libportaudio.a"))
        self.assertEqual(artifact.install_prefix, self.out_dir)
        self.assertFalse(artifact.exists())

    @patch('pabuilder.builder.downloader.download_source')
    def test_download_uses_work_dir(self, mock_download_source):
        builder = UnixBuilder()
        builder.download(self.context())
        mock_download_source.assert_called_once_with(
            builder.archive, self.work_dir, HostPlatform.UNIX_GENERIC, None
        )

    @patch('pabuilder.builder.run_command')
    def test_build_installs_and_cleans_up(self, mock_run_command):
        tools = FakeTools(self.out_dir)
        mock_run_command.side_effect = tools
        make_source_tarball(self.work_dir)

        artifact = UnixBuilder().build(self.context(cross_target="arm-linux-gnueabihf"))

        source_dir = os.path.join(self.work_dir, "portaudio")
        self.assertEqual(tools.commands, [
            ["./configure", "--disable-shared", "--enable-static", "--prefix", self.out_dir, "--with-pic",
             "--target=arm-linux-gnueabihf", "--host=arm-linux-gnueabihf"],
            ["make"],
            ["make", "install"],
        ])
        for command_call in mock_run_command.call_args_list:
            self.assertEqual(command_call.kwargs["cwd"], source_dir)
        self.assertTrue(artifact.exists())
        self.assertFalse(os.path.exists(source_dir))
        self.assertFalse(os.path.exists(os.path.join(self.work_dir, "pa_stable_v19_20140130.tgz")))

    @patch('pabuilder.builder.run_command')
    def test_configure_failure_stops_before_make(self, mock_run_command):
        tools = FakeTools(self.out_dir, fail_on="./configure")
        mock_run_command.side_effect = tools
        make_source_tarball(self.work_dir)

        with self.assertRaises(ToolExitError):
            UnixBuilder().build(self.context())

        self.assertEqual(len(tools.commands), 1)
        self.assertFalse(UnixBuilder().expected_artifact(self.context()).exists())

    @patch('pabuilder.builder.run_command')
    def test_archive_without_expected_folder(self, mock_run_command):
        with tarfile.open(os.path.join(self.work_dir, "pa_stable_v19_20140130.tgz"), "w:gz") as tar:
            info = tarfile.TarInfo("other/README")
            tar.addfile(info, io.BytesIO(b""))

        with self.assertRaises(FilesystemError):
            UnixBuilder().build(self.context())
        mock_run_command.assert_not_called()

    def test_link_directives(self):
        os.makedirs(os.path.join(self.out_dir, "lib"))
        open(os.path.join(self.out_dir, "lib", "libportaudio.a"), "wb").close()

        directives = UnixBuilder().link_directives(self.context())

        self.assertEqual(directives.search_paths, (os.path.join(self.out_dir, "lib"),))
        self.assertEqual(directives.library_names, ("portaudio",))
        self.assertTrue(directives.static_link)
        self.assertEqual(directives.to_cargo(), [
            f"cargo:rustc-link-search=native={self.out_dir}/lib",
            "cargo:rustc-link-lib=static=portaudio",
        ])

    def test_link_directives_without_artifact(self):
        with self.assertRaises(FilesystemError):
            UnixBuilder().link_directives(self.context())


class TestLinuxBuilder(BuilderTestCase):

    @patch('pabuilder.builder.downloader.download_source')
    def test_download_platform(self, mock_download_source):
        LinuxBuilder().download(self.context(HostPlatform.LINUX))
        self.assertEqual(mock_download_source.call_args[0][2], HostPlatform.LINUX)

    @patch('pabuilder.builder.pkg_config.static_link_directives')
    @patch('pabuilder.builder.run_command')
    def test_links_through_descriptor(self, mock_run_command, mock_static_link_directives):
        mock_run_command.side_effect = FakeTools(self.out_dir)
        expected = LinkDirectives((os.path.join(self.out_dir, "lib"),), ("portaudio",), True, ("asound",))
        mock_static_link_directives.return_value = expected
        make_source_tarball(self.work_dir)
        ctx = self.context(HostPlatform.LINUX)

        builder = LinuxBuilder()
        builder.build(ctx)

        self.assertIs(builder.link_directives(ctx), expected)
        mock_static_link_directives.assert_called_once_with(
            os.path.join(self.out_dir, "lib", "pkgconfig", "portaudio-2.0.pc")
        )

    def test_missing_descriptor(self):
        os.makedirs(os.path.join(self.out_dir, "lib"))
        open(os.path.join(self.out_dir, "lib", "libportaudio.a"), "wb").close()
        with self.assertRaises(FilesystemError):
            LinuxBuilder().link_directives(self.context(HostPlatform.LINUX))


class TestWindowsBuilder(BuilderTestCase):

    @patch('pabuilder.builder.run_command')
    def test_cmake_build_renames_library(self, mock_run_command):
        tools = FakeTools(self.out_dir)
        mock_run_command.side_effect = tools
        make_source_tarball(self.work_dir)
        ctx = self.context(HostPlatform.WINDOWS, cross_target="arm-linux-gnueabihf")

        builder = WindowsBuilder(machine="AMD64")
        artifact = builder.build(ctx)

        self.assertEqual(artifact.static_library_path, os.path.join(self.out_dir, "portaudio.lib"))
        self.assertTrue(artifact.exists())
        self.assertFalse(os.path.exists(os.path.join(self.out_dir, "portaudio_static_x64.lib")))
        self.assertEqual([c[:2] for c in tools.commands], [["cmake", "-S"], ["cmake", "--build"]])
        self.assertNotIn("--target=arm-linux-gnueabihf", tools.commands[0])
        self.assertFalse(os.path.exists(os.path.join(self.work_dir, "pa_stable_v19_20140130.tgz")))

        directives = builder.link_directives(ctx)
        self.assertEqual(directives.search_paths, (self.out_dir,))
        self.assertEqual(directives.library_names, ())

    @patch('pabuilder.builder.run_command')
    def test_missing_arch_library_is_fatal(self, mock_run_command):
        make_source_tarball(self.work_dir)
        with self.assertRaises(FilesystemError):
            WindowsBuilder(machine="x86").build(self.context(HostPlatform.WINDOWS))

    def test_unsupported_arch(self):
        with self.assertRaises(MalformedInputError):
            WindowsBuilder(machine="ARM64").arch_library_name()

    def test_arch_names(self):
        self.assertEqual(WindowsBuilder(machine="x86").arch_library_name(), "portaudio_static_x86.lib")
        self.assertEqual(WindowsBuilder(machine="AMD64").arch_library_name(), "portaudio_static_x64.lib")


class TestGetPlatformBuilder(unittest.TestCase):

    def test_dispatch(self):
        self.assertIs(type(get_platform_builder(HostPlatform.UNIX_GENERIC)), UnixBuilder)
        self.assertIs(type(get_platform_builder(HostPlatform.LINUX)), LinuxBuilder)
        self.assertIs(type(get_platform_builder(HostPlatform.WINDOWS)), WindowsBuilder)

    def test_fetch_tool_passed_through(self):
        self.assertEqual(get_platform_builder(HostPlatform.LINUX, fetch_tool="curl").fetch_tool, "curl")


if __name__ == "__main__":
    unittest.main()
