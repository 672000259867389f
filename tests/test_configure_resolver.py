import unittest

from pabuilder.utils.configure_resolver import resolve_build_commands


class TestResolveBuildCommands(unittest.TestCase):

    def test_autotools_static_pic(self):
        commands = resolve_build_commands("autotools", "/work/portaudio", "/tmp/out")

        self.assertEqual(commands["configure_command"], [
            "./configure", "--disable-shared", "--enable-static",
            "--prefix", "/tmp/out", "--with-pic",
        ])
        self.assertEqual(commands["build_command"], ["make"])
        self.assertEqual(commands["install_command"], ["make", "install"])

    def test_autotools_cross(self):
        commands = resolve_build_commands(
            "autotools", "/work/portaudio", "/tmp/out", cross_target="arm-linux-gnueabihf"
        )
        self.assertEqual(commands["configure_command"][-2:],
                         ["--target=arm-linux-gnueabihf", "--host=arm-linux-gnueabihf"])

    def test_cmake_static_target(self):
        commands = resolve_build_commands("cmake", "C:/out/portaudio", "C:/out", build_dir="C:/out/build")

        configure = commands["configure_command"]
        self.assertEqual(configure[:5], ["cmake", "-S", "C:/out/portaudio", "-B", "C:/out/build"])
        self.assertIn("-DCMAKE_ARCHIVE_OUTPUT_DIRECTORY_RELEASE=C:/out", configure)
        self.assertIn("-DCMAKE_ARCHIVE_OUTPUT_DIRECTORY_DEBUG=C:/out", configure)
        self.assertIn("-DCMAKE_C_FLAGS=-DPA_WDMKS_NO_KSGUID_LIB", configure)
        self.assertIn("-DCMAKE_BUILD_TYPE=Release", configure)
        self.assertEqual(commands["build_command"], [
            "cmake", "--build", "C:/out/build", "--target", "portaudio_static", "--config", "Release",
        ])
        self.assertEqual(commands["install_command"], [])

    def test_unknown_build_system(self):
        with self.assertRaises(ValueError):
            resolve_build_commands("meson", "/work/portaudio", "/tmp/out")


if __name__ == "__main__":
    unittest.main()
