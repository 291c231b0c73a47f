import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

from ibuild.builders.cmake import CMakeBackend
from ibuild.builders.custom import CustomBackend
from ibuild.builders.make import MakeBackend
from ibuild.builders.xcode import XcodeBackend
from ibuild.config import BuildInputs
from ibuild.errors import FileSystemError
from ibuild.models import BuildSystem, CustomCommands

from support import make_builder, touch


class BackendTestCase(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        patcher = patch('ibuild.cli_logger.Logger._log')
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        shutil.rmtree(self.test_dir)


class TestMakeBackend(BackendTestCase):

    def test_configure_argument_order(self):
        builder = make_builder(
            self.test_dir,
            backend=MakeBackend(),
            args=("--disable-shared", "CC=$#CC#"),
            arch_args={"iphoneos": {"arm64": ("--host=arm-apple-darwin",)}},
        )
        builder.backend.configure(builder, "arm64", "/scratch", "/install")

        builder.runner.run.assert_called_once_with(
            os.path.join(builder.source_root, "configure"),
            [
                "--host=arm-apple-darwin",
                "--disable-shared",
                "CC=/usr/bin/cc",
                "-arch arm64",
                "-isysroot /sdk",
                "-miphoneos-version-min=9.0",
                "-fembed-bitcode",
                "--prefix=/install",
            ],
            cwd="/scratch",
            env=builder.toolchain.env,
        )

    def test_arch_args_for_other_platform_ignored(self):
        builder = make_builder(
            self.test_dir,
            backend=MakeBackend(),
            arch_args={"iphonesimulator": {"arm64": ("--sim",)}},
        )
        builder.backend.configure(builder, "arm64", "/scratch", "/install")
        args = builder.runner.run.call_args.args[1]
        self.assertNotIn("--sim", args)
        self.assertEqual(args[0], "-arch arm64")

    @patch('ibuild.builders.make.os.cpu_count', return_value=12)
    def test_make_uses_processor_count(self, mock_cpu_count):
        builder = make_builder(self.test_dir, backend=MakeBackend())
        builder.backend.make(builder, "/scratch")
        builder.runner.run.assert_called_once_with("make", ["-j12"], cwd="/scratch")

    def test_install_command_override(self):
        builder = make_builder(self.test_dir, backend=MakeBackend(), install_command="install-strip")
        builder.backend.install(builder, "/scratch", "/install")
        builder.runner.run.assert_called_once_with("make", ["install-strip"], cwd="/scratch")

    def test_install_default(self):
        builder = make_builder(self.test_dir, backend=MakeBackend())
        builder.backend.install(builder, "/scratch", "/install")
        builder.runner.run.assert_called_once_with("make", ["install"], cwd="/scratch")


class TestCMakeBackend(BackendTestCase):

    def test_configure_arguments(self):
        builder = make_builder(
            self.test_dir,
            build_system=BuildSystem.CMAKE,
            backend=CMakeBackend(),
            args=("-DZLIB_BUILD_EXAMPLES=OFF",),
            arch_args={"iphoneos": {"arm64": ("-DWITH_NEON=ON", "-DSDK=$#SDKROOT#")}},
        )
        builder.backend.configure(builder, "arm64", "/scratch", "/install")

        builder.runner.run.assert_called_once_with(
            "cmake",
            [
                "-DCMAKE_C_FLAGS=-miphoneos-version-min=9.0 -fembed-bitcode",
                "-DCMAKE_INSTALL_PREFIX=/install",
                "-DCMAKE_OSX_SYSROOT=/sdk",
                "-DCMAKE_OSX_ARCHITECTURES=arm64",
                f"-DCMAKE_PREFIX_PATH={builder.build_root}",
                "-DPKG_CONFIG_USE_CMAKE_PREFIX_PATH=ON",
                "-DZLIB_BUILD_EXAMPLES=OFF",
                "-DWITH_NEON=ON",
                "-DSDK=/sdk",
                builder.source_root,
            ],
            cwd="/scratch",
            env=builder.toolchain.env,
        )

    def test_make_and_install_match_make_backend(self):
        builder = make_builder(self.test_dir, build_system=BuildSystem.CMAKE, backend=CMakeBackend())
        builder.backend.install(builder, "/scratch", "/install")
        builder.runner.run.assert_called_once_with("make", ["install"], cwd="/scratch")


class TestXcodeBackend(BackendTestCase):

    def _builder(self, **kwargs):
        kwargs.setdefault("outputs", ("libfoo.a",))
        return make_builder(
            self.test_dir,
            build_system=BuildSystem.XCODE,
            backend=XcodeBackend(),
            inputs=BuildInputs(xcode_deployment_target="IPHONEOS_DEPLOYMENT_TARGET=12.0"),
            **kwargs,
        )

    def test_configure_runs_xcodebuild_install(self):
        builder = self._builder(args=("-scheme", "Foo"), arch_args={"iphoneos": {"arm64": ("ONLY_ACTIVE_ARCH=NO",)}})
        builder.backend.configure(builder, "arm64", "/scratch", "/install")

        builder.runner.run.assert_called_once_with(
            "/usr/bin/xcodebuild",
            [
                "install",
                "-sdk", "/sdk",
                "-arch", "arm64",
                "IPHONEOS_DEPLOYMENT_TARGET=12.0",
                "OBJROOT=/install",
                "SYMROOT=/install",
                "DSTROOT=/install",
                f"OTHER_LDFLAGS=-L{os.path.join(builder.build_root, 'lib')}",
                f"IBUILD_CURRENT_BUILD_ROOT={builder.build_root}",
                f"IBUILD_CURRENT_PACKAGE_ROOT={builder.package_root}",
                "-scheme", "Foo",
                "ONLY_ACTIVE_ARCH=NO",
            ],
            cwd=builder.source_root,
        )

    def test_make_runs_nothing(self):
        builder = self._builder()
        builder.backend.make(builder, "/scratch")
        builder.runner.run.assert_not_called()

    def _xcode_products(self, install_dir):
        output = os.path.join(install_dir, "Release-iphoneos")
        touch(os.path.join(output, "libfoo.a"), "binary")
        touch(os.path.join(output, "Foo.swiftmodule", "arm64.swiftmodule"), "module")
        touch(os.path.join(output, "Foo.build", "ignored"))
        return output

    def test_install_collects_products(self):
        builder = self._builder()
        install_dir = os.path.join(self.test_dir, "install")
        self._xcode_products(install_dir)

        builder.backend.install(builder, "/scratch", install_dir)

        self.assertTrue(os.path.exists(os.path.join(install_dir, "lib", "libfoo.a")))
        self.assertTrue(os.path.exists(
            os.path.join(install_dir, "swiftmodules", "Foo.swiftmodule", "arm64.swiftmodule")
        ))
        self.assertFalse(os.path.exists(os.path.join(install_dir, "swiftmodules", "Foo.build")))

    def test_install_twice_is_idempotent(self):
        builder = self._builder()
        install_dir = os.path.join(self.test_dir, "install")
        self._xcode_products(install_dir)

        builder.backend.install(builder, "/scratch", install_dir)
        first = sorted(os.walk(install_dir))
        builder.backend.install(builder, "/scratch", install_dir)

        self.assertEqual(sorted(os.walk(install_dir)), first)
        with open(os.path.join(install_dir, "lib", "libfoo.a")) as f:
            self.assertEqual(f.read(), "binary")

    def test_install_missing_output_fails(self):
        builder = self._builder(outputs=("libmissing.a",))
        install_dir = os.path.join(self.test_dir, "install")
        self._xcode_products(install_dir)
        with self.assertRaises(FileSystemError):
            builder.backend.install(builder, "/scratch", install_dir)

    def test_merge_plain_library_uses_lipo(self):
        builder = self._builder()
        destination = os.path.join(builder.build_root, "libfoo.a")
        builder.backend.merge(builder, [("arm64", "/a/libfoo.a")], destination)
        builder.runner.run.assert_called_once_with(
            "/usr/bin/lipo", ["-create", "-output", destination, "-arch", "arm64", "/a/libfoo.a"]
        )

    def test_merge_framework(self):
        builder = self._builder(outputs=("Foo.framework",))
        architecture_map = []
        for arch in ("arm64", "x86_64"):
            framework = os.path.join(self.test_dir, arch, "Foo.framework")
            touch(os.path.join(framework, "Foo"), arch)
            touch(os.path.join(framework, "Info.plist"), arch)
            touch(os.path.join(framework, "Modules", "Foo.swiftmodule", f"{arch}.swiftinterface"), arch)
            architecture_map.append((arch, framework))
        destination = os.path.join(builder.build_root, "Foo.framework")

        builder.backend.merge(builder, architecture_map, destination)

        builder.runner.run.assert_called_once_with("/usr/bin/lipo", [
            "-create", "-output", os.path.join(destination, "Foo"),
            "-arch", "arm64", os.path.join(architecture_map[0][1], "Foo"),
            "-arch", "x86_64", os.path.join(architecture_map[1][1], "Foo"),
        ])
        with open(os.path.join(destination, "Info.plist")) as f:
            self.assertEqual(f.read(), "arm64")
        modules = os.path.join(destination, "Modules", "Foo.swiftmodule")
        self.assertEqual(sorted(os.listdir(modules)), ["arm64.swiftinterface", "x86_64.swiftinterface"])

    def _versioned_framework(self, arch):
        framework = os.path.join(self.test_dir, arch, "Foo.framework")
        version = os.path.join(framework, "Versions", "A")
        touch(os.path.join(version, "Foo"), arch)
        touch(os.path.join(version, "Modules", "Foo.swiftmodule", f"{arch}.swiftinterface"), arch)
        os.symlink("A", os.path.join(framework, "Versions", "Current"))
        os.symlink(os.path.join("Versions", "Current", "Foo"), os.path.join(framework, "Foo"))
        os.symlink(os.path.join("Versions", "Current", "Modules"), os.path.join(framework, "Modules"))
        return framework

    def test_merge_versioned_framework_twice(self):
        builder = self._builder(outputs=("Foo.framework",))
        architecture_map = [(arch, self._versioned_framework(arch)) for arch in ("arm64", "x86_64")]
        destination = os.path.join(builder.build_root, "Foo.framework")

        builder.backend.merge(builder, architecture_map, destination)
        builder.backend.merge(builder, architecture_map, destination)

        self.assertTrue(os.path.islink(os.path.join(destination, "Versions", "Current")))
        self.assertTrue(os.path.islink(os.path.join(destination, "Modules")))
        modules = os.path.join(destination, "Versions", "A", "Modules", "Foo.swiftmodule")
        self.assertEqual(sorted(os.listdir(modules)), ["arm64.swiftinterface", "x86_64.swiftinterface"])
        self.assertEqual(builder.runner.run.call_count, 2)

    def test_install_twice_with_symlinked_swiftmodule(self):
        builder = self._builder()
        install_dir = os.path.join(self.test_dir, "install")
        output = self._xcode_products(install_dir)
        os.symlink("arm64.swiftmodule", os.path.join(output, "Foo.swiftmodule", "arm64-apple-ios.swiftmodule"))

        builder.backend.install(builder, "/scratch", install_dir)
        builder.backend.install(builder, "/scratch", install_dir)

        self.assertTrue(os.path.islink(
            os.path.join(install_dir, "swiftmodules", "Foo.swiftmodule", "arm64-apple-ios.swiftmodule")
        ))


class TestCustomBackend(BackendTestCase):

    def _builder(self, **commands):
        env = commands.pop("env", {})
        return make_builder(
            self.test_dir,
            build_system=BuildSystem.CUSTOM,
            backend=CustomBackend(),
            custom=CustomCommands(env=env, **commands),
        )

    def test_configure_command_is_templated(self):
        builder = self._builder(configure="sh ./build.sh --arch $#ARCH# --prefix=$#PREFIX# $#CC#", env={"JOBS": "4"})
        builder.current_architecture = "arm64"
        scratch_dir, install_dir = builder.architecture_dirs("arm64")

        builder.backend.configure(builder, "arm64", scratch_dir, install_dir)

        command, args = builder.runner.run.call_args.args
        kwargs = builder.runner.run.call_args.kwargs
        self.assertEqual(command, "sh")
        self.assertEqual(args, ["./build.sh", "--arch", "arm64", f"--prefix={install_dir}", "/usr/bin/cc"])
        self.assertEqual(kwargs["cwd"], scratch_dir)
        self.assertEqual(kwargs["env"]["JOBS"], "4")
        self.assertEqual(kwargs["env"]["CC"], "/usr/bin/cc")

    def test_missing_stage_command_is_skipped(self):
        builder = self._builder(configure="./configure")
        builder.current_architecture = "arm64"
        builder.backend.make(builder, "/scratch")
        builder.runner.run.assert_not_called()

    def test_install_command(self):
        builder = self._builder(install="ninja -C build install")
        builder.current_architecture = "x86_64"
        builder.backend.install(builder, "/scratch", "/install")
        builder.runner.run.assert_called_once()
        self.assertEqual(builder.runner.run.call_args.args[:2], ("ninja", ["-C", "build", "install"]))

    def test_hooks_use_their_own_arguments(self):
        builder = self._builder(configure="./configure --host=$#ARCH# --prefix=$#PREFIX#", make="make")
        self.assertIsNone(builder.current_architecture)

        builder.backend.configure(builder, "x86_64", "/scratch", "/install")
        self.assertEqual(builder.runner.run.call_args.args[1], ["--host=x86_64", "--prefix=/install"])

        builder.backend.make(builder, "/scratch")
        env = builder.runner.run.call_args.kwargs["env"]
        self.assertEqual(env["CONFIGURE_DIR"], "/scratch")
        self.assertNotIn("ARCH", env)


if __name__ == '__main__':
    unittest.main()
