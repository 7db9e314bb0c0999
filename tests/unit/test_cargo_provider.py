"""Tests for CargoMetadataProvider — fetch, metadata parsing, hook discovery."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from buildtrust.core.errors import DependencyResolutionError
from buildtrust.models.packages import PackageIdentity
from buildtrust.providers.cargo import CargoMetadataProvider

METADATA = {
    "packages": [
        {
            "name": "libc",
            "version": "0.2.150",
            "id": "libc 0.2.150",
            "targets": [
                {"kind": ["lib"], "src_path": "/reg/libc-0.2.150/src/lib.rs"},
                {"kind": ["custom-build"], "src_path": "/reg/libc-0.2.150/build.rs"},
            ],
        },
        {
            "name": "itoa",
            "version": "1.0.9",
            "targets": [{"kind": ["lib"], "src_path": "/reg/itoa-1.0.9/src/lib.rs"}],
        },
        {
            "name": "proc-macro2",
            "version": "1.0.69",
            "targets": [
                {"kind": ["custom-build"], "src_path": "/reg/proc-macro2-1.0.69/build.rs"},
            ],
        },
    ],
    "workspace_root": "/work",
}


class FakeRunner:
    def __init__(self, responses: dict[str, tuple[int, str]]) -> None:
        self.responses = responses
        self.calls: list[list[str]] = []

    def __call__(self, cmd: list[str]) -> subprocess.CompletedProcess[str]:
        self.calls.append(cmd)
        code, stdout = self.responses[cmd[1]]
        return subprocess.CompletedProcess(cmd, code, stdout=stdout)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner({"fetch": (0, ""), "metadata": (0, json.dumps(METADATA))})


class TestCargoMetadataProvider:
    def test_finds_build_scripts_in_order(self, runner: FakeRunner):
        hooks = CargoMetadataProvider(runner=runner).build_hooks()
        assert [h.package for h in hooks] == [
            PackageIdentity(name="libc", version="0.2.150"),
            PackageIdentity(name="proc-macro2", version="1.0.69"),
        ]
        assert hooks[0].hook_path == Path("/reg/libc-0.2.150/build.rs")
        assert hooks[1].pkg_id == "proc-macro2@1.0.69"

    def test_fetches_before_metadata(self, runner: FakeRunner):
        CargoMetadataProvider(runner=runner).build_hooks()
        assert runner.calls == [
            ["cargo", "fetch"],
            ["cargo", "metadata", "--format-version=1"],
        ]

    def test_no_fetch(self, runner: FakeRunner):
        CargoMetadataProvider(fetch=False, runner=runner).build_hooks()
        assert [c[1] for c in runner.calls] == ["metadata"]

    def test_manifest_path_forwarded(self, runner: FakeRunner):
        provider = CargoMetadataProvider(
            cargo_bin="/opt/cargo", manifest_path=Path("crate/Cargo.toml"), runner=runner
        )
        provider.build_hooks()
        assert all(c[0] == "/opt/cargo" for c in runner.calls)
        assert all(c[-2:] == ["--manifest-path", "crate/Cargo.toml"] for c in runner.calls)

    def test_fetch_failure(self):
        runner = FakeRunner({"fetch": (101, "")})
        with pytest.raises(DependencyResolutionError, match="fetch"):
            CargoMetadataProvider(runner=runner).build_hooks()

    def test_metadata_failure(self):
        runner = FakeRunner({"fetch": (0, ""), "metadata": (101, "")})
        with pytest.raises(DependencyResolutionError, match="cargo metadata"):
            CargoMetadataProvider(runner=runner).build_hooks()

    def test_unparsable_metadata(self):
        runner = FakeRunner({"fetch": (0, ""), "metadata": (0, "{not json")})
        with pytest.raises(DependencyResolutionError, match="parse metadata"):
            CargoMetadataProvider(runner=runner).build_hooks()

    def test_missing_binary(self):
        def _raise(cmd):
            raise FileNotFoundError(cmd[0])

        with pytest.raises(DependencyResolutionError, match="failed to run"):
            CargoMetadataProvider(runner=_raise).build_hooks()
