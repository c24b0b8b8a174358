"""Tests for NSIS script rendering and the Windows installer builder."""

import logging
from pathlib import Path

import pytest

from lsc_credentials.builders.installer import (
    PACKAGE_FILENAME,
    SCRIPT_FILENAME,
    InstallerBuilder,
    render_nsis_script,
)
from lsc_credentials.error_handling import (
    ArtifactReadError,
    ExternalToolError,
    PreconditionViolation,
    WorkspaceError,
)
from lsc_credentials.pipeline import ArtifactKind, WorkspaceManager
from tests.mocks import FAILING_STUB, MAKENSIS_STUB, SILENT_SUCCESS_STUB, SpyRunner


@pytest.mark.unit
class TestRenderNsisScript:
    """Tests for render_nsis_script."""

    def test_outfile_is_first_directive(self):
        script = render_nsis_script("/tmp/x/p.exe", "alice", "s3cret-pass")

        lines = script.splitlines()
        assert lines[0] == "#Installer filename"
        assert lines[1] == "outfile /tmp/x/p.exe"

    def test_user_and_password_substituted(self):
        script = render_nsis_script("p.exe", "alice", "s3cret-pass")

        assert "writeUninstaller $INSTDIR\\lsc_remove_alice.exe" in script
        assert "net user alice s3cret-pass /add /active:yes" in script
        assert "%COMPUTERNAME%\\alice /add" in script
        assert 'ExecWait "net user alice /delete"' in script
        assert script.count("alice") == 4
        assert script.count("s3cret-pass") == 1

    def test_admin_group_lookup_escaping(self):
        """Test NSIS escapes are emitted literally."""
        script = render_nsis_script("p.exe", "alice", "s3cret-pass")

        assert 'GetObject($\\"winmgmts:\\\\.\\root\\cimv2$\\")' in script
        assert "SID = 'S-1-5-32-544'" in script

    def test_values_are_not_escaped(self):
        """Test values are substituted verbatim, including braces and quotes."""
        script = render_nsis_script("p.exe", "bob", 'pa"ss{0}')

        assert 'net user bob pa"ss{0} /add' in script

    def test_sections_balanced(self):
        script = render_nsis_script("p.exe", "alice", "s3cret-pass")

        lines = script.splitlines()
        assert lines.count("section") == 1
        assert lines.count('section "Uninstall"') == 1
        assert lines.count("sectionEnd") == 2


@pytest.mark.unit
class TestInstallerBuilder:
    """Tests for InstallerBuilder."""

    def test_recreate_returns_installer_bytes(self, scratch_root, make_stub, record_dir):
        builder = InstallerBuilder(
            WorkspaceManager(scratch_root),
            makensis_command=str(make_stub("makensis", MAKENSIS_STUB)),
        )

        artifact = builder.recreate("alice", "s3cret-pass")

        assert artifact.kind is ArtifactKind.EXE
        assert artifact.data == b"EXEDATA"
        assert list(scratch_root.iterdir()) == []

    def test_compiler_contract(self, scratch_root, make_stub, record_dir):
        """Test makensis gets the script path and runs in the script's directory."""
        builder = InstallerBuilder(
            WorkspaceManager(scratch_root),
            makensis_command=str(make_stub("makensis", MAKENSIS_STUB)),
        )

        builder.recreate("alice", "s3cret-pass")

        args = (record_dir / "makensis.args").read_text().splitlines()
        cwd = Path((record_dir / "makensis.cwd").read_text().strip())
        script = (record_dir / "script.nsis").read_text()
        assert len(args) == 1
        assert Path(args[0]).name == SCRIPT_FILENAME
        assert cwd.resolve() == Path(args[0]).parent.resolve()
        assert f"outfile {Path(args[0]).parent / PACKAGE_FILENAME}" in script

    def test_password_redacted_in_logs(self, scratch_root, make_stub, caplog):
        spy = SpyRunner()
        builder = InstallerBuilder(
            WorkspaceManager(scratch_root),
            runner=spy,
            makensis_command=str(make_stub("makensis", MAKENSIS_STUB)),
        )

        with caplog.at_level(logging.DEBUG):
            builder.recreate("alice", "s3cret-pass")

        assert spy.calls[0]["secrets"] == ("s3cret-pass",)
        assert "s3cret-pass" not in caplog.text

    def test_build_into_directory(self, make_stub, tmp_path, scratch_root):
        builder = InstallerBuilder(
            WorkspaceManager(scratch_root),
            makensis_command=str(make_stub("makensis", MAKENSIS_STUB)),
        )
        destination = tmp_path / "out" / "installer.exe"
        destination.parent.mkdir()

        builder.build("alice", "s3cret-pass", destination)

        assert destination.read_bytes() == b"EXEDATA"
        assert (destination.parent / SCRIPT_FILENAME).exists()

    def test_script_write_failure(self, make_stub, tmp_path, scratch_root):
        """Test an unwritable script location fails before compiling."""
        spy = SpyRunner()
        builder = InstallerBuilder(WorkspaceManager(scratch_root), runner=spy)

        with pytest.raises(WorkspaceError, match="Failed to create NSIS script"):
            builder.build("alice", "s3cret-pass", tmp_path / "missing" / "p.exe")

        assert spy.calls == []

    def test_compiler_failure(self, scratch_root, make_stub):
        builder = InstallerBuilder(
            WorkspaceManager(scratch_root),
            makensis_command=str(make_stub("makensis", FAILING_STUB)),
        )

        with pytest.raises(ExternalToolError, match="create the exe"):
            builder.recreate("alice", "s3cret-pass")

        assert list(scratch_root.iterdir()) == []

    def test_compiler_missing(self, scratch_root, tmp_path):
        builder = InstallerBuilder(
            WorkspaceManager(scratch_root),
            makensis_command=str(tmp_path / "no-makensis"),
        )

        with pytest.raises(ExternalToolError):
            builder.recreate("alice", "s3cret-pass")

        assert list(scratch_root.iterdir()) == []

    def test_success_without_installer(self, scratch_root, make_stub):
        builder = InstallerBuilder(
            WorkspaceManager(scratch_root),
            makensis_command=str(make_stub("makensis", SILENT_SUCCESS_STUB)),
        )

        with pytest.raises(ArtifactReadError):
            builder.recreate("alice", "s3cret-pass")

        assert list(scratch_root.iterdir()) == []

    def test_short_password_rejected(self, scratch_root):
        spy = SpyRunner()
        builder = InstallerBuilder(WorkspaceManager(scratch_root), runner=spy)

        with pytest.raises(PreconditionViolation):
            builder.recreate("alice", "abc")

        assert spy.calls == []
        assert list(scratch_root.iterdir()) == []

    def test_script_written_as_utf8(self, scratch_root, make_stub, record_dir):
        """Test non-ASCII account names are written as UTF-8 whatever the locale."""
        builder = InstallerBuilder(
            WorkspaceManager(scratch_root),
            makensis_command=str(make_stub("makensis", MAKENSIS_STUB)),
        )

        builder.recreate("jürgen", "pässwort-1")

        script = (record_dir / "script.nsis").read_bytes().decode("utf-8")
        assert "net user jürgen pässwort-1 /add" in script

    def test_unencodable_script_is_workspace_error(self, scratch_root, tmp_path):
        """Test text that cannot be encoded fails as WorkspaceError before compiling."""
        spy = SpyRunner()
        builder = InstallerBuilder(WorkspaceManager(scratch_root), runner=spy)

        with pytest.raises(WorkspaceError, match="Failed to create NSIS script"):
            builder.build("al\udcffice", "s3cret-pass", tmp_path / "p.exe")

        assert spy.calls == []
