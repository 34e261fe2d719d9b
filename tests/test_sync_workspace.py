"""Tests for workspaces and the workspace registry."""

import pytest

from pymetasync.exceptions import WorkspaceStateError
from pymetasync.sync.workspace import (
    LocalWorkspace,
    RemoteWorkspace,
    WorkspaceRegistry,
)


class TestLocalWorkspace:
    """Tests for LocalWorkspace."""

    def test_exists(self, temp_dir):
        """exists() reflects the directory."""
        assert LocalWorkspace(temp_dir, ".dwl").exists() is True
        assert LocalWorkspace(temp_dir / "missing", ".dwl").exists() is False

    def test_list_files(self, temp_dir):
        """Listing returns one LocalFile per matching file."""
        (temp_dir / "a.dwl").write_text("x")
        (temp_dir / "b.dwl").write_text("y")

        files = LocalWorkspace(temp_dir, ".dwl").list_files()

        assert sorted(f.full_name for f in files) == ["a.dwl", "b.dwl"]

    def test_list_files_rescans_every_call(self, temp_dir):
        """Files added between calls are visible."""
        workspace = LocalWorkspace(temp_dir, ".dwl")
        assert workspace.list_files() == []

        (temp_dir / "a.dwl").write_text("x")

        assert [f.name for f in workspace.list_files()] == ["a"]

    def test_list_files_returns_fresh_instances(self, temp_dir):
        """File instances are not reused across calls."""
        (temp_dir / "a.dwl").write_text("x")
        workspace = LocalWorkspace(temp_dir, ".dwl")

        first = workspace.list_files()[0]
        second = workspace.list_files()[0]

        assert first is not second
        assert first == second

    def test_file_exists_and_file_for_name(self, temp_dir):
        """Lookup by logical name works without listing."""
        (temp_dir / "a.dwl").write_text("x")
        workspace = LocalWorkspace(temp_dir, ".dwl")

        assert workspace.file_exists("a") is True
        assert workspace.file_exists("b") is False
        assert workspace.file_for_name("b").full_name == "b.dwl"
        assert workspace.file_for_name("a").read() == "x"

    def test_include_filters_listing(self, temp_dir):
        """Only included names are listed."""
        (temp_dir / "a.dwl").write_text("x")
        (temp_dir / "b.dwl").write_text("y")

        files = LocalWorkspace(temp_dir, ".dwl", include={"b"}).list_files()

        assert [f.name for f in files] == ["b"]


class TestRemoteWorkspace:
    """Tests for RemoteWorkspace."""

    def test_list_files(self):
        """Records become RemoteFiles in the given order."""
        workspace = RemoteWorkspace(".dwl", [("a", "x"), ("c", "z")])

        files = workspace.list_files()

        assert [f.full_name for f in files] == ["a.dwl", "c.dwl"]
        assert [f.read() for f in files] == ["x", "z"]

    def test_list_files_returns_new_list(self):
        """Mutating a listing does not affect the workspace."""
        workspace = RemoteWorkspace(".dwl", [("a", "x")])

        workspace.list_files().clear()

        assert len(workspace.list_files()) == 1

    def test_file_exists_and_lookup(self):
        """Lookup by logical name."""
        workspace = RemoteWorkspace(".dwl", [("a", "x")])

        assert workspace.file_exists("a") is True
        assert workspace.file_exists("b") is False
        assert workspace.file_for_name("a").read() == "x"
        with pytest.raises(KeyError):
            workspace.file_for_name("b")

    def test_none_content_becomes_empty(self):
        """Records without content read as an empty string."""
        workspace = RemoteWorkspace(".dwl", [("a", None)])

        assert workspace.file_for_name("a").read() == ""

    def test_include_filters_records(self):
        """Only included names are kept."""
        workspace = RemoteWorkspace(".dwl", [("a", "x"), ("b", "y")], include=["a"])

        assert [f.name for f in workspace.list_files()] == ["a"]


class TestWorkspaceRegistry:
    """Tests for WorkspaceRegistry."""

    def test_set_and_get(self, temp_dir):
        """Both workspaces are returned once set."""
        local = LocalWorkspace(temp_dir, ".dwl")
        remote = RemoteWorkspace(".dwl", [])
        registry = WorkspaceRegistry()

        registry.set_workspace(local)
        registry.set_workspace(remote)

        assert registry.get_workspaces() == (local, remote)

    def test_construct_with_workspaces(self, temp_dir):
        """Slots can be filled at construction time."""
        local = LocalWorkspace(temp_dir, ".dwl")
        remote = RemoteWorkspace(".dwl", [])

        registry = WorkspaceRegistry(local=local, remote=remote)

        assert registry.local is local
        assert registry.remote is remote

    def test_set_local_twice_raises(self, temp_dir):
        """Setting the local slot twice is an error."""
        registry = WorkspaceRegistry()
        registry.set_workspace(LocalWorkspace(temp_dir, ".dwl"))

        with pytest.raises(WorkspaceStateError, match="already initialized"):
            registry.set_workspace(LocalWorkspace(temp_dir, ".dwl"))

    def test_set_remote_twice_raises(self):
        """Setting the remote slot twice is an error."""
        registry = WorkspaceRegistry(remote=RemoteWorkspace(".dwl", []))

        with pytest.raises(WorkspaceStateError, match="Remote workspace"):
            registry.set_workspace(RemoteWorkspace(".dwl", []))

    def test_get_with_unset_remote_raises(self, temp_dir):
        """Reading before the remote slot is set is an error."""
        registry = WorkspaceRegistry(local=LocalWorkspace(temp_dir, ".dwl"))

        with pytest.raises(WorkspaceStateError, match="Remote workspace has not"):
            registry.get_workspaces()

    def test_get_with_unset_local_raises(self):
        """Reading before the local slot is set is an error."""
        registry = WorkspaceRegistry(remote=RemoteWorkspace(".dwl", []))

        with pytest.raises(WorkspaceStateError, match="Local workspace has not"):
            registry.get_workspaces()

    def test_unsupported_workspace_type(self):
        """Objects that are not workspaces are rejected."""
        with pytest.raises(TypeError):
            WorkspaceRegistry().set_workspace("not a workspace")
