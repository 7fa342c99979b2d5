"""Tests for storage content fan-out and backup commands."""

from pathlib import Path

import httpx
import pytest

from pvemcp.command.dispatcher import Dispatcher
from pvemcp.commands import build_registry
from pvemcp.commands.backups import upload_filename
from pvemcp.config.schema import ProxmoxInstance
from pvemcp.core.types import ErrorKind
from pvemcp.proxmox.client import ProxmoxClient

NODES = [{"node": "pve1", "status": "online"}, {"node": "pve2", "status": "online"}]
BACKUP = "nfs:backup/vzdump-qemu-100-2024_01_01-00_00_00.vma.zst"


@pytest.fixture
def dispatcher(client: ProxmoxClient) -> Dispatcher:
    return Dispatcher(build_registry(), client)


class TestListBackups:
    """list_backups and get_storage_content visit every node."""

    @pytest.mark.asyncio
    async def test_fans_out_and_dedupes(self, dispatcher: Dispatcher, stub_api) -> None:
        stub_api.add("GET", "nodes", NODES)
        stub_api.add(
            "GET",
            "nodes/pve1/storage/nfs/content",
            [{"volid": BACKUP, "content": "backup", "size": 1024, "vmid": 100}],
        )
        stub_api.add(
            "GET",
            "nodes/pve2/storage/nfs/content",
            [
                {"volid": BACKUP, "content": "backup", "size": 1024, "vmid": 100},
                {"volid": "nfs:backup/vzdump-lxc-200.tar.zst", "content": "backup", "vmid": 200},
            ],
        )

        result = await dispatcher.dispatch("list_backups", {"storage": "nfs"})

        assert result.success, result.error
        assert result.payload["count"] == 2
        backups = result.payload["backups"]
        assert backups[0]["volid"] == BACKUP
        assert backups[0]["node"] == "pve1"
        assert backups[1]["node"] == "pve2"
        assert stub_api.last_params() == {"content": "backup"}

    @pytest.mark.asyncio
    async def test_failing_node_skipped(self, dispatcher: Dispatcher, stub_api, caplog) -> None:
        stub_api.add("GET", "nodes", NODES)
        stub_api.add("GET", "nodes/pve1/storage/nfs/content", status=500, text="storage offline")
        stub_api.add("GET", "nodes/pve2/storage/nfs/content", [{"volid": BACKUP}])

        result = await dispatcher.dispatch("list_backups", {"storage": "nfs"})

        assert result.success
        assert [b["node"] for b in result.payload["backups"]] == ["pve2"]
        assert "Skipping node pve1" in caplog.text

    @pytest.mark.asyncio
    async def test_named_node_failure_is_reported(self, dispatcher: Dispatcher, stub_api) -> None:
        stub_api.add("GET", "nodes/pve1/storage/nfs/content", status=500, text="storage offline")

        result = await dispatcher.dispatch("list_backups", {"storage": "nfs", "node_name": "pve1"})

        assert result.kind is ErrorKind.REMOTE_REJECTED
        assert "storage offline" in result.error

    @pytest.mark.asyncio
    async def test_empty_cluster(self, dispatcher: Dispatcher, stub_api) -> None:
        stub_api.add("GET", "nodes", [])

        result = await dispatcher.dispatch("get_storage_content", {"storage": "local"})

        assert not result.success
        assert "no nodes" in result.error


class TestDeleteBackup:
    """delete_backup tries nodes until one succeeds."""

    @pytest.mark.asyncio
    async def test_first_success_wins(self, dispatcher: Dispatcher, stub_api) -> None:
        stub_api.add("GET", "nodes", NODES)
        stub_api.add("DELETE", f"nodes/pve1/storage/nfs/content/{BACKUP}", status=500, text="no such volume")
        stub_api.add("DELETE", f"nodes/pve2/storage/nfs/content/{BACKUP}", "UPID:pve2:0001:imgdel")

        result = await dispatcher.dispatch("delete_backup", {"storage": "nfs", "backup_id": BACKUP})

        assert result.success, result.error
        assert result.payload["node"] == "pve2"
        assert result.payload["task"] == "UPID:pve2:0001:imgdel"

    @pytest.mark.asyncio
    async def test_stops_after_success(self, dispatcher: Dispatcher, stub_api) -> None:
        stub_api.add("GET", "nodes", NODES)
        stub_api.add("DELETE", f"nodes/pve1/storage/nfs/content/{BACKUP}", "UPID:pve1:0001:imgdel")

        result = await dispatcher.dispatch("delete_backup", {"storage": "nfs", "backup_id": BACKUP})

        assert result.payload["node"] == "pve1"
        assert [r.method for r in stub_api.requests] == ["GET", "DELETE"]

    @pytest.mark.asyncio
    async def test_all_nodes_fail(self, dispatcher: Dispatcher, stub_api) -> None:
        stub_api.add("GET", "nodes", NODES)
        stub_api.add("DELETE", f"nodes/pve1/storage/nfs/content/{BACKUP}", status=500, text="first")
        stub_api.add("DELETE", f"nodes/pve2/storage/nfs/content/{BACKUP}", status=403, text="last")

        result = await dispatcher.dispatch("delete_backup", {"storage": "nfs", "backup_id": BACKUP})

        assert result.kind is ErrorKind.REMOTE_REJECTED
        assert result.error == "Failed to execute delete_backup: API error (status 403): last"

    @pytest.mark.asyncio
    async def test_timeout_not_retried_on_next_node(self, pve_instance: ProxmoxInstance, stub_api) -> None:
        """A delete that timed out may have happened, so no other node is tried."""
        stub_api.add("GET", "nodes", NODES)
        stub_api.add("DELETE", f"nodes/pve1/storage/nfs/content/{BACKUP}", "UPID:pve1", delay=1.0)
        stub_api.add("DELETE", f"nodes/pve2/storage/nfs/content/{BACKUP}", "UPID:pve2")
        async with ProxmoxClient(pve_instance, timeout=0.05, transport=stub_api.transport) as client:
            dispatcher = Dispatcher(build_registry(), client)
            result = await dispatcher.dispatch("delete_backup", {"storage": "nfs", "backup_id": BACKUP})

        assert result.kind is ErrorKind.TIMEOUT
        assert [r.url.path.split("/")[4] for r in stub_api.requests if r.method == "DELETE"] == ["pve1"]


class TestCreateBackup:
    """vzdump-based backups."""

    @pytest.mark.asyncio
    async def test_vm_backup_request(self, dispatcher: Dispatcher, stub_api) -> None:
        stub_api.add("POST", "nodes/pve1/vzdump", "UPID:pve1:0002:vzdump")

        result = await dispatcher.dispatch(
            "create_vm_backup",
            {"node_name": "pve1", "vmid": 100, "storage": "nfs", "mode": "snapshot", "compress": "zstd"},
        )

        assert result.payload == {
            "action": "backup",
            "vmid": 100,
            "node": "pve1",
            "storage": "nfs",
            "task": "UPID:pve1:0002:vzdump",
        }
        assert stub_api.last_json() == {
            "vmid": 100,
            "storage": "nfs",
            "mode": "snapshot",
            "compress": "zstd",
        }

    @pytest.mark.asyncio
    async def test_invalid_mode_rejected(self, dispatcher: Dispatcher, stub_api) -> None:
        result = await dispatcher.dispatch(
            "create_vm_backup", {"node_name": "pve1", "vmid": 100, "mode": "instant"}
        )

        assert result.kind is ErrorKind.INVALID_PARAMETER
        assert stub_api.call_count == 0

    @pytest.mark.asyncio
    async def test_container_restore_sends_restore_flag(self, dispatcher: Dispatcher, stub_api) -> None:
        def route(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": "UPID:pve1:0003:vzrestore"})

        stub_api.add_route("POST", "nodes/pve1/lxc", route)

        result = await dispatcher.dispatch(
            "restore_container_backup",
            {"node_name": "pve1", "container_id": 200, "backup_id": "local:backup/ct.tar.zst"},
        )

        assert result.success
        assert stub_api.last_json() == {
            "restore": 1,
            "vmid": 200,
            "ostemplate": "local:backup/ct.tar.zst",
        }


class TestUploadBackup:
    """upload_backup streams a local archive as multipart form data."""

    ARCHIVE = b"\x28\xb5\x2f\xfd vzdump archive bytes"

    @pytest.fixture
    def archive(self, tmp_path: Path) -> Path:
        path = tmp_path / "vzdump-qemu-100.vma.zst"
        path.write_bytes(self.ARCHIVE)
        return path

    @pytest.mark.parametrize(
        "backup_id,expected",
        [
            ("vzdump-qemu-100.vma.zst", "vzdump-qemu-100.vma.zst"),
            ("nfs:backup/vzdump-lxc-200.tar.zst", "vzdump-lxc-200.tar.zst"),
        ],
    )
    def test_upload_filename(self, backup_id: str, expected: str) -> None:
        assert upload_filename(backup_id) == expected

    @pytest.mark.asyncio
    async def test_named_node(self, dispatcher: Dispatcher, stub_api, archive: Path) -> None:
        stub_api.add("POST", "nodes/pve1/storage/nfs/upload", "UPID:pve1:0004:imgcopy")

        result = await dispatcher.dispatch(
            "upload_backup",
            {
                "storage": "nfs",
                "backup_id": "nfs:backup/vzdump-qemu-100.vma.zst",
                "file_path": str(archive),
                "node_name": "pve1",
            },
        )

        assert result.success, result.error
        assert result.payload["node"] == "pve1"
        assert result.payload["task"] == "UPID:pve1:0004:imgcopy"
        assert result.payload["message"] == "Backup upload initiated"

        request = stub_api.requests[-1]
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="content"' in request.content
        assert b"backup" in request.content
        assert b'filename="vzdump-qemu-100.vma.zst"' in request.content
        assert self.ARCHIVE in request.content

    @pytest.mark.asyncio
    async def test_fans_out_until_accepted(self, dispatcher: Dispatcher, stub_api, archive: Path) -> None:
        stub_api.add("GET", "nodes", NODES)
        stub_api.add("POST", "nodes/pve1/storage/nfs/upload", status=500, text="storage not available")
        stub_api.add("POST", "nodes/pve2/storage/nfs/upload", "UPID:pve2:0005:imgcopy")

        result = await dispatcher.dispatch(
            "upload_backup",
            {"storage": "nfs", "backup_id": "vzdump-qemu-100.vma.zst", "file_path": str(archive)},
        )

        assert result.payload["node"] == "pve2"
        uploads = [r for r in stub_api.requests if r.method == "POST"]
        assert len(uploads) == 2
        # The file is sent whole on every attempt
        assert all(self.ARCHIVE in r.content for r in uploads)

    @pytest.mark.asyncio
    async def test_unreadable_file(self, dispatcher: Dispatcher, stub_api, tmp_path: Path) -> None:
        result = await dispatcher.dispatch(
            "upload_backup",
            {
                "storage": "nfs",
                "backup_id": "vzdump-qemu-100.vma.zst",
                "file_path": str(tmp_path / "missing.vma.zst"),
            },
        )

        assert result.kind is ErrorKind.INVALID_PARAMETER
        assert "file_path parameter must be a readable file" in result.error
        assert stub_api.call_count == 0

    @pytest.mark.asyncio
    async def test_file_path_required(self, dispatcher: Dispatcher, stub_api) -> None:
        result = await dispatcher.dispatch(
            "upload_backup", {"storage": "nfs", "backup_id": "vzdump-qemu-100.vma.zst"}
        )

        assert result.kind is ErrorKind.MISSING_PARAMETER
        assert stub_api.call_count == 0
