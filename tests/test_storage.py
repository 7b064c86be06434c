import pytest

import qrforge.routers.qr as qr_router
from qrforge.core.errors import CollaboratorError
from qrforge.core.storage import LocalBlobStorage, get_storage, new_image_name
from qrforge.main import app


def test_new_image_name_shape():
    name = new_image_name()
    assert name.startswith("qr_") and name.endswith(".png")
    assert new_image_name() != name


def test_upload_writes_file_and_returns_public_url(tmp_path):
    storage = LocalBlobStorage(root=tmp_path, base_url="http://cdn.local/")
    url = storage.upload("qr_1_abc.png", b"png-bytes")
    assert url == "http://cdn.local/qr-images/qr_1_abc.png"
    assert (tmp_path / "qr_1_abc.png").read_bytes() == b"png-bytes"


def test_upload_refuses_overwrite(tmp_path):
    storage = LocalBlobStorage(root=tmp_path)
    storage.upload("a.png", b"1")
    with pytest.raises(CollaboratorError):
        storage.upload("a.png", b"2")


@pytest.mark.parametrize("name", ["../escape.png", "nested/a.png"])
def test_upload_rejects_paths(tmp_path, name):
    with pytest.raises(CollaboratorError):
        LocalBlobStorage(root=tmp_path).upload(name, b"x")


def test_upload_into_unwritable_root(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_bytes(b"")
    with pytest.raises(CollaboratorError):
        LocalBlobStorage(root=blocker).upload("a.png", b"x")


# ---------------------------------------------------------------------------
# Collaborator failures surface as 500 through /generate
# ---------------------------------------------------------------------------

class _BrokenStorage(LocalBlobStorage):
    def upload(self, name, data, content_type="image/png"):
        raise CollaboratorError("bucket unavailable")


def test_generate_upload_failure_is_500(client):
    app.dependency_overrides[get_storage] = lambda: _BrokenStorage()
    try:
        r = client.post("/generate", data={"data": "example.com", "device_id": "d1"})
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 500
    assert r.json() == {"error": "bucket unavailable"}
    assert client.get("/history", params={"device_id": "d1"}).json()["history"] == []


def test_generate_history_failure_is_500_and_keeps_blob(client, monkeypatch, tmp_path):
    storage = LocalBlobStorage(root=tmp_path, base_url="http://testserver")
    app.dependency_overrides[get_storage] = lambda: storage

    def broken_add(*args, **kwargs):
        raise CollaboratorError("History update failed: db down")

    monkeypatch.setattr(qr_router, "add_record", broken_add)
    try:
        r = client.post("/generate", data={"data": "example.com", "device_id": "d2"})
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 500
    assert r.json() == {"error": "History update failed: db down"}
    # no compensating delete: the uploaded image is left behind
    assert len(list(tmp_path.glob("qr_*.png"))) == 1
