from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

from qrforge.core.db import SessionLocal
from qrforge.core.history import add_record, list_history
from qrforge.models.history import QRHistory


def _add(db, device, i):
    return add_record(db, device, f"https://site{i}.com", f"http://testserver/qr-images/{i}.png")


def test_add_and_list_newest_first(db):
    for i in range(3):
        _add(db, "dev-a", i)
    rows = list_history(db, "dev-a")
    assert [r.data for r in rows] == ["https://site2.com", "https://site1.com", "https://site0.com"]
    assert rows[0].to_dict()["image_url"] == "http://testserver/qr-images/2.png"
    assert rows[0].to_dict()["created_at"]


def test_prune_keeps_ten_most_recent(db):
    for i in range(11):
        _add(db, "dev-a", i)
    rows = list_history(db, "dev-a")
    assert len(rows) == 10
    assert [r.data for r in rows] == [f"https://site{i}.com" for i in range(10, 0, -1)]
    assert db.query(QRHistory).filter(QRHistory.device_id == "dev-a").count() == 10


def test_prune_is_per_device(db):
    for i in range(12):
        _add(db, "dev-a", i)
    _add(db, "dev-b", 99)
    assert len(list_history(db, "dev-a")) == 10
    assert [r.data for r in list_history(db, "dev-b")] == ["https://site99.com"]


def test_custom_limit(db):
    for i in range(5):
        add_record(db, "dev-c", f"t{i}", "u", limit=2)
    assert [r.data for r in list_history(db, "dev-c", limit=50)] == ["t4", "t3"]


def test_concurrent_inserts_same_device_never_exceed_limit():
    def worker(i):
        with SessionLocal() as session:
            _add(session, "dev-race", i)

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(worker, range(20)))

    with SessionLocal() as session:
        assert session.query(QRHistory).filter(QRHistory.device_id == "dev-race").count() == 10


def test_created_at_is_serialized_as_utc():
    naive = QRHistory(device_id="d", data="x", image_url="u", created_at=datetime(2024, 5, 1, 12, 0))
    assert naive.to_dict()["created_at"] == "2024-05-01T12:00:00+00:00"

    aware = QRHistory(
        device_id="d", data="x", image_url="u",
        created_at=datetime(2024, 5, 1, 14, 0, tzinfo=timezone(timedelta(hours=2))),
    )
    assert aware.to_dict()["created_at"] == "2024-05-01T12:00:00+00:00"
