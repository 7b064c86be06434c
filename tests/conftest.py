"""
Shared fixtures: isolated SQLite database and image directory per test run,
a TestClient bound to the app, and in-memory logo images.
"""
import os
import tempfile
from io import BytesIO

import pytest

# Must be set before qrforge is imported: settings are read at import time.
_TMP = tempfile.mkdtemp(prefix="qrforge-tests-")
os.environ["DATA_SAVE_DIR"] = _TMP
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["QR_SAVE_DIR"] = os.path.join(_TMP, "qr")
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient  # noqa: E402
from PIL import Image  # noqa: E402

from qrforge.core.db import Base, SessionLocal, engine  # noqa: E402
from qrforge.main import app  # noqa: E402
from qrforge.models.history import QRHistory  # noqa: E402

Base.metadata.create_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_history():
    with SessionLocal() as db:
        db.query(QRHistory).delete()
        db.commit()
    yield


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def image_bytes(size=(120, 120), color=(200, 30, 30, 255), mode="RGBA", fmt="PNG") -> bytes:
    img = Image.new(mode, size, color)
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def square_logo() -> bytes:
    return image_bytes()


@pytest.fixture
def wide_transparent_logo() -> bytes:
    """200x50 logo: opaque bar in the middle, transparent everywhere else."""
    img = Image.new("RGBA", (200, 50), (0, 0, 0, 0))
    img.paste((10, 120, 220, 255), (20, 10, 180, 40))
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def oversized_logo() -> bytes:
    return image_bytes(size=(3000, 2000), color=(0, 128, 0), mode="RGB", fmt="JPEG")
