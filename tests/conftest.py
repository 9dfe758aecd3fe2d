import io

import pytest

from byteviz import server


@pytest.fixture
def app(tmp_path):
    old = dict(server.app.config)
    server.app.config.update(TESTING=True, UPLOAD_DIR=tmp_path / "uploads")
    yield server.app
    server.app.config.clear()
    server.app.config.update(old)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upload(client):
    def _upload(payload: bytes, name="sample.bin"):
        return client.post(
            "/upload",
            data={"file": (io.BytesIO(payload), name)},
            content_type="multipart/form-data",
        )
    return _upload
