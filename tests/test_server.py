import base64
import io
from pathlib import Path

from PIL import Image

from byteviz import server


def test_index(client):
    res = client.get("/")
    assert res.status_code == 200
    assert b'name="file"' in res.data


def test_upload_requires_file(client):
    res = client.post("/upload", data={}, content_type="multipart/form-data")
    assert res.status_code == 400
    assert res.get_json() == {"error": "no file provided"}


def test_upload_reports_size(upload):
    res = upload(b"\x00\x01abc", name="../weird name.bin")
    assert res.status_code == 200
    # the client name is not kept; the single slot is what gets analyzed
    assert res.get_json() == {"filename": "uploaded_file", "size": 5}


def test_upload_without_selected_file_keeps_previous(client, upload):
    upload(b"real content")
    res = upload(b"", name="")
    assert res.status_code == 400
    assert res.get_json() == {"error": "no file provided"}
    assert client.get("/visualize/hexdump.txt").data == b"72 65 61 6c 20 63 6f 6e 74 65 6e 74  | real content\n"


def test_upload_too_large(app, upload):
    app.config["MAX_CONTENT_LENGTH"] = 64
    res = upload(b"x" * 1024)
    assert res.status_code == 413
    assert "too large" in res.get_json()["error"]


def test_visualize_without_upload(client):
    for url in ("/visualize", "/visualize/raster.png", "/visualize/hexdump.txt", "/analyze"):
        res = client.get(url)
        assert res.status_code == 404, url
        assert res.get_json() == {"error": "no file uploaded"}


def test_visualize_page(client, upload):
    upload(b"<b>&\x00")
    res = client.get("/visualize")
    assert res.status_code == 200
    assert res.mimetype == "text/html"
    assert b"data:image/png;base64," in res.data
    # printable markup bytes are escaped inside <pre>
    assert b"3c 62 3e 26 00  | &lt;b&gt;&amp;." in res.data


def test_visualize_empty_upload(client, upload):
    upload(b"")
    res = client.get("/visualize")
    assert res.status_code == 200
    assert client.get("/visualize/hexdump.txt").data == b""


def test_raster_png(app, client, upload):
    app.config.update(RASTER_WIDTH=4, RASTER_HEIGHT=2)
    upload(b"A\x01")
    res = client.get("/visualize/raster.png")
    assert res.status_code == 200
    assert res.mimetype == "image/png"
    with Image.open(io.BytesIO(res.data)) as im:
        assert im.size == (4, 2)
        im = im.convert("RGBA")
        assert im.getpixel((0, 0)) == (0, 255, 0, 255)
        assert im.getpixel((1, 0)) == (0, 0, 0, 255)
        assert im.getpixel((3, 1)) == (0, 0, 0, 255)


def test_hexdump_text(client, upload):
    upload(b"\x41\x00\x7e\x7f")
    res = client.get("/visualize/hexdump.txt")
    assert res.mimetype == "text/plain"
    assert res.get_data(as_text=True) == "41 00 7e 7f  | A.~.\n"


def test_analyze_runs_plugins(client, upload):
    upload(b"hello\x00" * 3)
    res = client.post("/analyze")
    assert res.status_code == 200
    body = res.get_json()
    assert body["size"] == 18
    assert body["filename"] == "uploaded_file"
    assert "mime" in body

    raster = body["plugins"]["byte_raster_visualizer"]
    assert raster["cells"] == {"printable": 15, "nonprintable": 3, "unset": 256 * 256 - 18}
    assert raster["truncated"] is False
    assert base64.b64decode(raster["png"]).startswith(b"\x89PNG")

    dump = body["plugins"]["hex_dump_viewer"]
    assert dump["rows"] == 2
    assert dump["text"].splitlines()[1] == "6f 00  | o."


def test_plugin_errors_are_reported(client, upload, monkeypatch):
    class BrokenPlugin:
        name = "broken"

        def can_handle(self, mime, path):
            return True

        def analyze(self, path):
            raise RuntimeError("boom")

    monkeypatch.setattr(server, "LOADED_PLUGINS", [BrokenPlugin()])
    upload(b"abc")
    body = client.get("/analyze").get_json()
    assert body["plugins"] == {"broken_error": "boom"}


def test_pages_ship_inside_the_package():
    package_dir = Path(server.__file__).resolve().parent
    assert Path(server.app.root_path) == package_dir
    assert (package_dir / "index.html").is_file()
    assert (package_dir / "templates" / "visualize.html").is_file()
