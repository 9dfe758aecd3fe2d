#server.py
import argparse
import importlib.util
import io
import logging
from flask import Flask, request, jsonify, render_template, send_from_directory, send_file
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

try:
    import magic
except ImportError:
    magic = None

from . import config
from .core import render_raster, render_hex_dump
from .encoder import encode_png, png_data_uri
from .logging_config import setup_logging
from .storage import UploadStore, UploadMissing

logger = logging.getLogger(__name__)

app = Flask(__name__, static_folder="static", static_url_path="/static")
app.config["MAX_CONTENT_LENGTH"] = config.MAX_CONTENT_LENGTH
app.config["UPLOAD_DIR"] = config.UPLOAD_DIR
app.config["RASTER_WIDTH"] = config.RASTER_WIDTH
app.config["RASTER_HEIGHT"] = config.RASTER_HEIGHT


LOADED_PLUGINS = []

def load_plugins(plugins_dir=config.PLUGINS_DIR):
    global LOADED_PLUGINS
    LOADED_PLUGINS = []
    for py in sorted(plugins_dir.glob("*.py")):
        name = py.stem
        if name.startswith("_"):
            continue
        try:
            spec = importlib.util.spec_from_file_location(f"byteviz.plugins.{name}", py)
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)

            candidates = []
            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if isinstance(attr, type) and attr_name.lower().endswith("plugin"):
                    candidates.append(attr)
            if hasattr(module, "plugin"):
                candidates.append(getattr(module, "plugin"))

            for cand in candidates:
                try:
                    inst = cand() if isinstance(cand, type) else cand

                    has_can = callable(getattr(inst, "can_handle", None))
                    has_analyze = callable(getattr(inst, "analyze", None))
                    if has_can and has_analyze:
                        LOADED_PLUGINS.append(inst)
                    else:
                        logger.warning("skipping plugin %s: has_can=%s, analyze=%s", cand, has_can, has_analyze)

                except Exception:
                    logger.exception("failed to instantiate plugin %s", cand)

        except Exception:
            logger.exception("failed to load plugin file %s", py)

    return LOADED_PLUGINS

load_plugins()

def get_store():
    return UploadStore(app.config["UPLOAD_DIR"])

def detect_mime(filepath):
    if magic:
        try:
            m = magic.Magic(mime=True)
            return m.from_file(str(filepath))
        except Exception as e:
            logger.warning("python-magic detection failed: %s", e)
    return "application/octet-stream"

def render_both(data):
    """Raster grid and hex dump for one buffer."""
    grid = render_raster(data, app.config["RASTER_WIDTH"], app.config["RASTER_HEIGHT"])
    return grid, render_hex_dump(data)

@app.errorhandler(UploadMissing)
def upload_missing(e):
    return jsonify({"error": "no file uploaded"}), 404

@app.errorhandler(RequestEntityTooLarge)
def too_large(e):
    limit = app.config["MAX_CONTENT_LENGTH"]
    return jsonify({"error": f"file too large (limit {limit} bytes)"}), 413

@app.route("/")
def index():
    return send_from_directory(config.BASE_DIR, "index.html")

@app.route("/upload", methods=["POST"])
def upload():
    f = request.files.get("file")
    # an unselected file input still sends a part, with an empty filename
    if not f or not f.filename:
        return jsonify({"error": "no file provided"}), 400

    client_name = secure_filename(f.filename)
    store = get_store()

    try:
        size = store.save(f.stream)
    except OSError as e:
        logger.exception("failed to save upload %s", client_name)
        return jsonify({"error": f"failed to save file: {e}"}), 500

    logger.info("upload %r stored as %s", client_name, store.path.name)
    return jsonify({"filename": store.path.name, "size": size})

@app.route("/visualize")
def visualize():
    data = get_store().load()
    grid, dump = render_both(data)
    return render_template(
        "visualize.html",
        image_uri=png_data_uri(grid),
        dump=dump,
        size=len(data),
        width=grid.shape[1],
        height=grid.shape[0],
    )

@app.route("/visualize/raster.png")
def visualize_raster():
    data = get_store().load()
    grid = render_raster(data, app.config["RASTER_WIDTH"], app.config["RASTER_HEIGHT"])
    return send_file(io.BytesIO(encode_png(grid)), mimetype="image/png", download_name="raster.png")

@app.route("/visualize/hexdump.txt")
def visualize_hexdump():
    dump = render_hex_dump(get_store().load())
    return app.response_class(dump, mimetype="text/plain; charset=utf-8")

@app.route("/analyze", methods=["GET", "POST"])
def analyze():
    store = get_store()
    size = store.size()
    path = store.path

    mime = detect_mime(path)
    response = {"filename": path.name, "mime": mime, "size": size}

    plugin_results = {}
    for plugin in LOADED_PLUGINS:
        try:
            if plugin.can_handle(mime, path):
                plugin_results[plugin.name] = plugin.analyze(path)
        except Exception as e:
            logger.exception("plugin %s failed", plugin.name)
            plugin_results[f"{plugin.name}_error"] = str(e)

    if plugin_results:
        response["plugins"] = plugin_results

    return jsonify(response)

def main(argv=None):
    parser = argparse.ArgumentParser(description="ByteViz: upload a file, see its bytes")
    parser.add_argument("--host", default=config.HOST)
    parser.add_argument("--port", type=int, default=config.PORT)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.debug else logging.INFO)
    logger.info("Starting ByteViz server on %s:%d", args.host, args.port)
    logger.info("Loaded plugins: %s", [p.name for p in LOADED_PLUGINS])
    if magic is None:
        logger.warning("python-magic not usable (libmagic missing?). MIME types will be reported as application/octet-stream.")
    app.run(host=args.host, port=args.port, debug=args.debug)

if __name__ == "__main__":
    main()
