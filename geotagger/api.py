from flask import Flask, request, jsonify, send_file
import io
import logging
from pathlib import Path
from urllib.parse import unquote

from geotagger.clearer import clear_geotag
from geotagger.coordinates import Coordinate
from geotagger.errors import GeotagError, io_error
from geotagger.geocoder import search_places
from geotagger.photos import load_photo
from geotagger.reader import read_geotag
from geotagger.services.batch_runner import start_apply_job, start_clear_job
from geotagger.services.job_store import batch_jobs, now_ts
from geotagger.writer import embed_geotag, write_geotag

app = Flask(__name__)


def _path_args(args):
    return (args["path"],)


def _write_args(args):
    return args["path"], Coordinate.from_dict(args["geotag"])


def _read(path):
    coordinate = read_geotag(path)
    return coordinate.to_dict() if coordinate else None


def _write(path, coordinate):
    write_geotag(path, coordinate)


def _clear(path):
    clear_geotag(path)


# command name -> (argument extraction, operation)
COMMANDS = {
    "read_geotag": (_path_args, _read),
    "write_geotag": (_write_args, _write),
    "clear_geotag": (_path_args, _clear),
}


def _error_response(err: GeotagError):
    return jsonify({"ok": False, "error": err.to_dict(), "message": err.describe()}), 400


@app.route("/api/invoke/<command>", methods=["POST"])
def api_invoke(command):
    entry = COMMANDS.get(command)
    if entry is None:
        return jsonify({"ok": False, "error": f"unknown command: {command}"}), 404
    parse_args, handler = entry
    data = request.get_json(silent=True) or {}
    try:
        args = parse_args(data)
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad arguments: {e}"}), 400
    try:
        result = handler(*args)
    except GeotagError as e:
        return _error_response(e)
    return jsonify({"ok": True, "result": result})


@app.route("/api/download", methods=["POST"])
def api_download():
    """Send back a geotagged copy of a JPEG; the file on disk is not modified."""
    data = request.get_json(silent=True) or {}
    try:
        path, coordinate = _write_args(data)
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad arguments: {e}"}), 400
    try:
        original = Path(path).read_bytes()
    except OSError as e:
        return _error_response(io_error(e))
    try:
        tagged = embed_geotag(original, coordinate)
    except GeotagError as e:
        return _error_response(e)
    return send_file(io.BytesIO(tagged), mimetype="image/jpeg",
                     as_attachment=True, download_name=Path(path).name)


@app.route("/api/photo", methods=["GET"])
def api_photo():
    raw = request.args.get("path")
    if not raw:
        return jsonify({"error": "path required"}), 400
    return jsonify(load_photo(unquote(raw)))


@app.route("/api/search", methods=["GET"])
def api_search():
    query = request.args.get("q", "")
    return jsonify({"results": search_places(query)})


def _paths_arg(data):
    paths = data.get("paths")
    if not paths or not isinstance(paths, list):
        return None
    return paths


@app.route("/api/apply_async", methods=["POST"])
def api_apply_async():
    data = request.get_json(silent=True) or {}
    paths = _paths_arg(data)
    geotag = data.get("geotag")
    if not paths or not geotag:
        return jsonify({"error": "paths and geotag required"}), 400
    try:
        coordinate = Coordinate.from_dict(geotag)
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"error": f"bad geotag: {e}"}), 400
    job_id = start_apply_job(paths, coordinate)
    return jsonify({"job": job_id})


@app.route("/api/clear_async", methods=["POST"])
def api_clear_async():
    paths = _paths_arg(request.get_json(silent=True) or {})
    if not paths:
        return jsonify({"error": "paths required"}), 400
    job_id = start_clear_job(paths)
    return jsonify({"job": job_id})


@app.route("/api/job_status", methods=["GET"])
@app.route("/api/apply_status", methods=["GET"])
def api_job_status():
    job_id = request.args.get("job")
    if not job_id:
        return jsonify({"error": "job id required"}), 400
    job = batch_jobs.get(job_id)
    if not job:
        return jsonify({"error": "job not found"}), 404
    total = job.get("total") or 0
    processed = job.get("processed") or 0
    response = dict(job)
    start = job.get("start_time")
    response["elapsed_seconds"] = now_ts() - start if start else None
    response["percent"] = round(processed / total * 100, 2) if total else None
    return jsonify(response)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    app.run(host="127.0.0.1", port=5000, debug=True)
