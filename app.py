"""
KZG / 폴딩 탐색기
=================

실행:
    flask --app app run
    python app.py

DB: ZKB_DB_PATH가 비어 있으면 TinyDB MemoryStorage, 아니면 해당 JSON 파일.
"""

from flask import Flask, jsonify

from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from config import Config
from kzg_routes import kzg_bp, init_kzg_bp
from folding_routes import folding_bp, init_folding_bp


def open_db(path):
    if path:
        return TinyDB(path)              # Storage DB
    return TinyDB(storage=MemoryStorage)  # Memory DB


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    db = open_db(app.config["DB_PATH"])
    app.extensions["zkblocks.db"] = db

    init_kzg_bp(db)
    init_folding_bp(db)
    app.register_blueprint(kzg_bp)
    app.register_blueprint(folding_bp)

    @app.route("/")
    def main():
        return jsonify({
            "kzg": ["/kzg/setup", "/kzg/commit", "/kzg/open", "/kzg/verify",
                    "/kzg/multi-open", "/kzg/state", "/kzg/clear"],
            "folding": ["/folding/load-example", "/folding/fold", "/folding/check",
                        "/folding/qap", "/folding/state", "/folding/clear"],
        })

    app.logger.info("DB: %s", app.config["DB_PATH"] or "memory")
    return app


app = create_app()


if __name__ == "__main__":
    app.run(debug=True)
