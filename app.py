import logging

from flask import Flask, jsonify, request

from tinydb import TinyDB, Query
from tinydb.storages import MemoryStorage

from zkp.groth16.proving import FixedConstantProof, FixedConstantProver
from zkp.groth16.setup import TrustedSetup, generate_trusted_setup
from zkp.groth16.verifying import CurveEqualityCheck, FixedConstantVerifier
from zkp.snark.errors import InvalidInput, ZKProofError
from zkp.snark.field import CURVE_ORDER, FieldProvider

from snark_routes import snark_bp, init_snark_bp

DEFAULT_CONFIG = {
    "SECRET_KEY": "key",
    "DB_PATH": "db.json",       # None -> MemoryStorage
    "FIELD_MODULUS": CURVE_ORDER,
    "HASH_LABEL": "zkp-snark",
    "PROOF_DEBUG": False,
    "LOG_LEVEL": "INFO",
}

Grothes = Query()


def open_db(path):
    if path is None:
        return TinyDB(storage=MemoryStorage)  # Memory DB
    return TinyDB(path)                       # Storage DB


def create_app(config=None):
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG)
    if config:
        app.config.from_mapping(config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db = open_db(app.config["DB_PATH"])
    app.extensions["tinydb"] = db
    groth_db = db.table("groth")

    init_snark_bp(db.table("snark"))
    app.register_blueprint(snark_bp)

    def get_field():
        return FieldProvider(modulus=app.config["FIELD_MODULUS"])

    def update_groth(type_name, value):
        groth_db.upsert({"type": type_name, "value": value}, Grothes.type == type_name)

    def select_groth(type_name):
        row = groth_db.search(Grothes.type == type_name)
        if row == []:
            return None
        return row[0]['value']

    def load_setup():
        saved = select_groth("setup")
        if saved is None:
            raise InvalidInput("Trusted setup not found. Run /groth/setup first.")
        return TrustedSetup.from_dict(saved)

    def request_json():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise InvalidInput("Request body must be a JSON object")
        return data

    @app.errorhandler(ZKProofError)
    def handle_zkp_error(exc):
        return jsonify({"error": str(exc), "kind": type(exc).__name__}), 400

    ## Fixed-constant (legacy Groth16) Related Routes ##

    @app.route("/groth/setup", methods=["POST"])
    def groth_setup():
        setup = generate_trusted_setup()
        update_groth("setup", setup.to_dict())
        groth_db.remove(Grothes.type == "proof")
        return jsonify(setup.to_dict())

    @app.route("/groth/proof/generate", methods=["POST"])
    def groth_generate():
        data = request_json()
        proof = FixedConstantProver(load_setup(), get_field()).generate(data.get("witnesses"))
        update_groth("proof", proof.to_dict())
        return jsonify(proof.to_dict())

    @app.route("/groth/proof/verify", methods=["POST"])
    def groth_verify():
        data = request_json()
        proof_data = data.get("proof") or select_groth("proof")
        if proof_data is None:
            raise InvalidInput("Proof not found. Generate a proof first.")
        try:
            proof = FixedConstantProof.from_dict(proof_data)
        except InvalidInput:
            return jsonify({"valid": False})
        verifier = FixedConstantVerifier(load_setup(), get_field())
        return jsonify({"valid": verifier.verify(proof, data.get("witnesses"))})

    @app.route("/groth/pairing/check", methods=["POST"])
    def groth_pairing_check():
        data = request_json()
        checker = CurveEqualityCheck(get_field())
        return jsonify({"valid": checker.check(data.get("proof") or {}, data.get("vk") or {})})

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
