from __future__ import annotations

from flask import Flask, abort, jsonify, request

from ..container import Container
from ..core.exceptions import ValidationError
from .model import InboundEvent


def register(app: Flask, container: Container) -> None:
    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/webhook", methods=["GET"], endpoint="webhook_verify")
    def webhook_verify():
        # Channel subscription handshake.
        mode = request.args.get("hub.mode")
        token = request.args.get("hub.verify_token")
        challenge = request.args.get("hub.challenge", "")
        expected = app.config.get("WEBHOOK_VERIFY_TOKEN")
        if mode == "subscribe" and expected and token == expected:
            return challenge, 200
        abort(403)

    @app.route("/webhook/messages", methods=["POST"], endpoint="webhook_messages")
    def webhook_messages():
        payload = request.get_json(silent=True)
        try:
            event = InboundEvent.from_payload(payload)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400

        messages = container.message_router.handle(event)
        return jsonify({"messages": [m.to_dict() for m in messages]})
