# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from bizcard.interfaces.http.auth_gate import AuthGate, current_identity
from bizcard.interfaces.http.dto.auth import ProtectedDTO


class ProtectedController:
    def __init__(self, *, auth_gate: AuthGate) -> None:
        self._auth_gate = auth_gate

    def protected(self) -> tuple[Response, int]:
        identity = current_identity()
        payload = ProtectedDTO(
            message="This is a protected route", identity=identity.user_id
        ).model_dump()
        return jsonify(payload), 200

    def profile(self) -> tuple[Response, int]:
        identity = current_identity()
        return (
            jsonify(
                {
                    "identity": identity.user_id,
                    "issued_at": identity.issued_at.isoformat(),
                    "expires_at": identity.expires_at.isoformat(),
                }
            ),
            200,
        )

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("protected", __name__)
        bp.add_url_rule(
            "/protected", view_func=self._auth_gate(self.protected), methods=["GET"]
        )
        bp.add_url_rule(
            "/profile",
            endpoint="profile",
            view_func=self._auth_gate(self.profile),
            methods=["GET"],
        )
        return bp
