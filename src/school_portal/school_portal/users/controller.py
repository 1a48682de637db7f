from __future__ import annotations

import logging

from flask import Flask, jsonify, redirect, request, session

from ..access.guard import current_session, store_session
from ..access.resolver import landing_path
from ..core.constants import LOGIN_PATH
from ..core.exceptions import AuthenticationError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def _payload() -> dict:
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        s = current_session()
        if s is not None:
            return redirect(landing_path(s.context))

        if request.method == "GET":
            return jsonify({"success": False, "message": "Silakan masuk terlebih dahulu"}), 401

        data = _payload()
        try:
            s = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except AuthenticationError as e:
            return jsonify({"success": False, "message": str(e)}), 401
        except Exception:
            logger.exception("Login failed unexpectedly")
            return jsonify({"success": False, "message": "Kesalahan sistem saat masuk"}), 500

        store_session(s)
        session.permanent = bool(data.get("remember_me"))
        logger.info("User %s signed in as %s", s.uid, s.role.value)
        return redirect(landing_path(s.context))

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        return redirect(LOGIN_PATH)

    @app.route("/healthz", endpoint="healthz")
    def healthz():
        return jsonify({"status": "ok"})

    @app.route("/admin", endpoint="admin_landing")
    @app.route("/staff", endpoint="staff_landing")
    def landing():
        s = current_session()
        return jsonify(
            {
                "uid": s.uid,
                "display_name": s.display_name,
                "role": s.role.value,
                "duties": sorted(d.value for d in s.duties),
            }
        )

    @app.route("/api/me", endpoint="me")
    def me():
        s = current_session()
        profile = container.auth_service.profile(s)
        if profile is None:
            session.clear()
            return redirect(LOGIN_PATH)
        return jsonify(
            {
                "uid": profile.uid,
                "role": profile.role.value,
                "display_name": profile.display_name,
                "email": profile.email,
                "duties": sorted(d.value for d in profile.duties),
                "assigned_subjects": list(profile.assigned_subjects),
                "notifications_enabled": profile.has_push_token,
            }
        )

    @app.route("/api/push-token", methods=["POST", "DELETE"], endpoint="push_token")
    def push_token():
        s = current_session()
        try:
            if request.method == "DELETE":
                container.user_service.clear_push_token(s)
                return jsonify({"success": True, "message": "Notifikasi dinonaktifkan"})

            data = _payload()
            container.user_service.register_push_token(s, data.get("token", ""))
            return jsonify({"success": True, "message": "Notifikasi diaktifkan"})
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Push token update failed for %s", s.uid)
            return jsonify({"success": False, "message": "Gagal menyimpan token notifikasi"}), 500
