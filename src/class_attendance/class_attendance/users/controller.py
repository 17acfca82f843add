from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, json_errors
from ..container import Container


def _pick(data: dict, *keys: str):
    # the admin client posts usuario_estudiante/contrasena_estudiante, newer ones usuario/contrasena
    for key in keys:
        if data.get(key) is not None:
            return data.get(key)
    return None


def register(app: Flask, container: Container) -> None:
    @app.route("/estudiantes", methods=["GET"], endpoint="list_students")
    @json_errors("Error al obtener estudiantes")
    def list_students():
        return jsonify([s.to_json() for s in container.account_service.list_students()])

    @app.route("/profesores", methods=["GET"], endpoint="list_teachers")
    @json_errors("Error al obtener profesores")
    def list_teachers():
        return jsonify([t.to_json() for t in container.account_service.list_teachers()])

    @app.route("/estudiantes/usuario/<usuario>", methods=["GET"], endpoint="student_by_username")
    @json_errors("Error al obtener estudiante por usuario")
    def student_by_username(usuario: str):
        return jsonify([container.account_service.get_student(usuario).to_json()])

    @app.route("/profesores/usuario/<usuario>", methods=["GET"], endpoint="teacher_by_username")
    @json_errors("Error al obtener profesor por usuario")
    def teacher_by_username(usuario: str):
        return jsonify([container.account_service.get_teacher(usuario).to_json()])

    @app.route("/insertar-estudiante", methods=["POST"], endpoint="create_student")
    @json_errors("Error al insertar estudiante")
    def create_student():
        data = json_body()
        new_id = container.account_service.create_student(
            username=_pick(data, "usuario", "usuario_estudiante"),
            password=_pick(data, "contrasena", "contrasena_estudiante"),
        )
        return jsonify({"message": "Estudiante insertado correctamente", "id": new_id}), 200

    @app.route("/insertar-profesor", methods=["POST"], endpoint="create_teacher")
    @json_errors("Error al insertar profesor")
    def create_teacher():
        data = json_body()
        new_id = container.account_service.create_teacher(
            username=_pick(data, "usuario", "usuario_profesor"),
            password=_pick(data, "contrasena", "contrasena_profesor"),
        )
        return jsonify({"message": "Profesor insertado correctamente", "id": new_id}), 200

    @app.route("/ingreso", methods=["POST"], endpoint="login")
    @json_errors("Error al iniciar sesión")
    def login():
        data = json_body()
        context = container.auth_service.authenticate(
            str(data.get("usuario") or ""),
            str(data.get("contrasena") or ""),
        )
        return jsonify(context.to_json()), 200
