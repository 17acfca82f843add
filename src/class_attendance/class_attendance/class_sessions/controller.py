from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body, json_errors
from ..container import Container


def register(app: Flask, container: Container) -> None:
    sessions = container.class_session_service

    @app.route("/clases", methods=["GET"], endpoint="list_sessions")
    @json_errors("Error al obtener clases")
    def list_sessions():
        return jsonify([s.to_json() for s in sessions.list_sessions()])

    @app.route("/clases/asignatura/<id>", methods=["GET"], endpoint="sessions_by_subject")
    @json_errors("Error interno del servidor")
    def sessions_by_subject(id: str):
        return jsonify([s.to_json() for s in sessions.list_by_subject(id)])

    @app.route("/insertClase", methods=["POST"], endpoint="create_session")
    @json_errors("Error al insertar nueva clase")
    def create_session():
        data = json_body()
        created = sessions.create_session(
            subject_id=data.get("id_asignatura"),
            session_date=data.get("fecha_clase"),
            qr_payload=data.get("codigoqr_clase"),
            generate_payload=bool(data.get("generar_codigoqr")),
        )
        return jsonify(
            {
                "message": "Clase insertada correctamente",
                "id": created.session_id,
                "codigoqr_clase": created.qr_payload,
            }
        ), 201

    @app.route("/deleteClases/<id_asignatura>", methods=["DELETE"], endpoint="delete_sessions_by_subject")
    @json_errors("Error al eliminar las clases")
    def delete_sessions_by_subject(id_asignatura: str):
        deleted = sessions.delete_by_subject(id_asignatura)
        return jsonify({"message": "Clases eliminadas con éxito", "deleted": deleted}), 200

    @app.route("/getClaseInscripcion/<id_asignatura>", methods=["GET"], endpoint="enrollment_session")
    @json_errors("Error al obtener la clase")
    def enrollment_session(id_asignatura: str):
        session = sessions.get_enrollment_session(id_asignatura)
        return jsonify([{"id_clase": session.session_id}]), 200

    @app.route("/clases/fecha/<fecha>", methods=["GET"], endpoint="sessions_by_date")
    @json_errors("Error al obtener clases por fecha")
    def sessions_by_date(fecha: str):
        return jsonify([s.to_json() for s in sessions.list_by_date(fecha)])

    @app.route("/clase/codigoqr", methods=["GET"], endpoint="session_qr_payload")
    @json_errors("Error al obtener el código QR de la clase")
    def session_qr_payload():
        payload = sessions.qr_payload_for(request.args.get("id_asignatura"), request.args.get("fecha_clase"))
        return jsonify({"codigoqr_clase": payload}), 200

    @app.route("/clases/codigoQR", methods=["GET"], endpoint="session_qr_rows")
    @json_errors("Error en la consulta de la base de datos.")
    def session_qr_rows():
        rows = sessions.list_by_subject_and_date(request.args.get("id_asignatura"), request.args.get("fecha_clase"))
        return jsonify([s.to_json() for s in rows]), 200

    @app.route("/clases/<id_clase>/codigoqr.png", methods=["GET"], endpoint="session_qr_image")
    @json_errors("Error al generar el código QR")
    def session_qr_image(id_clase: str):
        return app.response_class(sessions.qr_png(id_clase), mimetype="image/png")
