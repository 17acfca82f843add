from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, json_errors
from ..container import Container


def register(app: Flask, container: Container) -> None:
    subjects = container.subject_service

    @app.route("/asignaturas", methods=["GET"], endpoint="list_subjects")
    @json_errors("Error al obtener asignaturas")
    def list_subjects():
        return jsonify([s.to_json() for s in subjects.list_subjects()])

    @app.route("/asignatura/<id>", methods=["GET"], endpoint="get_subject")
    @json_errors("Error interno del servidor")
    def get_subject(id: str):
        return jsonify(subjects.get_subject(id).to_json())

    @app.route("/asignaturas/profesor/<id>", methods=["GET"], endpoint="subjects_by_teacher")
    @json_errors("Error al obtener asignaturas por profesor")
    def subjects_by_teacher(id: str):
        return jsonify([s.to_json() for s in subjects.list_by_teacher_id(id)])

    @app.route("/asignaturas/profesor/usuario/<usuario>", methods=["GET"], endpoint="subjects_by_teacher_username")
    @json_errors("Error al obtener asignaturas por usuario del profesor")
    def subjects_by_teacher_username(usuario: str):
        return jsonify([s.to_json() for s in subjects.list_by_teacher_username(usuario)])

    @app.route("/asignaturas/estudiante/<usuario>", methods=["GET"], endpoint="subjects_by_student")
    @json_errors("Error al obtener asignaturas por estudiante")
    def subjects_by_student(usuario: str):
        return jsonify([s.to_json() for s in subjects.list_for_student(usuario)])

    @app.route(
        "/asignatura/<id_asignatura>/<usuario_estudiante>",
        methods=["GET"],
        endpoint="subject_detail_for_student",
    )
    @json_errors("Error en el servidor.")
    def subject_detail_for_student(id_asignatura: str, usuario_estudiante: str):
        return jsonify([s.to_json() for s in subjects.detail_for_student(id_asignatura, usuario_estudiante)])

    @app.route("/insertAsignatura", methods=["POST"], endpoint="create_subject")
    @json_errors("Error al insertar la asignatura")
    def create_subject():
        data = json_body()
        created = subjects.create_subject(
            data,
            with_enrollment_session=data.get("clase_inscripcion", True) is not False,
        )
        return jsonify(
            {
                "message": "Asignatura insertada correctamente",
                "id_asignatura": created.subject_id,
                "id_clase_inscripcion": created.enrollment_session_id,
            }
        ), 200

    @app.route("/deleteAsignatura/<id_asignatura>", methods=["DELETE"], endpoint="delete_subject")
    @json_errors("Error al eliminar la asignatura")
    def delete_subject(id_asignatura: str):
        subjects.delete_subject(id_asignatura)
        return jsonify({"message": "Asignatura eliminada correctamente"}), 200
