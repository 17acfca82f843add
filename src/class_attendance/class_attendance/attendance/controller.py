from __future__ import annotations

from flask import Flask, jsonify, request

from ..class_sessions import qr
from ..common.datetime_utils import require_iso_date
from ..common.http import json_body, json_errors
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/insertAsistencia", methods=["POST"], endpoint="record_attendance")
    @app.route("/insertarCorrecta/asistencia", methods=["POST"], endpoint="record_attendance_alias")
    @json_errors("Error al insertar la asistencia")
    def record_attendance():
        data = json_body()
        record_id = attendance.record_attendance(
            session_id=data.get("id_clase"),
            student_id=data.get("id_estudiante"),
            record_date=data.get("fecha_asistencia"),
        )
        return jsonify({"message": "Asistencia registrada exitosamente", "id_asistencia": record_id}), 201

    @app.route("/insertAsistencia/automatica", methods=["POST"], endpoint="record_attendance_automatic")
    @json_errors("Error al insertar la asistencia")
    def record_attendance_automatic():
        data = json_body()
        record_id = attendance.record_attendance_automatic(
            session_id=data.get("id_clase"),
            student_id=data.get("id_estudiante"),
            record_date=data.get("fecha_asistencia"),
        )
        return jsonify({"message": "Asistencia registrada exitosamente", "id_asistencia": record_id}), 200

    @app.route("/insert/asistencia", methods=["POST"], endpoint="record_attendance_value")
    @json_errors("Error al insertar los datos en asistencia")
    def record_attendance_value():
        data = json_body()
        record_id = attendance.record_attendance_value(
            session_id=data.get("id_clase"),
            student_id=data.get("id_estudiante"),
            record_date=data.get("fecha_asistencia"),
            present=data.get("asistencia"),
        )
        return jsonify({"message": "Datos insertados correctamente", "id_asistencia": record_id}), 201

    @app.route("/actualizar-asistencia", methods=["PUT"], endpoint="mark_attendance_present")
    @json_errors("Error al actualizar la asistencia")
    def mark_attendance_present():
        data = json_body()
        attendance.mark_present(
            session_id=data.get("idClase"),
            record_date=data.get("fechaAsistencia"),
            student_id=data.get("idEstudiante"),
        )
        return jsonify({"message": "Asistencia actualizada correctamente"}), 200

    @app.route("/asistencia/<id_estudiante>/<id_clase>", methods=["GET"], endpoint="attendance_by_student_session")
    @json_errors("Error al obtener detalle de asistencia")
    def attendance_by_student_session(id_estudiante: str, id_clase: str):
        return jsonify([r.to_json() for r in attendance.by_student_and_session(id_estudiante, id_clase)])

    @app.route("/asistencia/estudiante/<usuario>", methods=["GET"], endpoint="attendance_by_student")
    @json_errors("Error al obtener asistencia por estudiante")
    def attendance_by_student(usuario: str):
        return jsonify(list(attendance.by_student_username(usuario)))

    @app.route("/getEstudiantesAsignatura/<id_asignatura>", methods=["GET"], endpoint="subject_student_ids")
    @json_errors("Error al obtener los estudiantes")
    def subject_student_ids(id_asignatura: str):
        return jsonify([{"id_estudiante": sid} for sid in attendance.student_ids_for_subject(id_asignatura)]), 200

    @app.route("/asignaturas/<id_asignatura>/estudiantes", methods=["GET"], endpoint="subject_roster")
    @json_errors("Error en el servidor")
    def subject_roster(id_asignatura: str):
        return jsonify(list(attendance.students_for_subject(id_asignatura))), 200

    @app.route("/asignatura-clases-asistencia", methods=["GET"], endpoint="subject_sessions_attendance")
    @json_errors("Error al obtener datos")
    def subject_sessions_attendance():
        rows = attendance.subject_sessions_attendance(
            teacher_id=request.args.get("idProfesor"),
            subject_id=request.args.get("idAsignatura"),
        )
        return jsonify(list(rows))

    @app.route("/asignatura-clases-asistencia/porcentaje", methods=["GET"], endpoint="subject_attendance_percentage")
    @json_errors("Error al obtener datos")
    def subject_attendance_percentage():
        percentage = attendance.subject_percentage(
            teacher_id=request.args.get("idProfesor"),
            subject_id=request.args.get("idAsignatura"),
        )
        return jsonify({"porcentaje_asistencia": round(percentage, 2)})

    @app.route("/clases/<id_clase>/prepoblar", methods=["POST"], endpoint="prepopulate_session")
    @json_errors("Error al insertar la asistencia")
    def prepopulate_session(id_clase: str):
        created = attendance.prepopulate_session(id_clase)
        return jsonify({"message": "Asistencia automática registrada", "creados": created}), 200

    @app.route("/asistencia/verificar-qr", methods=["POST"], endpoint="verify_qr_scan")
    @json_errors("Error al verificar el código QR")
    def verify_qr_scan():
        if "imagen" in request.files:
            data = request.form.to_dict()
            scanned = qr.decode_image(request.files["imagen"].stream)
            if scanned is None:
                raise ValidationError("No se detectó un código QR en la imagen")
        else:
            data = json_body()
            scanned = data.get("codigoqr")

        day = require_iso_date(data["fecha"]) if data.get("fecha") else None
        outcome = attendance.verify_scan(
            subject_id=data.get("id_asignatura"),
            scanned_payload=scanned,
            student_id=data.get("id_estudiante"),
            student_username=data.get("usuario_estudiante"),
            day=day,
        )
        body = {"message": "Asistencia registrada exitosamente"}
        body.update(outcome.to_json())
        return jsonify(body), 200
