"""HTTP routes for services, staff, clients and appointments.

Listing and reading need only a valid token; update and delete are
checked against ownership by the stores.
"""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from .extensions import db
from .routes import json_payload
from .security import current_identity
from .stores import AppointmentStore, ClientStore, ServiceStore, StaffStore

bp_catalog = Blueprint("catalog", __name__)


# --- Services ---


@bp_catalog.get("/services")
def list_services():
    """Return every service ordered by name.
    ---
    tags:
      - Services
    responses:
      200:
        description: List of services
      401:
        description: Missing or invalid token
    """
    current_identity()
    services = ServiceStore(db.session).list()
    return jsonify([service.to_dict() for service in services]), 200


@bp_catalog.post("/services")
def create_service():
    """Create a service owned by the caller.
    ---
    tags:
      - Services
    parameters:
      - in: body
        name: body
        required: true
        schema:
          properties:
            name:
              type: string
            durationMinutes:
              type: integer
              minimum: 1
            priceCents:
              type: integer
              minimum: 0
    responses:
      201:
        description: Service created
      400:
        description: Missing or invalid field
    """
    caller = current_identity()
    service = ServiceStore(db.session).create(json_payload(), caller.id)
    return jsonify(service.to_dict()), 201


@bp_catalog.get("/services/<service_id>")
def get_service(service_id: str):
    current_identity()
    return jsonify(ServiceStore(db.session).get(service_id).to_dict()), 200


@bp_catalog.put("/services/<service_id>")
def update_service(service_id: str):
    caller = current_identity()
    service = ServiceStore(db.session).update(service_id, json_payload(), caller)
    return jsonify(service.to_dict()), 200


@bp_catalog.delete("/services/<service_id>")
def delete_service(service_id: str):
    """Delete a service that no appointment uses.
    ---
    tags:
      - Services
    responses:
      200:
        description: Service deleted
      400:
        description: The service still has appointments
      403:
        description: Caller neither owns the service nor is an admin
      404:
        description: Service not found
    """
    ServiceStore(db.session).delete(service_id, current_identity())
    return jsonify({"success": True}), 200


# --- Staff ---


@bp_catalog.get("/staff")
def list_staff():
    current_identity()
    members = StaffStore(db.session).list()
    return jsonify([member.to_dict() for member in members]), 200


@bp_catalog.post("/staff")
def create_staff():
    """Create a staff member owned by the caller.
    ---
    tags:
      - Staff
    parameters:
      - in: body
        name: body
        required: true
        schema:
          properties:
            name:
              type: string
            color:
              type: string
            specialties:
              type: array
              items:
                type: string
    responses:
      201:
        description: Staff member created
      400:
        description: Missing name
    """
    caller = current_identity()
    member = StaffStore(db.session).create(json_payload(), caller.id)
    return jsonify(member.to_dict()), 201


@bp_catalog.get("/staff/<staff_id>")
def get_staff(staff_id: str):
    current_identity()
    return jsonify(StaffStore(db.session).get(staff_id).to_dict()), 200


@bp_catalog.put("/staff/<staff_id>")
def update_staff(staff_id: str):
    caller = current_identity()
    member = StaffStore(db.session).update(staff_id, json_payload(), caller)
    return jsonify(member.to_dict()), 200


@bp_catalog.delete("/staff/<staff_id>")
def delete_staff(staff_id: str):
    StaffStore(db.session).delete(staff_id, current_identity())
    return jsonify({"success": True}), 200


# --- Clients ---


@bp_catalog.get("/clients")
def list_clients():
    current_identity()
    clients = ClientStore(db.session).list()
    return jsonify([client.to_dict() for client in clients]), 200


@bp_catalog.post("/clients")
def create_client():
    caller = current_identity()
    client = ClientStore(db.session).create(json_payload(), caller.id)
    return jsonify(client.to_dict()), 201


@bp_catalog.get("/clients/<client_id>")
def get_client(client_id: str):
    current_identity()
    return jsonify(ClientStore(db.session).get(client_id).to_dict()), 200


@bp_catalog.put("/clients/<client_id>")
def update_client(client_id: str):
    """Overwrite a client. Omitted email or notes are cleared.
    ---
    tags:
      - Clients
    responses:
      200:
        description: Client updated
      400:
        description: Missing name or phone
      403:
        description: Caller neither owns the client nor is an admin
      404:
        description: Client not found
    """
    caller = current_identity()
    client = ClientStore(db.session).update(client_id, json_payload(), caller)
    return jsonify(client.to_dict()), 200


@bp_catalog.delete("/clients/<client_id>")
def delete_client(client_id: str):
    ClientStore(db.session).delete(client_id, current_identity())
    return jsonify({"success": True}), 200


# --- Appointments ---


@bp_catalog.get("/appointments")
def list_appointments():
    """List appointments, optionally for a single day.
    ---
    tags:
      - Appointments
    parameters:
      - name: date
        in: query
        type: string
        format: date
        description: Only appointments on this day (YYYY-MM-DD), ordered by time
    responses:
      200:
        description: Appointments ordered by date and time
      400:
        description: Invalid date
    """
    current_identity()
    day = request.args.get("date") or None
    appointments = AppointmentStore(db.session).list(day)
    return jsonify([appointment.to_dict() for appointment in appointments]), 200


@bp_catalog.post("/appointments")
def create_appointment():
    """Book an appointment. Status defaults to ``pending``.
    ---
    tags:
      - Appointments
    parameters:
      - in: body
        name: body
        required: true
        schema:
          properties:
            date:
              type: string
              format: date
            time:
              type: string
              example: "10:30"
            clientId:
              type: string
            serviceId:
              type: string
            staffId:
              type: string
            status:
              type: string
              enum: [pending, confirmed, completed, cancelled]
            notes:
              type: string
    responses:
      201:
        description: Appointment created
      400:
        description: Missing field, bad date/time or unknown reference
    """
    caller = current_identity()
    appointment = AppointmentStore(db.session).create(json_payload(), caller.id)
    return jsonify(appointment.to_dict()), 201


@bp_catalog.get("/appointments/<appointment_id>")
def get_appointment(appointment_id: str):
    current_identity()
    return jsonify(AppointmentStore(db.session).get(appointment_id).to_dict()), 200


@bp_catalog.put("/appointments/<appointment_id>")
def update_appointment(appointment_id: str):
    caller = current_identity()
    appointment = AppointmentStore(db.session).update(appointment_id, json_payload(), caller)
    return jsonify(appointment.to_dict()), 200


@bp_catalog.delete("/appointments/<appointment_id>")
def delete_appointment(appointment_id: str):
    AppointmentStore(db.session).delete(appointment_id, current_identity())
    return jsonify({"success": True}), 200
