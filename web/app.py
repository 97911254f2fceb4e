"""Flask JSON API for the fleet reminder dashboard."""

import os
from pathlib import Path
from typing import Optional, Union

from flask import Flask, abort, jsonify, request

# Add parent directory to path for fleet imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from fleet import (
    FileRegistry,
    FleetService,
    FleetStore,
    InvalidDataFileError,
    InvalidDateError,
    NotificationNotFoundError,
    RegistrySnapshot,
    SnapshotUnavailableError,
    Vehicle,
    VehicleNotFoundError,
    classify,
    parse_date,
)
from fleet.logging_config import configure_logging

# Default data directory (relative to project root)
DATA_DIR = Path(os.environ.get("FLEET_DATA_DIR", Path(__file__).parent.parent / "data"))


def reminder_status_json(vehicle: Vehicle, today=None) -> list:
    """Reminders with their current urgency band, in list order."""
    rows = []
    for index, reminder in enumerate(vehicle.reminders):
        result = classify(reminder.date, today)
        rows.append({
            "index": index,
            "name": reminder.name,
            "kind": reminder.kind.value,
            "date": reminder.date,
            "enabled": reminder.enabled,
            "notes": reminder.notes,
            "daysUntilDue": result.days_until_due,
            "status": result.status.key,
        })
    return rows


def vehicle_json(vehicle: Vehicle, today=None) -> dict:
    return {
        "id": vehicle.id,
        "make": vehicle.make,
        "model": vehicle.model,
        "year": vehicle.year,
        "mileage": vehicle.mileage,
        "reminders": reminder_status_json(vehicle, today),
    }


def create_app(
    data_dir: Optional[Union[str, Path]] = None,
    registry_dir: Optional[Union[str, Path]] = None,
) -> Flask:
    """Build the app around a store rooted at data_dir."""
    configure_logging()
    data_dir = Path(data_dir or DATA_DIR)
    registry_dir = Path(
        registry_dir or os.environ.get("FLEET_REGISTRY_DIR", data_dir / "registry")
    )

    app = Flask(__name__)
    app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
    service = FleetService(FleetStore(data_dir), FileRegistry(registry_dir))
    app.config["FLEET_SERVICE"] = service

    def requested_today():
        value = request.args.get("today")
        if not value:
            return None
        today = parse_date(value)
        if today is None:
            abort(400, description=f"invalid today: {value!r} (expected YYYY-MM-DD)")
        return today

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({"error": error.description}), 400

    @app.errorhandler(VehicleNotFoundError)
    @app.errorhandler(NotificationNotFoundError)
    def not_found(error):
        return jsonify({"error": str(error)}), 404

    @app.errorhandler(SnapshotUnavailableError)
    def no_snapshot(error):
        return jsonify({"error": str(error)}), 404

    @app.errorhandler(InvalidDateError)
    def invalid_date(error):
        return jsonify({"error": str(error)}), 400

    @app.errorhandler(InvalidDataFileError)
    def invalid_data_file(error):
        app.logger.error("%s", error)
        return jsonify({"error": str(error)}), 500

    @app.route("/api/vehicles")
    def list_vehicles():
        today = requested_today()
        return jsonify([vehicle_json(v, today) for v in service.store.list_vehicles()])

    @app.route("/api/vehicles/<vehicle_id>")
    def get_vehicle(vehicle_id: str):
        return jsonify(vehicle_json(service.store.get_vehicle(vehicle_id), requested_today()))

    @app.route("/api/vehicles/<vehicle_id>/registry-sync", methods=["POST"])
    def registry_sync(vehicle_id: str):
        """Apply a posted registry payload, or look one up in the registry."""
        payload = request.get_json(silent=True)
        if payload is not None and not isinstance(payload, dict):
            return jsonify({"error": "Snapshot must be a JSON object"}), 400
        # An empty object is an explicit snapshot with no information
        snapshot = RegistrySnapshot.from_dict(payload) if payload is not None else None
        dry_run = request.args.get("dryRun", "").lower() == "true"

        result = service.sync_vehicle(vehicle_id, snapshot=snapshot, dry_run=dry_run)
        return jsonify({
            "success": True,
            "changed": result.changed,
            "changes": [
                {"field": c.field, "oldValue": c.old_value, "newValue": c.new_value}
                for c in result.changes
            ],
            "vehicle": vehicle_json(result.after),
        })

    @app.route("/api/vehicles/<vehicle_id>/reminders/<int:index>", methods=["PUT"])
    def edit_reminder(vehicle_id: str, index: int):
        """Update date, enabled and/or notes of one reminder; omitted keys are kept."""
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({"error": "Body must be a JSON object"}), 400
        enabled = payload.get("enabled")
        notes = (payload["notes"] or "") if "notes" in payload else None
        if enabled is not None and not isinstance(enabled, bool):
            return jsonify({"error": "enabled must be true or false"}), 400
        today = requested_today()

        try:
            result = service.edit_reminder(
                vehicle_id,
                index,
                due_date=payload.get("date"),
                enabled=enabled,
                notes=notes,
            )
        except IndexError as e:
            return jsonify({"error": str(e)}), 404
        return jsonify({
            "changed": result.changed,
            "vehicle": vehicle_json(result.after, today),
        })

    @app.route("/api/dashboard/summary")
    def dashboard_summary():
        summary = service.summary(requested_today())
        return jsonify({
            "expired": summary.expired,
            "expiringSoon": summary.expiring_soon,
            "dueWithinWeek": summary.due_within_week,
            "valid": summary.valid,
            "unknown": summary.unknown,
            "total": summary.total,
        })

    @app.route("/api/notifications")
    def list_notifications():
        unread_only = request.args.get("unreadOnly", "").lower() == "true"
        return jsonify([n.to_dict() for n in service.feed(unread_only=unread_only)])

    @app.route("/api/notifications/generate", methods=["POST"])
    def generate_notifications():
        result = service.generate_notifications(today=requested_today())
        return jsonify({
            "success": True,
            "notificationsCreated": len(result.inserted),
            "notifications": [n.to_dict() for n in result.inserted],
        })

    @app.route("/api/notifications/read-all", methods=["PUT"])
    def read_all_notifications():
        count = service.store.mark_all_read()
        return jsonify({"message": "All notifications marked as read", "updated": count})

    @app.route("/api/notifications/<int:notification_id>/read", methods=["PUT"])
    def read_notification(notification_id: int):
        return jsonify(service.store.mark_read(notification_id).to_dict())

    @app.route("/api/notifications/<int:notification_id>/dismiss", methods=["PUT"])
    def dismiss_notification(notification_id: int):
        return jsonify(service.store.dismiss(notification_id).to_dict())

    return app


app = create_app()


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
