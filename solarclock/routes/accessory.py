from http import HTTPStatus
from typing import TYPE_CHECKING, cast

from flask import Blueprint, Response, current_app, jsonify, request

from solarclock.utils.exceptions import CharacteristicNotFoundError, PersistenceError
from solarclock.utils.logging import log

if TYPE_CHECKING:
    from solarclock.app import SolarClockFlask

accessory_routes = Blueprint("accessory", __name__)


def _app() -> "SolarClockFlask":
    return cast("SolarClockFlask", current_app)


@accessory_routes.get("/health")
def health() -> tuple[Response, int]:
    redis_healthy = _app().redis_client.check_health()
    status = HTTPStatus.OK if redis_healthy else HTTPStatus.SERVICE_UNAVAILABLE

    return jsonify({"redis": redis_healthy}), status


@accessory_routes.get("/accessory")
def get_accessory() -> tuple[Response, int]:
    accessory = _app().accessory

    return jsonify(
        {
            "name": accessory.name,
            "services": [service.to_dict() for service in accessory.get_services()],
        }
    ), HTTPStatus.OK


@accessory_routes.get("/accessory/next-occurrence")
def get_next_occurrence() -> tuple[Response, int]:
    scheduler = _app().accessory.scheduler
    occurrence = scheduler.next_occurrence

    return jsonify(
        {
            "period": scheduler.period.name,
            "offset": scheduler.config.offset,
            "enabled": scheduler.config.enabled,
            "sensor_state": scheduler.sensor_state,
            "run_time": occurrence.run_time.isoformat() if occurrence else None,
        }
    ), HTTPStatus.OK


@accessory_routes.put("/accessory/<service_name>/<characteristic_name>")
def set_characteristic(service_name: str, characteristic_name: str) -> tuple[Response, int]:
    request_body = request.get_json(silent=True) or {}
    if "value" not in request_body:
        return jsonify({"status": "failure", "error": "Missing `value`"}), HTTPStatus.BAD_REQUEST

    try:
        service = _app().accessory.find_service(service_name)
        characteristic = service.find_characteristic(characteristic_name)
    except CharacteristicNotFoundError as e:
        return jsonify({"status": "failure", "error": str(e)}), HTTPStatus.NOT_FOUND

    log.info(
        "Handling characteristic set request",
        service=service_name,
        characteristic=characteristic_name,
        value=request_body["value"],
    )
    error = characteristic.handle_set(request_body["value"])

    if error is None:
        return jsonify({"status": "success", "value": characteristic.value}), HTTPStatus.OK

    log.warning(
        "Characteristic set request rejected",
        service=service_name,
        characteristic=characteristic_name,
        error=str(error),
    )
    if isinstance(error, PersistenceError):
        status = HTTPStatus.SERVICE_UNAVAILABLE
    elif isinstance(error, PermissionError):
        status = HTTPStatus.METHOD_NOT_ALLOWED
    else:
        status = HTTPStatus.BAD_REQUEST

    response = {"status": "failure", "error": str(error), "value": characteristic.value}
    return jsonify(response), status


@accessory_routes.post("/accessory/identify")
def identify() -> tuple[Response, int]:
    outcome: list[Exception | None] = []
    _app().accessory.identify(outcome.append)

    return jsonify({"status": "success"}), HTTPStatus.OK
