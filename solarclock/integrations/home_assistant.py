from http import HTTPMethod, HTTPStatus
from typing import Any

import requests
from requests.exceptions import JSONDecodeError, RequestException

from solarclock.config import HOME_ASSISTANT_TOKEN, HOME_ASSISTANT_URL
from solarclock.integrations.storage import AccessoryStorage
from solarclock.utils.exceptions import HomeAssistantClientError
from solarclock.utils.logging import log


class HomeAssistantClient:
    """Client for pushing entity states to the Home Assistant REST API"""

    def __init__(self, url: str = HOME_ASSISTANT_URL, token: str = HOME_ASSISTANT_TOKEN) -> None:
        self.url = url.rstrip("/")
        self.token = token

    def set_entity(self, entity_id: str, state: str, attributes: dict[str, Any]) -> bool:
        """Set the state and attributes of an entity. Returns True if it was created"""
        path = f"/api/states/{entity_id}"
        body = {"state": state, "attributes": attributes}

        _, status = self.execute_request(method=HTTPMethod.POST, path=path, body=body)

        if status not in (HTTPStatus.OK, HTTPStatus.CREATED):
            raise HomeAssistantClientError(f"Failed to set state for entity {entity_id}")

        return status == HTTPStatus.CREATED

    def execute_request(
        self,
        method: HTTPMethod,
        path: str,
        body: dict | None = None,
    ) -> tuple[dict | list, int]:
        """Execute an HTTP request to the Home Assistant API"""
        url = f"{self.url}{path}"
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

        try:
            log.info("Sending request to Home Assistant", method=method, path=path, body=body)
            response = requests.request(
                method=method,
                url=url,
                headers=headers,
                json=body,
                timeout=5,
            )
            data = response.json() if response.content else {}

        except (JSONDecodeError, RequestException) as e:
            raise HomeAssistantClientError(f"Network error: {e}") from e
        if response.status_code >= 500:
            raise HomeAssistantClientError("Home Assistant server error")

        return data, response.status_code


class ContactSensorMirror:
    """Mirrors the accessory's contact sensor onto a Home Assistant binary_sensor"""

    def __init__(self, accessory_name: str, client: HomeAssistantClient | None = None) -> None:
        self.client = client or HomeAssistantClient()
        self.friendly_name = accessory_name
        self.entity_id = f"binary_sensor.{AccessoryStorage.slugify(accessory_name)}"

    def __call__(self, contact_value: int) -> None:
        state = "on" if contact_value else "off"
        try:
            self.client.set_entity(
                self.entity_id,
                state,
                {"friendly_name": self.friendly_name, "device_class": "opening"},
            )
        except HomeAssistantClientError:
            log.exception("Failed to mirror contact sensor", entity_id=self.entity_id, state=state)
