from unittest.mock import MagicMock, patch

import pytest
from requests.exceptions import ConnectionError

from solarclock.hap import ContactSensorState
from solarclock.integrations.home_assistant import ContactSensorMirror, HomeAssistantClient
from solarclock.utils.exceptions import HomeAssistantClientError


def mock_response(status_code: int, payload: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = b"{}" if payload is not None else b""
    response.json.return_value = payload or {}
    return response


class TestHomeAssistantClient:
    @pytest.fixture
    def client(self) -> HomeAssistantClient:
        return HomeAssistantClient(url="http://hass.local:8123/", token="secret")

    def test_set_entity(self, client: HomeAssistantClient) -> None:
        with patch(
            "solarclock.integrations.home_assistant.requests.request",
            return_value=mock_response(201, {"entity_id": "binary_sensor.porch"}),
        ) as request:
            created = client.set_entity("binary_sensor.porch", "on", {"friendly_name": "Porch"})

        assert created is True
        kwargs = request.call_args.kwargs
        assert kwargs["url"] == "http://hass.local:8123/api/states/binary_sensor.porch"
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["json"] == {"state": "on", "attributes": {"friendly_name": "Porch"}}
        assert kwargs["timeout"] == 5

    def test_set_entity_updated(self, client: HomeAssistantClient) -> None:
        with patch(
            "solarclock.integrations.home_assistant.requests.request",
            return_value=mock_response(200, {}),
        ):
            assert client.set_entity("binary_sensor.porch", "off", {}) is False

    @pytest.mark.parametrize("status_code", [400, 401, 500])
    def test_set_entity_failure(self, client: HomeAssistantClient, status_code: int) -> None:
        with patch(
            "solarclock.integrations.home_assistant.requests.request",
            return_value=mock_response(status_code),
        ):
            with pytest.raises(HomeAssistantClientError):
                client.set_entity("binary_sensor.porch", "on", {})

    def test_network_error(self, client: HomeAssistantClient) -> None:
        with patch(
            "solarclock.integrations.home_assistant.requests.request",
            side_effect=ConnectionError("refused"),
        ):
            with pytest.raises(HomeAssistantClientError):
                client.set_entity("binary_sensor.porch", "on", {})


class TestContactSensorMirror:
    def test_entity_id(self) -> None:
        mirror = ContactSensorMirror("Front Porch", client=MagicMock())
        assert mirror.entity_id == "binary_sensor.front_porch"

    def test_mirrors_contact_state(self) -> None:
        client = MagicMock()
        mirror = ContactSensorMirror("Porch", client=client)

        mirror(ContactSensorState.CONTACT_NOT_DETECTED)
        mirror(ContactSensorState.CONTACT_DETECTED)

        states = [call.args[1] for call in client.set_entity.call_args_list]
        assert states == ["on", "off"]

    def test_mirror_failure_is_logged(self) -> None:
        client = MagicMock()
        client.set_entity.side_effect = HomeAssistantClientError("down")
        mirror = ContactSensorMirror("Porch", client=client)

        mirror(ContactSensorState.CONTACT_NOT_DETECTED)

        client.set_entity.assert_called_once()
