# tests/test_cli.py
# PURPOSE: the `task list` command against a mocked HTTP transport.

import json
import logging

import httpx
import pytest

from todo_cli.api import ApiClient
from todo_cli.config import CliConfigError, load_config
from todo_cli.main import main

PAGE = {
    "items": [
        {
            "id": 1,
            "title": "Laundry",
            "description": "Do the laundry",
            "completed": False,
            "date_created": "2024-05-01T10:30:00",
            "date_modified": None,
        },
        {
            "id": 2,
            "title": "Dishes",
            "description": "Do the dishes",
            "completed": True,
            "date_created": "2024-05-02T08:00:00",
            "date_modified": "2024-05-02T09:00:00",
        },
    ],
    "page_index": 0,
    "page_size": 10,
    "total_count": 2,
}


@pytest.fixture()
def ini(tmp_path):
    path = tmp_path / "task.ini"
    path.write_text("[task]\napikey = abc123\nhost = http://api.test\n", encoding="utf-8")
    return path


def _transport(seen: list, status: int = 200, body=PAGE):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status, content=json.dumps(body), headers={"Content-Type": "application/json"})

    return httpx.MockTransport(handler)


def test_load_config_with_section(ini):
    cfg = load_config(ini)
    assert cfg.api_key == "abc123"
    assert cfg.host == "http://api.test"


def test_load_config_without_section_uses_default_host(tmp_path):
    path = tmp_path / "task.ini"
    path.write_text("apikey = k\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.api_key == "k"
    assert cfg.host == "http://localhost:3000"


def test_load_config_errors(tmp_path):
    with pytest.raises(CliConfigError):
        load_config(tmp_path / "missing.ini")
    empty = tmp_path / "task.ini"
    empty.write_text("[task]\nhost = http://x\n", encoding="utf-8")
    with pytest.raises(CliConfigError):
        load_config(empty)


def test_client_sends_key_and_page():
    seen = []
    with ApiClient("secret", "http://api.test", transport=_transport(seen)) as client:
        result = client.list(3)

    assert seen[0].headers["X-Api-Key"] == "secret"
    assert seen[0].url.path == "/v1/todos"
    assert seen[0].url.params["page"] == "3"
    assert result.total_count == 2
    assert [t.title for t in result.items] == ["Laundry", "Dishes"]


def test_list_prints_tasks(ini, capsys, caplog):
    seen = []
    with caplog.at_level(logging.INFO):
        code = main(["--config", str(ini), "list", "--page", "0"], transport=_transport(seen))

    assert code == 0
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 2
    assert "Laundry" in out[0] and "2024-05-01 10:30" in out[0]
    assert out[1].startswith("[x]")
    assert "Retrieved 2 of 2 tasks" in caplog.text
    assert str(seen[0].url).startswith("http://api.test/v1/todos")


def test_non_2xx_exits_with_1(ini, caplog):
    transport = _transport([], status=401, body={"message": "invalid"})
    with caplog.at_level(logging.ERROR):
        code = main(["--config", str(ini), "list"], transport=transport)
    assert code == 1
    assert "status 401" in caplog.text


def test_transport_error_exits_with_1(ini):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    code = main(["--config", str(ini), "list"], transport=httpx.MockTransport(handler))
    assert code == 1


def test_missing_config_exits_with_1(tmp_path):
    assert main(["--config", str(tmp_path / "nope.ini"), "list"]) == 1


def test_negative_page_exits_with_1(ini):
    assert main(["--config", str(ini), "list", "--page", "-1"]) == 1
