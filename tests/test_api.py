"""
Tests for the HTTP surface.

Covers:
- Response shapes (camelCase keys)
- Status code mapping: 400 / 404 / 409
- Caller identification through X-Forwarded-For
"""
import socket

from fastapi import status
from fastapi.testclient import TestClient

import main


def test_join_returns_player(client):
    res = client.post("/api/player/join", json={"code": 7}, headers={"X-Forwarded-For": "10.0.0.1"})

    assert res.status_code == status.HTTP_200_OK
    data = res.json()
    assert data["playerId"] == data["player"]["id"]
    player = data["player"]
    assert player["code"] == 7
    assert player["name"] == "Player 7"
    assert player["ip"] == "10.0.0.1"
    assert player["team"] == "blue"
    assert player["number"] == 4
    assert player["kills"] == 0
    assert player["health"] == 100
    assert "joinedAt" in player


def test_join_accepts_integral_float(client):
    res = client.post("/api/player/join", json={"code": 7.0})
    assert res.status_code == status.HTTP_200_OK
    assert res.json()["player"]["code"] == 7


def test_join_uses_first_forwarded_address(client):
    res = client.post(
        "/api/player/join",
        json={"code": 7},
        headers={"X-Forwarded-For": "10.0.0.1, 172.16.0.1"},
    )
    assert res.json()["player"]["ip"] == "10.0.0.1"


def test_join_invalid_code(client):
    for body in ({"code": 100}, {"code": -1}, {"code": "7"}, {"code": 3.5}, {"code": True}, {}):
        res = client.post("/api/player/join", json=body)
        assert res.status_code == status.HTTP_400_BAD_REQUEST, body


def test_join_conflicts(client, join):
    join(7, "10.0.0.1")

    res = client.post("/api/player/join", json={"code": 7}, headers={"X-Forwarded-For": "10.0.0.2"})
    assert res.status_code == status.HTTP_409_CONFLICT
    assert res.json()["detail"] == "This code is already in use. Pick another code."

    res = client.post("/api/player/join", json={"code": 8}, headers={"X-Forwarded-For": "10.0.0.1"})
    assert res.status_code == status.HTTP_409_CONFLICT

    assert len(client.get("/api/players").json()["players"]) == 1


def test_list_players(client, join):
    p1 = join(7, "10.0.0.1")
    join(3, "10.0.0.2")

    res = client.get("/api/players", headers={"X-Forwarded-For": "10.0.0.1"})

    assert res.status_code == status.HTTP_200_OK
    data = res.json()
    assert [p["code"] for p in data["players"]] == [7, 3]
    assert [p["team"] for p in data["players"]] == ["blue", "red"]
    assert data["teams"] == {
        "blue": {"name": "Blue", "color": "#0066ff", "flagsCaptured": 0},
        "red": {"name": "Red", "color": "#ff3333", "flagsCaptured": 0},
    }
    assert data["flagHolder"] is None
    assert data["myPlayerId"] == p1["playerId"]


def test_list_players_for_stranger(client, join):
    join(7, "10.0.0.1")
    res = client.get("/api/players", headers={"X-Forwarded-For": "10.9.9.9"})
    assert res.json()["myPlayerId"] is None


def test_update_player(client, join):
    pid = join(7, "10.0.0.1")["playerId"]

    res = client.post("/api/player/update", json={"playerId": pid, "kills": -2, "health": 250})

    assert res.status_code == status.HTTP_200_OK
    player = res.json()["player"]
    assert player["kills"] == 0
    assert player["health"] == 100


def test_update_unknown_player(client):
    res = client.post("/api/player/update", json={"playerId": "ghost", "kills": 1})
    assert res.status_code == status.HTTP_404_NOT_FOUND
    assert res.json()["detail"] == "Player not found"


def test_delete_player_drops_flag(client, join):
    pid = join(7, "10.0.0.1")["playerId"]
    client.post("/api/flag/obtain", json={"playerId": pid})

    res = client.delete(f"/api/player/{pid}")

    assert res.status_code == status.HTTP_200_OK
    assert res.json() == {"message": "Player removed"}
    data = client.get("/api/players").json()
    assert data["players"] == []
    assert data["flagHolder"] is None


def test_delete_unknown_player(client):
    res = client.delete("/api/player/ghost")
    assert res.status_code == status.HTTP_404_NOT_FOUND


def test_legacy_leave(client, join):
    pid = join(7, "10.0.0.1")["playerId"]
    client.post("/api/flag/obtain", json={"playerId": pid})

    res = client.post("/api/player/leave", json={"playerId": pid})

    assert res.status_code == status.HTTP_200_OK
    assert res.json() == {"message": "Player removed"}
    assert client.get("/api/players").json()["flagHolder"] is None
    events = client.get("/api/events").json()["events"]
    assert events[-1]["message"] == "Leave: Player 7 (code 7) removed from the game"

    res = client.post("/api/player/leave", json={"playerId": pid})
    assert res.status_code == status.HTTP_404_NOT_FOUND


def test_obtain_and_steal_flag(client, join):
    p1 = join(7, "10.0.0.1")["playerId"]
    p2 = join(3, "10.0.0.2")["playerId"]

    res = client.post("/api/flag/obtain", json={"playerId": p1})
    assert res.status_code == status.HTTP_200_OK
    assert res.json() == {"obtainedBy": p1, "previousHolder": None, "flagHolder": p1}

    res = client.post("/api/flag/obtain", json={"playerId": p2})
    assert res.json() == {"obtainedBy": p2, "previousHolder": p1, "flagHolder": p2}


def test_obtain_unknown_player(client):
    res = client.post("/api/flag/obtain", json={"playerId": "ghost"})
    assert res.status_code == status.HTTP_404_NOT_FOUND


def test_capture_flag(client, join):
    p1 = join(7, "10.0.0.1")["playerId"]
    p2 = join(3, "10.0.0.2")["playerId"]
    client.post("/api/flag/obtain", json={"playerId": p1})

    res = client.post("/api/flag/capture", json={"playerId": p2})
    assert res.status_code == status.HTTP_400_BAD_REQUEST
    assert res.json()["detail"] == "Player does not currently hold the flag"

    res = client.post("/api/flag/capture", json={"playerId": p1})
    assert res.status_code == status.HTTP_200_OK
    assert res.json() == {"team": "blue", "flagsCaptured": 1, "flagHolder": None}
    assert client.get("/api/players").json()["teams"]["blue"]["flagsCaptured"] == 1


def test_capture_with_corrupt_team(client, join, match):
    pid = join(7, "10.0.0.1")["playerId"]
    client.post("/api/flag/obtain", json={"playerId": pid})
    match.players[pid].team = "green"

    res = client.post("/api/flag/capture", json={"playerId": pid})
    assert res.status_code == status.HTTP_400_BAD_REQUEST
    assert res.json()["detail"] == "Player has invalid team"


def test_capture_unknown_player(client):
    res = client.post("/api/flag/capture", json={"playerId": "ghost"})
    assert res.status_code == status.HTTP_404_NOT_FOUND


def test_attack(client, join):
    p1 = join(7, "10.0.0.1")["playerId"]
    p2 = join(3, "10.0.0.2")["playerId"]

    res = client.post("/api/player/attack", json={"attackerId": p1, "targetId": p2, "damage": "huge"})

    assert res.status_code == status.HTTP_200_OK
    data = res.json()
    assert data["target"]["health"] == 90
    assert data["attacker"]["kills"] == 0
    assert data["killed"] is False
    assert data["flagHolder"] is None


def test_attack_kill_drops_flag_and_respawns(client, join):
    p1 = join(7, "10.0.0.1")["playerId"]
    p2 = join(3, "10.0.0.2")["playerId"]
    client.post("/api/flag/obtain", json={"playerId": p1})

    res = client.post("/api/player/attack", json={"attackerId": p2, "targetId": p1, "damage": 100})

    data = res.json()
    assert data["killed"] is True
    assert data["target"]["health"] == 100
    assert data["attacker"]["kills"] == 1
    assert data["flagHolder"] is None

    res = client.post("/api/flag/capture", json={"playerId": p1})
    assert res.status_code == status.HTTP_400_BAD_REQUEST


def test_attack_errors(client, join):
    p1 = join(7, "10.0.0.1")["playerId"]

    res = client.post("/api/player/attack", json={"attackerId": p1, "targetId": p1})
    assert res.status_code == status.HTTP_400_BAD_REQUEST
    assert res.json()["detail"] == "Cannot attack yourself"

    res = client.post("/api/player/attack", json={"attackerId": "ghost", "targetId": p1})
    assert res.status_code == status.HTTP_404_NOT_FOUND
    assert res.json()["detail"] == "Attacker not found"

    res = client.post("/api/player/attack", json={"attackerId": p1, "targetId": "ghost"})
    assert res.status_code == status.HTTP_404_NOT_FOUND
    assert res.json()["detail"] == "Target not found"


def test_heal(client, join):
    p1 = join(7, "10.0.0.1")["playerId"]
    p2 = join(3, "10.0.0.2")["playerId"]
    client.post("/api/player/attack", json={"attackerId": p1, "targetId": p2, "damage": 50})

    res = client.post("/api/player/heal", json={"healerId": p1, "targetId": p2})
    assert res.status_code == status.HTTP_200_OK
    assert res.json()["target"]["health"] == 70

    res = client.post("/api/player/heal", json={"targetId": p2, "amount": 500})
    assert res.json()["target"]["health"] == 100


def test_heal_errors(client, join):
    p1 = join(7, "10.0.0.1")["playerId"]

    res = client.post("/api/player/heal", json={"targetId": "ghost"})
    assert res.status_code == status.HTTP_404_NOT_FOUND

    res = client.post("/api/player/heal", json={"healerId": "ghost", "targetId": p1})
    assert res.status_code == status.HTTP_404_NOT_FOUND
    assert res.json()["detail"] == "Healer not found"


def test_change_team(client, join):
    pid = join(7, "10.0.0.1")["playerId"]

    res = client.post("/api/player/changeTeam", json={"playerId": pid, "team": "red"})
    assert res.status_code == status.HTTP_200_OK
    assert res.json()["player"]["team"] == "red"

    res = client.post("/api/player/changeTeam", json={"playerId": pid, "team": "green"})
    assert res.status_code == status.HTTP_400_BAD_REQUEST
    assert res.json()["detail"] == "Invalid team"

    res = client.post("/api/player/changeTeam", json={"playerId": "ghost", "team": "red"})
    assert res.status_code == status.HTTP_404_NOT_FOUND


def test_events(client, join):
    join(7, "10.0.0.1")

    res = client.get("/api/events")

    assert res.status_code == status.HTTP_200_OK
    events = res.json()["events"]
    assert len(events) == 1
    event = events[0]
    assert event["message"] == "Join: Player 7 (code 7) joined on blue from 10.0.0.1"
    assert set(event) == {"ts", "message", "displayTs"}
    assert len(event["displayTs"]) == len("2024-01-01 00:00:00")


def test_restart(client, join):
    p1 = join(7, "10.0.0.1")["playerId"]
    join(3, "10.0.0.2")
    client.post("/api/flag/obtain", json={"playerId": p1})
    client.post("/api/flag/capture", json={"playerId": p1})

    res = client.post("/api/restart")

    assert res.status_code == status.HTTP_200_OK
    assert res.json() == {
        "message": "Match restarted successfully",
        "players": [],
        "teams": {
            "blue": {"name": "Blue", "color": "#0066ff", "flagsCaptured": 0},
            "red": {"name": "Red", "color": "#ff3333", "flagsCaptured": 0},
        },
        "flagHolder": None,
    }
    events = client.get("/api/events").json()["events"]
    assert [e["message"] for e in events] == ["Match restarted"]
    assert join(7, "10.0.0.1")["player"]["number"] == 4


def test_status(client):
    res = client.get("/status")
    assert res.status_code == status.HTTP_200_OK
    assert res.json() == {"ok": True, "hostname": socket.gethostname()}


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_non_string_ids_are_not_found(client, join):
    join(7, "10.0.0.1")

    res = client.post("/api/player/update", json={"playerId": 123, "kills": 1})
    assert res.status_code == status.HTTP_404_NOT_FOUND

    res = client.post("/api/flag/obtain", json={"playerId": ["x"]})
    assert res.status_code == status.HTTP_404_NOT_FOUND

    res = client.post("/api/player/attack", json={"attackerId": {"id": 1}, "targetId": 2})
    assert res.status_code == status.HTTP_404_NOT_FOUND
    assert res.json()["detail"] == "Attacker not found"


def test_change_team_checks_player_before_team(client, join):
    res = client.post("/api/player/changeTeam", json={"playerId": "ghost", "team": 5})
    assert res.status_code == status.HTTP_404_NOT_FOUND

    pid = join(7, "10.0.0.1")["playerId"]
    res = client.post("/api/player/changeTeam", json={"playerId": pid, "team": 5})
    assert res.status_code == status.HTTP_400_BAD_REQUEST
    assert res.json()["detail"] == "Invalid team"


def test_startup_banner_lists_lan_addresses(monkeypatch, caplog):
    monkeypatch.setattr(main, "get_local_ips", lambda: ["192.168.1.5"])

    with caplog.at_level("INFO", logger="main"):
        with TestClient(main.app):
            pass

    assert f"http://192.168.1.5:{main.settings.port}" in caplog.text


def test_startup_banner_without_lan(monkeypatch, caplog):
    monkeypatch.setattr(main, "get_local_ips", lambda: [])

    with caplog.at_level("INFO", logger="main"):
        with TestClient(main.app):
            pass

    assert "No non-local IP found" in caplog.text
