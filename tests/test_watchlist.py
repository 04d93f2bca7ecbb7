"""API tests for the watchlist endpoints."""
from reliefhub.models import WatchlistEntry


def test_watchlist_requires_session(client) -> None:
    assert client.get("/api/watchlist").status_code == 401
    assert client.post("/api/watchlist/1").status_code == 401
    assert client.delete("/api/watchlist/1").status_code == 401


def test_add_and_list(client, alice, bob, create_resource) -> None:
    first = create_resource(alice, title="First")
    second = create_resource(alice, title="Second")

    assert client.post(f"/api/watchlist/{second['id']}", headers=bob).status_code == 201
    response = client.post(f"/api/watchlist/{first['id']}", headers=bob)
    assert response.status_code == 201
    assert response.get_json() == {"message": "Added to watchlist"}

    watched = client.get("/api/watchlist", headers=bob).get_json()
    # insertion order, not resource order
    assert [r["id"] for r in watched] == [second["id"], first["id"]]
    assert all(r["isWatched"] is True for r in watched)

    assert client.get("/api/watchlist", headers=alice).get_json() == []


def test_add_missing_resource_is_not_found(client, alice) -> None:
    response = client.post("/api/watchlist/999", headers=alice)
    assert response.status_code == 404
    assert WatchlistEntry.query.count() == 0


def test_duplicate_add_is_rejected(client, alice, create_resource) -> None:
    resource = create_resource(alice)
    assert client.post(f"/api/watchlist/{resource['id']}", headers=alice).status_code == 201

    response = client.post(f"/api/watchlist/{resource['id']}", headers=alice)
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "CONFLICT"
    assert WatchlistEntry.query.count() == 1


def test_remove(client, alice, create_resource) -> None:
    resource = create_resource(alice)
    client.post(f"/api/watchlist/{resource['id']}", headers=alice)

    response = client.delete(f"/api/watchlist/{resource['id']}", headers=alice)
    assert response.status_code == 204
    assert client.get("/api/watchlist", headers=alice).get_json() == []


def test_remove_missing_entry_is_idempotent(client, alice) -> None:
    response = client.delete("/api/watchlist/12345", headers=alice)
    assert response.status_code == 204


def test_deleted_resource_drops_out_of_watchlist(client, alice, bob, create_resource) -> None:
    kept = create_resource(alice, title="Kept")
    doomed = create_resource(alice, title="Doomed")
    client.post(f"/api/watchlist/{doomed['id']}", headers=bob)
    client.post(f"/api/watchlist/{kept['id']}", headers=bob)

    assert client.delete(f"/api/resources/{doomed['id']}", headers=alice).status_code == 204

    response = client.get("/api/watchlist", headers=bob)
    assert response.status_code == 200
    assert [r["id"] for r in response.get_json()] == [kept["id"]]
    # the dangling entry is left in place
    assert WatchlistEntry.query.count() == 2


def test_end_to_end_sharing_scenario(client, alice, bob, create_resource) -> None:
    resource = create_resource(alice, types=["shelter"], capacity=10)

    owned = client.get("/api/resources/owned", headers=alice).get_json()
    assert [(r["id"], r["capacity"]) for r in owned] == [(resource["id"], 10)]

    patch = client.patch(f"/api/resources/{resource['id']}", json={"title": "Taken"}, headers=bob)
    assert patch.status_code == 403

    assert client.post(f"/api/watchlist/{resource['id']}", headers=bob).status_code == 201
    [watched] = client.get("/api/watchlist", headers=bob).get_json()
    assert watched["id"] == resource["id"]
    assert watched["isWatched"] is True

    assert client.delete(f"/api/resources/{resource['id']}", headers=alice).status_code == 204
    assert client.get("/api/watchlist", headers=bob).get_json() == []
