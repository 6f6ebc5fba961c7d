import pytest


@pytest.fixture
async def beatles(create_artist):
    return await create_artist("The Beatles")


async def test_create_album(client, beatles, create_genre):
    rock = await create_genre("Rock")
    pop = await create_genre("Pop")

    response = await client.post(
        "/api/albums",
        json={
            "title": "Abbey Road",
            "artist_id": beatles["id"],
            "release_date": "1969-09-26",
            "genre_ids": [rock["id"], pop["id"], rock["id"]],
            "cover_image_url": "https://example.com/covers/abbey-road.jpg",
            "track_count": 17,
            "catalog_number": "PCS 7088",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Abbey Road"
    assert body["release_date"] == "1969-09-26"
    assert body["release_year"] == 1969
    assert body["track_count"] == 17
    assert body["catalog_number"] == "PCS 7088"
    assert body["artist"] == {"id": beatles["id"], "name": "The Beatles"}
    assert [genre["name"] for genre in body["genres"]] == ["Pop", "Rock"]


async def test_create_album_minimal(client, beatles):
    response = await client.post("/api/albums", json={"title": "Help!", "artist_id": beatles["id"]})

    assert response.status_code == 201
    body = response.json()
    assert body["release_date"] is None
    assert body["release_year"] is None
    assert body["genres"] == []


async def test_create_album_requires_artist(client):
    response = await client.post("/api/albums", json={"title": "Orphan"})

    assert response.status_code == 400
    assert any(error.startswith("artist_id") for error in response.json()["validation_errors"])


async def test_create_album_unknown_artist(client):
    response = await client.post("/api/albums", json={"title": "Ghost", "artist_id": 77})

    assert response.status_code == 404
    assert response.json()["message"] == "Artist with ID 77 not found"


async def test_create_album_unknown_genre(client, beatles):
    response = await client.post(
        "/api/albums",
        json={"title": "Revolver", "artist_id": beatles["id"], "genre_ids": [404]},
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Genre with ID 404 not found"
    assert (await client.get("/api/albums")).json()["page"]["total_elements"] == 0


async def test_create_album_duplicate_title(client, beatles, create_album):
    await create_album("Let It Be", beatles["id"])

    response = await client.post("/api/albums", json={"title": "let it be", "artist_id": beatles["id"]})

    assert response.status_code == 409
    assert response.json()["message"] == "Album with title 'let it be' already exists"


async def test_create_album_duplicate_catalog_number(client, beatles, create_album):
    await create_album("Rubber Soul", beatles["id"], catalog_number="PCS 3075")

    response = await client.post(
        "/api/albums",
        json={"title": "Revolver", "artist_id": beatles["id"], "catalog_number": "PCS 3075"},
    )

    assert response.status_code == 409


async def test_blank_catalog_numbers_do_not_collide(client, beatles, create_album):
    first = await create_album("Rubber Soul", beatles["id"], catalog_number="")
    second = await create_album("Revolver", beatles["id"], catalog_number="  ")

    assert first["catalog_number"] is None
    assert second["catalog_number"] is None


@pytest.mark.parametrize(
    "fields, field_name",
    [
        ({"title": ""}, "title"),
        ({"track_count": 0}, "track_count"),
        ({"genre_ids": [0]}, "genre_ids"),
        ({"artist_id": -1}, "artist_id"),
        ({"release_date": "not-a-date"}, "release_date"),
        ({"catalog_number": "c" * 101}, "catalog_number"),
    ],
)
async def test_create_album_validation(client, beatles, fields, field_name):
    payload = {"title": "Yellow Submarine", "artist_id": beatles["id"], **fields}

    response = await client.post("/api/albums", json=payload)

    assert response.status_code == 400
    errors = response.json()["validation_errors"]
    assert any(error.startswith(field_name) for error in errors), errors


async def test_get_album_not_found(client):
    response = await client.get("/api/albums/999")

    assert response.status_code == 404
    assert response.json()["message"] == "Album with ID 999 not found"


async def test_list_albums(client, beatles, create_album):
    for title in ("Please Please Me", "With the Beatles", "A Hard Day's Night"):
        await create_album(title, beatles["id"])

    response = await client.get("/api/albums", params={"sort": "title"})

    body = response.json()
    assert [album["title"] for album in body["content"]] == [
        "A Hard Day's Night",
        "Please Please Me",
        "With the Beatles",
    ]
    assert body["page"]["total_elements"] == 3


async def test_update_album_replaces_fields_and_keeps_genres(client, beatles, create_artist, create_genre, create_album):
    rock = await create_genre("Rock")
    wings = await create_artist("Wings")
    album = await create_album(
        "Band on the Run",
        beatles["id"],
        release_date="1973-12-05",
        track_count=9,
        catalog_number="PAS 10007",
        genre_ids=[rock["id"]],
    )

    response = await client.put(
        f"/api/albums/{album['id']}",
        json={"title": "Band On The Run", "artist_id": wings["id"], "release_date": "1973-12-07"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Band On The Run"
    assert body["artist"]["name"] == "Wings"
    assert body["release_date"] == "1973-12-07"
    assert body["track_count"] is None
    assert body["catalog_number"] is None
    assert [genre["name"] for genre in body["genres"]] == ["Rock"]

    albums = (await client.get(f"/api/artists/{beatles['id']}/albums")).json()
    assert albums == []


async def test_update_album_replaces_and_clears_genres(client, beatles, create_genre, create_album):
    rock = await create_genre("Rock")
    pop = await create_genre("Pop")
    album = await create_album("Sgt. Pepper", beatles["id"], genre_ids=[rock["id"]])

    response = await client.put(
        f"/api/albums/{album['id']}",
        json={"title": "Sgt. Pepper", "artist_id": beatles["id"], "genre_ids": [pop["id"]]},
    )
    assert [genre["name"] for genre in response.json()["genres"]] == ["Pop"]

    response = await client.put(
        f"/api/albums/{album['id']}",
        json={"title": "Sgt. Pepper", "artist_id": beatles["id"], "genre_ids": []},
    )
    assert response.json()["genres"] == []
    assert (await client.get(f"/api/genres/{pop['id']}/albums")).json() == []


async def test_update_album_to_taken_title(client, beatles, create_album):
    await create_album("Magical Mystery Tour", beatles["id"])
    album = await create_album("Yellow Submarine", beatles["id"])

    response = await client.put(
        f"/api/albums/{album['id']}",
        json={"title": "MAGICAL MYSTERY TOUR", "artist_id": beatles["id"]},
    )

    assert response.status_code == 409


async def test_update_album_not_found(client, beatles):
    response = await client.put("/api/albums/31", json={"title": "Nowhere", "artist_id": beatles["id"]})

    assert response.status_code == 404


async def test_delete_album(client, beatles, create_genre, create_album):
    rock = await create_genre("Rock")
    album = await create_album("Beatles for Sale", beatles["id"], genre_ids=[rock["id"]])

    response = await client.delete(f"/api/albums/{album['id']}")
    assert response.status_code == 204

    assert (await client.get(f"/api/albums/{album['id']}")).status_code == 404
    assert (await client.get(f"/api/genres/{rock['id']}")).status_code == 200
    assert (await client.get(f"/api/genres/{rock['id']}/albums")).json() == []


async def test_delete_album_not_found(client):
    response = await client.delete("/api/albums/8")

    assert response.status_code == 404


async def test_add_and_remove_genre(client, beatles, create_genre, create_album):
    rock = await create_genre("Rock")
    album = await create_album("The White Album", beatles["id"])

    response = await client.post(f"/api/albums/{album['id']}/genres/{rock['id']}")
    assert response.status_code == 200
    assert [genre["id"] for genre in response.json()["genres"]] == [rock["id"]]

    # Idempotent
    response = await client.post(f"/api/albums/{album['id']}/genres/{rock['id']}")
    assert len(response.json()["genres"]) == 1

    genre_albums = (await client.get(f"/api/genres/{rock['id']}/albums")).json()
    assert [a["title"] for a in genre_albums] == ["The White Album"]

    response = await client.delete(f"/api/albums/{album['id']}/genres/{rock['id']}")
    assert response.status_code == 200
    assert response.json()["genres"] == []
    assert (await client.get(f"/api/genres/{rock['id']}/albums")).json() == []


async def test_add_unknown_genre(client, beatles, create_album):
    album = await create_album("Past Masters", beatles["id"])

    response = await client.post(f"/api/albums/{album['id']}/genres/12")

    assert response.status_code == 404
