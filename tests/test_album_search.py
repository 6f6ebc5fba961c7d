import pytest


@pytest.fixture
async def catalogue(create_artist, create_genre, create_album):
    """Three artists, two genres and five albums spread over four decades."""
    beatles = await create_artist("The Beatles")
    davis = await create_artist("Miles Davis")
    radiohead = await create_artist("Radiohead")
    rock = await create_genre("Rock")
    jazz = await create_genre("Jazz")

    await create_album("Abbey Road", beatles["id"], release_date="1969-09-26", genre_ids=[rock["id"]])
    await create_album("Let It Be", beatles["id"], release_date="1970-05-08", genre_ids=[rock["id"]])
    await create_album("Kind of Blue", davis["id"], release_date="1959-08-17", genre_ids=[jazz["id"]])
    await create_album("Bitches Brew", davis["id"], release_date="1970-03-30", genre_ids=[jazz["id"], rock["id"]])
    await create_album("OK Computer", radiohead["id"], release_date=None, genre_ids=[rock["id"]])

    return {"rock": rock, "jazz": jazz}


def titles(response):
    assert response.status_code == 200, response.text
    return [album["title"] for album in response.json()["content"]]


async def test_search_by_title(client, catalogue):
    response = await client.get("/api/albums/search", params={"q": "abbey"})

    assert titles(response) == ["Abbey Road"]


async def test_search_by_artist_name(client, catalogue):
    response = await client.get("/api/albums/search", params={"q": "BEATLES"})

    assert titles(response) == ["Abbey Road", "Let It Be"]


async def test_search_title_filter_ignores_artist(client, catalogue):
    response = await client.get("/api/albums/search", params={"title": "beatles"})

    assert titles(response) == []


async def test_search_no_results(client, catalogue):
    response = await client.get("/api/albums/search", params={"q": "xyznonexistent"})

    body = response.json()
    assert body["content"] == []
    assert body["page"]["total_elements"] == 0


async def test_search_without_criteria_returns_everything(client, catalogue):
    response = await client.get("/api/albums/search", params={"q": "  "})

    assert response.json()["page"]["total_elements"] == 5


async def test_search_year_range_is_inclusive(client, catalogue):
    response = await client.get("/api/albums/search", params={"start_year": 1969, "end_year": 1970})

    assert titles(response) == ["Abbey Road", "Let It Be", "Bitches Brew"]


async def test_search_open_ended_years(client, catalogue):
    response = await client.get("/api/albums/search", params={"end_year": 1969})
    assert titles(response) == ["Abbey Road", "Kind of Blue"]

    response = await client.get("/api/albums/search", params={"start_year": 1970})
    assert titles(response) == ["Let It Be", "Bitches Brew"]


async def test_search_start_after_end_is_rejected(client, catalogue):
    response = await client.get("/api/albums/search", params={"start_year": 1980, "end_year": 1970})

    assert response.status_code == 400
    assert "must not be after" in response.json()["message"]


async def test_search_by_genre(client, catalogue):
    response = await client.get("/api/albums/search", params={"genre_id": catalogue["jazz"]["id"]})

    assert titles(response) == ["Kind of Blue", "Bitches Brew"]


async def test_search_combines_criteria(client, catalogue):
    params = {"q": "miles", "start_year": 1970, "genre_id": catalogue["rock"]["id"]}

    response = await client.get("/api/albums/search", params=params)

    assert titles(response) == ["Bitches Brew"]


async def test_search_genre_filter_counts_each_album_once(client, catalogue):
    response = await client.get(
        "/api/albums/search",
        params={"genre_id": catalogue["rock"]["id"], "size": 2, "sort": "title,asc"},
    )

    body = response.json()
    assert [album["title"] for album in body["content"]] == ["Abbey Road", "Bitches Brew"]
    assert body["page"]["total_elements"] == 4
    assert body["page"]["total_pages"] == 2


async def test_search_treats_wildcards_literally(client, create_artist, create_album):
    artist = await create_artist("Various Artists")
    await create_album("100% Hits", artist["id"])
    await create_album("Summer_Mix", artist["id"])
    await create_album("Summer Mix", artist["id"])

    assert titles(await client.get("/api/albums/search", params={"q": "%"})) == ["100% Hits"]
    assert titles(await client.get("/api/albums/search", params={"title": "r_m"})) == ["Summer_Mix"]


async def test_search_rejects_invalid_year(client):
    response = await client.get("/api/albums/search", params={"start_year": 0})

    assert response.status_code == 400


async def test_search_ignores_non_ascii_case(client, create_artist, create_album):
    artist = await create_artist("Mötley Crüe")
    await create_album("Dr. Feelgood", artist["id"])
    await create_album("ÉTÉ INDIEN", artist["id"])

    assert titles(await client.get("/api/albums/search", params={"q": "MÖTLEY"})) == ["Dr. Feelgood", "ÉTÉ INDIEN"]
    assert titles(await client.get("/api/albums/search", params={"title": "été"})) == ["ÉTÉ INDIEN"]
