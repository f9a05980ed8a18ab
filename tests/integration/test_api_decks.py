"""HTTP tests for deck, flashcard and statistics endpoints."""

import pytest

API = "/api/v1"


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def deck(user, make_deck):
    return make_deck(user)


class TestDeckEndpoints:
    """Tests for /decks."""

    def test_create_and_list(self, client, user):
        response = client.post(f"{API}/decks", json={"user_id": user.id, "title": "  Verbs ", "description": "Irregular"})

        assert response.status_code == 201
        created = response.json()
        assert created["title"] == "Verbs"
        assert created["card_count"] == 0

        decks = client.get(f"{API}/decks", params={"user_id": user.id}).json()["decks"]
        assert [d["id"] for d in decks] == [created["id"]]

    def test_create_blank_title(self, client, user):
        response = client.post(f"{API}/decks", json={"user_id": user.id, "title": "   "})
        assert response.status_code == 400

    def test_create_for_unknown_user(self, client):
        assert client.post(f"{API}/decks", json={"user_id": 99, "title": "X"}).status_code == 404

    def test_get_deck(self, client, deck):
        body = client.get(f"{API}/decks/{deck.id}").json()
        assert body["title"] == "Deck"
        assert body["card_count"] == 3

    def test_update_deck(self, client, deck):
        body = client.put(f"{API}/decks/{deck.id}", json={"description": "Numbers"}).json()
        assert body["title"] == "Deck"
        assert body["description"] == "Numbers"

    def test_delete_deck(self, client, deck):
        assert client.delete(f"{API}/decks/{deck.id}").status_code == 204
        assert client.get(f"{API}/decks/{deck.id}").status_code == 404

    def test_delete_deck_drops_its_practice_sessions(self, client, deck, user, make_deck, registry):
        other = make_deck(user, title="Other")
        token = client.post(f"{API}/practice/sessions", json={"deck_id": deck.id}).json()["token"]
        other_token = client.post(f"{API}/practice/sessions", json={"deck_id": other.id}).json()["token"]

        client.delete(f"{API}/decks/{deck.id}")

        assert registry.get(token) is None
        assert registry.get(other_token) is not None
        assert client.post(f"{API}/practice/sessions/{token}/finish").status_code == 404

    def test_missing_deck(self, client):
        assert client.get(f"{API}/decks/123").status_code == 404
        assert client.delete(f"{API}/decks/123").status_code == 404


class TestDeckFlashcards:
    """Tests for cards inside a deck and their known flags."""

    def test_add_card(self, client, deck):
        response = client.post(
            f"{API}/decks/{deck.id}/flashcards",
            json={"front_text": "cuatro", "back_text": "four", "example": "Tengo cuatro gatos."},
        )

        assert response.status_code == 201
        assert response.json()["known"] is False
        assert len(client.get(f"{API}/decks/{deck.id}/flashcards").json()["flashcards"]) == 4

    def test_add_card_without_back(self, client, deck):
        response = client.post(f"{API}/decks/{deck.id}/flashcards", json={"front_text": "x", "back_text": " "})
        assert response.status_code == 400

    def test_filter_cards(self, client, deck):
        cards = client.get(f"{API}/decks/{deck.id}/flashcards").json()["flashcards"]
        client.post(f"{API}/decks/{deck.id}/flashcards/{cards[0]['id']}/toggle-known")

        visible = client.get(f"{API}/decks/{deck.id}/flashcards", params={"hide_known": True}).json()["flashcards"]
        matched = client.get(f"{API}/decks/{deck.id}/flashcards", params={"query": "DOS"}).json()["flashcards"]

        assert [c["front_text"] for c in visible] == ["two", "three"]
        assert [c["front_text"] for c in matched] == ["two"]

    def test_toggle_known(self, client, deck):
        card_id = client.get(f"{API}/decks/{deck.id}/flashcards").json()["flashcards"][1]["id"]
        url = f"{API}/decks/{deck.id}/flashcards/{card_id}/toggle-known"

        assert client.post(url).json()["known"] is True
        assert client.get(f"{API}/flashcards/{card_id}").json()["known"] is True
        assert client.post(url).json()["known"] is False

    def test_known_flag_for_card_of_other_deck(self, client, deck, user, make_deck):
        other = make_deck(user, title="Other")
        card_id = client.get(f"{API}/decks/{other.id}/flashcards").json()["flashcards"][0]["id"]

        response = client.put(f"{API}/decks/{deck.id}/flashcards/{card_id}/known", json={"known": True})

        assert response.status_code == 404

    def test_progress_and_reset(self, client, deck):
        cards = client.get(f"{API}/decks/{deck.id}/flashcards").json()["flashcards"]
        for card in cards[:2]:
            client.put(f"{API}/decks/{deck.id}/flashcards/{card['id']}/known", json={"known": True})

        progress = client.get(f"{API}/decks/{deck.id}/progress").json()
        assert progress == {"deck_id": deck.id, "deck_size": 3, "known_count": 2, "percent": 67}

        reset = client.post(f"{API}/decks/{deck.id}/reset-progress").json()
        assert reset == {"deck_id": deck.id, "cleared_count": 2}
        assert client.get(f"{API}/decks/{deck.id}/progress").json()["percent"] == 0

    def test_reset_unknown_deck(self, client):
        assert client.post(f"{API}/decks/77/reset-progress").status_code == 404


class TestFlashcardEndpoints:
    """Tests for /flashcards/{id}."""

    @pytest.fixture
    def card_id(self, client, deck):
        return client.get(f"{API}/decks/{deck.id}/flashcards").json()["flashcards"][0]["id"]

    def test_update_keeps_omitted_fields(self, client, card_id):
        body = client.put(f"{API}/flashcards/{card_id}", json={"back_text": "one (es)"}).json()
        assert body["front_text"] == "one"
        assert body["back_text"] == "one (es)"

    def test_update_clears_example(self, client, card_id):
        client.put(f"{API}/flashcards/{card_id}", json={"example": "Uno y dos."})
        body = client.put(f"{API}/flashcards/{card_id}", json={"example": ""}).json()
        assert body["example"] is None

    def test_delete(self, client, card_id):
        assert client.delete(f"{API}/flashcards/{card_id}").status_code == 204
        assert client.get(f"{API}/flashcards/{card_id}").status_code == 404


class TestStatsEndpoints:
    """Tests for /stats."""

    def test_aggregates_include_idle_decks(self, client, user, deck, make_deck):
        idle = make_deck(user, title="Idle")
        token = client.post(
            f"{API}/practice/sessions", json={"deck_id": deck.id, "count": 2, "random_order": False}
        ).json()["token"]
        client.post(f"{API}/practice/sessions/{token}/know")
        client.post(f"{API}/practice/sessions/{token}/hard")
        client.post(f"{API}/practice/sessions/{token}/finish")

        aggregates = client.get(f"{API}/stats/decks", params={"user_id": user.id}).json()["aggregates"]
        by_deck = {agg["deck_id"]: agg for agg in aggregates}

        assert by_deck[deck.id]["sessions_today"] == 1
        assert by_deck[deck.id]["viewed_all"] == 2
        assert by_deck[deck.id]["hard_all"] == 1
        assert by_deck[idle.id]["sessions_all"] == 0

    def test_daily_for_unknown_deck(self, client):
        assert client.get(f"{API}/stats/decks/5/daily").status_code == 404
