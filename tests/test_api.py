import hashlib

import pytest


def sha256_hash(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def create(client, value):
    return client.post("/strings", json={"value": value})


class TestCreateString:
    def test_create_string_success(self, client):
        resp = create(client, "madam")
        assert resp.status_code == 201
        data = resp.json()
        assert set(data) == {"id", "value", "properties", "created_at"}
        assert data["id"] == sha256_hash("madam")
        props = data["properties"]
        assert props["length"] == 5
        assert props["is_palindrome"] is True
        assert props["word_count"] == 1
        assert props["unique_characters"] == 3
        assert props["character_frequency_map"] == {"m": 2, "a": 2, "d": 1}

    def test_duplicate_conflict(self, client):
        assert create(client, "hello world").status_code == 201
        resp = create(client, "hello world")
        assert resp.status_code == 409
        assert resp.json() == {"error": "Conflict: String already exists"}

    def test_missing_value(self, client):
        resp = client.post("/strings", json={})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Bad request: Missing value field"}

    def test_empty_value(self, client):
        assert create(client, "").status_code == 400

    @pytest.mark.parametrize("value", [[], {}])
    def test_empty_container_value_is_not_a_string(self, client, value):
        resp = create(client, value)
        assert resp.status_code == 422
        assert "must be a string" in resp.json()["error"]

    @pytest.mark.parametrize("value", [None, 0, False])
    def test_falsy_value_is_missing(self, client, value):
        resp = create(client, value)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Bad request: Missing value field"}

    def test_invalid_json(self, client):
        resp = client.post("/strings", content=b"{not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400

    def test_non_string_value(self, client):
        resp = create(client, 123)
        assert resp.status_code == 422
        assert "must be a string" in resp.json()["error"]


class TestGetAndDelete:
    def test_get_specific_string(self, client):
        create(client, "Able was I ere I saw Elba")
        resp = client.get("/strings/Able was I ere I saw Elba")
        assert resp.status_code == 200
        data = resp.json()
        assert data["value"] == "Able was I ere I saw Elba"
        assert data["properties"]["is_palindrome"] is True

    def test_get_missing(self, client):
        resp = client.get("/strings/nothing")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Not found: String does not exist."}

    def test_delete_string(self, client):
        create(client, "todelete")
        resp = client.delete("/strings/todelete")
        assert resp.status_code == 204
        assert client.get("/strings/todelete").status_code == 404
        assert client.delete("/strings/todelete").status_code == 404


class TestListStrings:
    def setup_strings(self, client):
        for value in ["madam", "hello world", "level", "racecar car"]:
            assert create(client, value).status_code == 201

    def test_no_filters(self, client):
        self.setup_strings(client)
        data = client.get("/strings").json()
        assert data["count"] == 4
        assert [item["value"] for item in data["data"]] == ["madam", "hello world", "level", "racecar car"]
        assert data["filters_applied"] == {}

    def test_palindrome_and_word_count(self, client):
        self.setup_strings(client)
        resp = client.get("/strings", params={"is_palindrome": "true", "word_count": "1"})
        assert resp.status_code == 200
        data = resp.json()
        assert [item["value"] for item in data["data"]] == ["madam", "level"]
        assert data["count"] == 2
        assert data["filters_applied"] == {"is_palindrome": "true", "word_count": "1"}

    def test_invalid_bound_is_ignored(self, client):
        self.setup_strings(client)
        data = client.get("/strings", params={"min_length": "abc"}).json()
        assert data["count"] == 4
        assert data["filters_applied"] == {"min_length": "abc"}

    def test_contains_character(self, client):
        self.setup_strings(client)
        data = client.get("/strings", params={"contains_character": "w"}).json()
        assert [item["value"] for item in data["data"]] == ["hello world"]

    def test_repeated_character_is_ignored(self, client):
        self.setup_strings(client)
        data = client.get("/strings?contains_character=w&contains_character=z").json()
        assert data["count"] == 4
        assert data["filters_applied"] == {"contains_character": ["w", "z"]}


class TestNaturalLanguageFilter:
    def test_single_word_palindromes(self, client):
        for value in ["mom", "noon", "notpal", "race car"]:
            create(client, value)
        resp = client.get("/strings/filter-by-natural-language", params={"query": "all single word palindromic strings"})
        assert resp.status_code == 200
        data = resp.json()
        assert [item["value"] for item in data["data"]] == ["mom", "noon"]
        assert data["count"] == 2
        assert data["interpreted_query"] == {
            "original": "all single word palindromic strings",
            "parsed_filters": {"is_palindrome": True, "word_count": 1},
        }

    def test_longer_than(self, client):
        for value in ["short", "much longer"]:
            create(client, value)
        data = client.get("/strings/filter-by-natural-language", params={"query": "strings longer than 5 characters"}).json()
        assert [item["value"] for item in data["data"]] == ["much longer"]
        assert data["interpreted_query"]["parsed_filters"] == {"min_length": 6}

    def test_unparseable_query(self, client):
        resp = client.get("/strings/filter-by-natural-language", params={"query": "gibberish with no patterns"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Bad request: Unable to parse natural language query"}

    def test_repeated_query_is_rejected(self, client):
        create(client, "racecar")
        resp = client.get("/strings/filter-by-natural-language?query=palindromes&query=palindromic")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Bad request: Missing or invalid query parameter"}

    def test_missing_query(self, client):
        resp = client.get("/strings/filter-by-natural-language")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Bad request: Missing or invalid query parameter"}

    def test_no_matches_is_not_an_error(self, client):
        create(client, "hello")
        data = client.get("/strings/filter-by-natural-language", params={"query": "strings containing the letter z"}).json()
        assert data["count"] == 0
        assert data["data"] == []


class TestServiceEndpoints:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_root(self, client):
        assert client.get("/").json()["message"] == "String Analyzer Service"
