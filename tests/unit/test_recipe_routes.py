from __future__ import annotations

SCONES = {
    "title": "Scones",
    "ingredients": ["225g self-raising flour", "55g butter", "150ml milk"],
    "instructions": ["Rub butter into flour", "Add milk", "Bake at 220C for 12 minutes"],
    "notes": "Gran's card",
    "user_name": "alice",
}


class TestGetRecipes:
    def test_requires_user_name(self, client, recipe_repo) -> None:
        response = client.get("/api/getrecipes", params={"user_name": ""})
        assert response.status_code == 401
        assert response.json() == {"error": "User not authenticated"}
        assert recipe_repo.calls == []

    def test_lists_own_recipes(self, client, recipe_repo) -> None:
        recipe_repo.seed(**SCONES)
        recipe_repo.seed(**{**SCONES, "title": "Bread", "user_name": "bob"})

        response = client.get("/api/getrecipes", params={"user_name": "alice"})

        assert response.status_code == 200
        assert [recipe["title"] for recipe in response.json()] == ["Scones"]


class TestSaveRecipe:
    def test_saves_recipe(self, client, recipe_repo) -> None:
        response = client.post("/api/saverecipe", json=SCONES)

        assert response.status_code == 200
        saved = response.json()
        assert saved["title"] == "Scones"
        assert saved["ingredients"] == SCONES["ingredients"]
        assert saved["notes"] == "Gran's card"

    def test_notes_default_to_empty(self, client, recipe_repo) -> None:
        payload = {key: value for key, value in SCONES.items() if key != "notes"}
        response = client.post("/api/saverecipe", json=payload)
        assert response.status_code == 200
        assert recipe_repo.rows[0]["notes"] == ""

    def test_empty_lists_allowed(self, client) -> None:
        response = client.post("/api/saverecipe", json={**SCONES, "ingredients": [], "instructions": []})
        assert response.status_code == 200

    def test_missing_title(self, client, recipe_repo) -> None:
        response = client.post("/api/saverecipe", json={**SCONES, "title": ""})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}
        assert recipe_repo.calls == []

    def test_missing_ingredients(self, client, recipe_repo) -> None:
        payload = {key: value for key, value in SCONES.items() if key != "ingredients"}
        response = client.post("/api/saverecipe", json=payload)
        assert response.status_code == 400
        assert recipe_repo.calls == []


class TestDeleteRecipe:
    def test_deletes_own_recipe(self, client, recipe_repo) -> None:
        row = recipe_repo.seed(**SCONES)
        response = client.request("DELETE", "/api/deleterecipe", json={"recipe_id": row["id"], "user_name": "alice"})
        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert recipe_repo.rows == []

    def test_unknown_recipe(self, client) -> None:
        response = client.request("DELETE", "/api/deleterecipe", json={"recipe_id": 999, "user_name": "alice"})
        assert response.status_code == 404
        assert response.json() == {"error": "Recipe not found"}

    def test_missing_user(self, client, recipe_repo) -> None:
        response = client.request("DELETE", "/api/deleterecipe", json={"recipe_id": 1})
        assert response.status_code == 400
        assert recipe_repo.calls == []

    def test_wrong_method(self, client) -> None:
        response = client.get("/api/deleterecipe")
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}
