from conftest import auth


async def test_public_menu_needs_no_session(client, sign_in):
    token = await sign_in("owner@x.com")
    rid = (await client.post("/restaurants", json={"name": "Spice Route", "location": "Main St 1"}, headers=auth(token))).json()["id"]
    mains = (await client.post(f"/restaurants/{rid}/categories", json={"name": "Mains"}, headers=auth(token))).json()["id"]
    drinks = (await client.post(f"/restaurants/{rid}/categories", json={"name": "Drinks"}, headers=auth(token))).json()["id"]
    await client.post(
        f"/restaurants/{rid}/dishes",
        json={"name": "Dal", "description": "Lentils", "price": 99.5, "spice_level": 1, "category_ids": [mains]},
        headers=auth(token),
    )
    await client.post(
        f"/restaurants/{rid}/dishes",
        json={"name": "Lassi", "description": "Yoghurt drink", "category_ids": [drinks, mains]},
        headers=auth(token),
    )
    # never shown: belongs to no category
    await client.post(f"/restaurants/{rid}/dishes", json={"name": "Hidden", "description": "x"}, headers=auth(token))

    r = await client.get(f"/public/restaurants/{rid}/menu")
    assert r.status_code == 200
    menu = r.json()
    assert menu["restaurant"] == {"id": rid, "name": "Spice Route", "location": "Main St 1"}
    assert [c["name"] for c in menu["categories"]] == ["Drinks", "Mains"]

    drinks_cat, mains_cat = menu["categories"]
    assert [d["name"] for d in drinks_cat["dishes"]] == ["Lassi"]
    assert [d["name"] for d in mains_cat["dishes"]] == ["Dal", "Lassi"]

    dal = mains_cat["dishes"][0]
    assert dal["price"] == 99.5
    assert dal["spice_level"] == 1
    assert dal["is_vegetarian"] is True
    assert dal["image_url"] is None
    assert [c["name"] for c in mains_cat["dishes"][1]["categories"]] == ["Drinks", "Mains"]
    assert "owner_id" not in menu["restaurant"]


async def test_public_menu_unknown_restaurant(client):
    r = await client.get("/public/restaurants/12345/menu")
    assert r.status_code == 404
    assert r.json()["error_code"] == "restaurant_not_found"


async def test_health(client):
    assert (await client.get("/health")).json() == {"status": "ok"}
