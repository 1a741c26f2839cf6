from conftest import TestConfig, sign_in

BASE = "/WebsiteConnection"

FORM = {
    "title": "My Portfolio",
    "link": "https://portfolio.example.com",
    "description": "Things I built",
    "gitHubLink": "https://github.com/example/portfolio",
}


def _submit(client, form=FORM, with_image=True):
    files = {"image": ("banner.png", b"banner-bytes", "image/png")} if with_image else None
    return client.post(f"{BASE}/uploadUserProgramData", data=form, files=files)


class TestSubmitConnection:
    """Website connection submission"""

    def test_submission_starts_hidden(self, client, site_owner, s3):
        sign_in(client, site_owner["email"])

        response = _submit(client)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "My Portfolio"
        assert data["gitHubLink"] == "https://github.com/example/portfolio"
        assert data["isActive"] is False
        assert data["isFeatured"] is False
        assert data["imagePath"].startswith(f"{TestConfig.CDN_URL}/WebsiteConnection/website-banners/")
        assert data["imagePath"].endswith(".png")
        assert client.get(f"{BASE}/byUser/{site_owner['id']}").json()["data"] == []
        assert client.get(f"{BASE}/active").json()["data"] == []

        key = data["imagePath"][len(TestConfig.CDN_URL) + 1:]
        assert s3.objects[("devexchange-test", key)] == {"Body": b"banner-bytes", "ContentType": "image/png"}

        file_name = key.split("/")[-1]
        banner = client.get(f"{BASE}/image/{file_name}", follow_redirects=False)
        assert banner.status_code == 307
        assert banner.headers["location"] == data["imagePath"]
        assert client.get(f"{BASE}/image/missing.png", follow_redirects=False).status_code == 404

    def test_missing_fields(self, client, site_owner):
        sign_in(client, site_owner["email"])

        assert _submit(client, form={"title": "Only a title"}).status_code == 400
        response = _submit(client, with_image=False)
        assert response.status_code == 400
        assert response.json()["message"] == "No banner image uploaded"

    def test_requires_web_connect_trust(self, client, member):
        sign_in(client, member["email"])

        assert _submit(client).status_code == 403

    def test_owned_lists_hidden_submissions(self, client, site_owner):
        sign_in(client, site_owner["email"])
        _submit(client)

        owned = client.get(f"{BASE}/owned").json()["data"]

        assert len(owned) == 1
        assert owned[0]["isActive"] is False


class TestModeration:
    """Admin activation and featuring"""

    def test_activate_and_feature(self, client, admin, site_owner):
        sign_in(client, site_owner["email"])
        connection_id = _submit(client).json()["data"]["id"]

        sign_in(client, admin["email"])
        response = client.post(f"{BASE}/UpdateConnectionStatus", json={"connectionId": connection_id, "isActive": True})
        assert response.status_code == 200

        assert [c["id"] for c in client.get(f"{BASE}/active").json()["data"]] == [connection_id]
        assert [c["id"] for c in client.get(f"{BASE}/byUser/{site_owner['id']}").json()["data"]] == [connection_id]
        assert client.get(f"{BASE}/featuredActive").json()["data"] == []

        response = client.post(
            f"{BASE}/UpdateConnectionFeatureStatus", json={"connectionId": connection_id, "isFeatured": True}
        )
        assert response.status_code == 200
        assert [c["id"] for c in client.get(f"{BASE}/featuredActive").json()["data"]] == [connection_id]

    def test_admin_listing_includes_owner(self, client, admin, site_owner):
        sign_in(client, site_owner["email"])
        _submit(client)
        assert client.get(f"{BASE}/GetAllConnections").status_code == 403

        sign_in(client, admin["email"])
        data = client.get(f"{BASE}/GetAllConnections").json()["data"]

        assert len(data) == 1
        assert data[0]["userId"] == site_owner["id"]
        assert data[0]["userEmail"] == site_owner["email"]
        assert data[0]["userName"] == "owner"

    def test_unknown_connection(self, client, admin):
        sign_in(client, admin["email"])

        response = client.post(f"{BASE}/UpdateConnectionStatus", json={"connectionId": 9, "isActive": True})

        assert response.status_code == 404


class TestDeleteConnection:
    """Owner-only removal"""

    def test_only_owner_may_delete(self, client, admin, site_owner, s3):
        sign_in(client, site_owner["email"])
        connection = _submit(client).json()["data"]
        file_name = connection["imagePath"].split("/")[-1]

        sign_in(client, admin["email"])
        assert client.delete(f"{BASE}/{connection['id']}").status_code == 403

        sign_in(client, site_owner["email"])
        response = client.delete(f"{BASE}/{connection['id']}")

        assert response.status_code == 200
        assert client.get(f"{BASE}/image/{file_name}", follow_redirects=False).status_code == 404
        assert s3.keys() == []
        assert client.delete(f"{BASE}/{connection['id']}").status_code == 404
