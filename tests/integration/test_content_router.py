"""Integration tests for article and video endpoints."""


class TestArticlesRouter:
    async def test_requires_auth(self, client):
        resp = await client.get("/api/articles")
        assert resp.status_code == 401
        assert resp.json() == {
            "error": {"code": "UNAUTHORIZED", "message": "Authentication required"}
        }

    async def test_list_articles(self, client, login, app_db, add_articles):
        headers = await login()
        await add_articles(app_db, "a1", "a2")
        resp = await client.get("/api/articles", headers=headers)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert [item["id"] for item in data["items"]] == ["a2", "a1"]
        assert "content" not in data["items"][0]
        assert "publishedAt" in data["items"][0]
        assert data["accessedIds"] == []
        assert data["usage"] == {"count": 0, "limit": 3, "remaining": 3, "unlimited": False}

    async def test_tier_a_flow(self, client, login, app_db, add_articles):
        headers = await login()
        await add_articles(app_db, "a1", "a2", "a3", "a4")

        for i, article_id in enumerate(["a1", "a2", "a3"], start=1):
            resp = await client.get(f"/api/articles/{article_id}", headers=headers)
            assert resp.status_code == 200
            body = resp.json()
            assert body["data"]["content"] == f"Protected body of {article_id}"
            assert body["usage"]["count"] == i

        resp = await client.get("/api/articles/a4", headers=headers)
        assert resp.status_code == 403
        error = resp.json()["error"]
        assert error["code"] == "QUOTA_EXCEEDED"
        assert error["details"] == {"currentUsage": 3, "limit": 3, "membershipType": "A"}

        resp = await client.get("/api/articles/a2", headers=headers)
        assert resp.status_code == 200

        resp = await client.get("/api/articles", headers=headers)
        assert sorted(resp.json()["data"]["accessedIds"]) == ["a1", "a2", "a3"]
        assert resp.json()["data"]["usage"]["remaining"] == 0

    async def test_missing_article_is_404_and_spends_slot(self, client, login):
        headers = await login()
        resp = await client.get("/api/articles/missing", headers=headers)
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "NOT_FOUND"

        usage = await client.get("/api/user/usage", headers=headers)
        assert usage.json()["data"]["articles"]["accessed"] == ["missing"]

    async def test_invalid_id_is_400(self, client, login):
        headers = await login()
        resp = await client.get("/api/articles/bad%20id!", headers=headers)
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "article_id" in error["details"]["fields"]

    async def test_invalid_limit_is_400(self, client, login):
        headers = await login()
        resp = await client.get("/api/articles?limit=0", headers=headers)
        assert resp.status_code == 400
        assert "limit" in resp.json()["error"]["details"]["fields"]

    async def test_unknown_route_is_404(self, client, login):
        headers = await login()
        resp = await client.get("/api/podcasts", headers=headers)
        assert resp.status_code == 404
        assert resp.json()["error"] == {
            "code": "NOT_FOUND", "message": "Cannot GET /api/podcasts",
        }


class TestVideosRouter:
    async def test_list_videos_redacts_url(self, client, login, app_db, add_videos):
        headers = await login(membership_type="B")
        await add_videos(app_db, "v1")
        resp = await client.get("/api/videos", headers=headers)
        assert resp.status_code == 200
        item = resp.json()["data"]["items"][0]
        assert "videoUrl" not in item
        assert item["thumbnail"] == "https://img.example.com/v1.jpg"

    async def test_get_video(self, client, login, app_db, add_videos):
        headers = await login(membership_type="B")
        await add_videos(app_db, "v1")
        resp = await client.get("/api/videos/v1", headers=headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["data"]["videoUrl"] == "https://videos.example.com/v1.mp4"
        assert body["usage"] == {"count": 1, "limit": 10, "remaining": 9, "unlimited": False}

    async def test_unlimited_tier_reports_null(self, client, login, app_db, add_videos):
        headers = await login(membership_type="C")
        await add_videos(app_db, "v1")
        resp = await client.get("/api/videos/v1", headers=headers)
        assert resp.json()["usage"] == {
            "count": 1, "limit": None, "remaining": None, "unlimited": True,
        }

    async def test_video_quota_independent_of_articles(self, client, login, app_db, add_articles, add_videos):
        headers = await login()
        await add_articles(app_db, "a1", "a2", "a3")
        await add_videos(app_db, "v1")
        for article_id in ("a1", "a2", "a3"):
            await client.get(f"/api/articles/{article_id}", headers=headers)
        resp = await client.get("/api/videos/v1", headers=headers)
        assert resp.status_code == 200
