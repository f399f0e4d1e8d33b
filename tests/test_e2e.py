class TestEndToEnd:
    def test_complete_flow(self, client, admin_user):
        """
        测试完整的端到端流程：

        1. 管理员登录，拿到令牌
        2. 新建草稿，填写内容并打上标签（重复的标签名只算一次）
           - 匿名访问草稿失败
        3. 发布文章
           - 匿名用户可以通过 permalink 看到渲染后的 HTML
           - 可以按标签筛选
        4. 修改标签：整体替换，旧标签仍然保留
        5. 删除文章，标签仍然存在
        6. 登出
        """
        # 1. 登录
        response = client.post("/api/v1/login", json={
            "mail_address": "admin@example.com",
            "password": "adminpassword123",
        })
        assert response.status_code == 200
        headers = {"Authorization": f"Bearer {response.json()['access_token']}"}
        client.cookies.clear()

        # 2. 新建草稿并保存
        response = client.post("/api/v1/posts", headers=headers)
        assert response.status_code == 201
        post_id = response.json()["post"]["id"]

        post = {
            "title": "Hello",
            "thumbnail_url": "",
            "content": "## Hello\n\nfirst *post*",
            "permalink": "hello",
            "is_draft": True,
        }
        response = client.put(f"/api/v1/posts/{post_id}", headers=headers, json={
            "post": post,
            "tags": ["go", "web", "go"],
        })
        assert response.status_code == 200
        assert [tag["name"] for tag in response.json()["tags"]] == ["go", "web"]

        response = client.get("/api/v1/posts/hello")
        assert response.status_code == 404

        # 3. 发布
        response = client.put(f"/api/v1/posts/{post_id}", headers=headers, json={
            "post": {**post, "is_draft": False},
            "tags": ["go", "web"],
        })
        assert response.status_code == 200
        assert response.json()["post"]["published_at"] is not None

        response = client.get("/api/v1/posts/hello")
        assert response.status_code == 200
        assert response.json()["post"]["content"] == "<h2>Hello</h2>\n<p>first <em>post</em></p>"

        response = client.get("/api/v1/posts", params={"tag": "web"})
        assert response.status_code == 200
        assert [p["id"] for p in response.json()["posts"]] == [post_id]

        # 4. 替换标签
        response = client.put(f"/api/v1/posts/{post_id}", headers=headers, json={
            "post": {**post, "is_draft": False},
            "tags": ["python"],
        })
        assert [tag["name"] for tag in response.json()["tags"]] == ["python"]

        response = client.get("/api/v1/posts", params={"tag": "web"})
        assert response.status_code == 404
        assert client.get("/api/v1/tags").json()["count"] == 3

        # 5. 删除文章
        response = client.delete(f"/api/v1/posts/{post_id}", headers=headers)
        assert response.status_code == 200
        assert client.get("/api/v1/posts/hello").status_code == 404
        assert client.get("/api/v1/tags").json()["count"] == 3

        # 6. 登出
        response = client.post("/api/v1/logout")
        assert response.status_code == 200
