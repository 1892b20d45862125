#!/usr/bin/env python3
"""Drive the cart flow against a running server and print each step.

register -> login -> create product -> add 2 -> add 3 -> update to 1 -> remove

Usage:
    python scripts/smoke_cart.py [base_url]
"""
import sys
import uuid

import httpx

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"


def quantities(client: httpx.Client) -> dict:
    r = client.get("/cart")
    r.raise_for_status()
    return {item["product_id"]: item["quantity"] for item in r.json()}


def main() -> int:
    email = f"smoke-{uuid.uuid4().hex[:8]}@example.com"
    password = "password123"

    with httpx.Client(base_url=BASE_URL, timeout=10.0) as client:
        r = client.post("/auth/register", json={"email": email, "password": password, "name": "Smoke Test"})
        print("register:", r.status_code)
        r.raise_for_status()

        r = client.post("/auth/login", json={"email": email, "password": password})
        r.raise_for_status()
        client.headers["Authorization"] = f"Bearer {r.json()['access_token']}"

        r = client.post("/products", json={
            "name": "Smoke product", "price": 1.50, "description": "created by smoke_cart.py", "stock": 10,
        })
        r.raise_for_status()
        product_id = r.json()["id"]
        print("product:", product_id)

        steps = [
            ("add 2", lambda: client.post("/cart/add", json={"productId": product_id, "quantity": 2})),
            ("add 3", lambda: client.post("/cart/add", json={"productId": product_id, "quantity": 3})),
            ("update 1", lambda: client.patch(f"/cart/update/{product_id}", json={"quantity": 1})),
            ("remove", lambda: client.delete(f"/cart/remove/{product_id}")),
        ]
        for label, call in steps:
            r = call()
            r.raise_for_status()
            print(f"{label}: {quantities(client)}")

        client.delete(f"/products/{product_id}/hard").raise_for_status()
    return 0


if __name__ == "__main__":
    sys.exit(main())
