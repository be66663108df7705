import json
import os

import requests

BASE_URL = os.getenv("PORTFOLIO_API_URL", "http://localhost:8000")
EMAIL = os.getenv("PORTFOLIO_ADMIN_EMAIL", "admin@portfolio.com")
PASSWORD = os.getenv("PORTFOLIO_ADMIN_PASSWORD", "admin123")

def print_response(name, response):
    print(f"--- {name} ---")
    print(f"Status: {response.status_code}")
    try:
        print(json.dumps(response.json(), indent=2)[:2000])
    except ValueError:
        print(response.text[:2000])
    print("\n")

def run_verification():
    # 1. Login as the seeded admin
    print("1. Logging in...")
    resp = requests.post(f"{BASE_URL}/api/auth/token", data={
        "username": EMAIL,
        "password": PASSWORD
    })
    print_response("Login", resp)
    if resp.status_code != 200:
        print("Login failed, aborting.")
        return
    token = resp.json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    # 2. Public listing
    print("2. Listing Blogs...")
    resp = requests.get(f"{BASE_URL}/api/blogs", params={"page": 1, "limit": 2})
    print_response("List Blogs", resp)

    # 3. Search
    print("3. Searching Blogs...")
    resp = requests.get(f"{BASE_URL}/api/blogs", params={"search": "typescript"})
    print_response("Search Blogs", resp)

    # 4. Create a draft
    print("4. Creating Draft...")
    resp = requests.post(f"{BASE_URL}/api/blogs", headers=headers, json={
        "title": "Smoke Test Draft",
        "content": "# Smoke test\n\nCreated by verify_api.py",
        "author": "Adedayo",
        "tags": ["Testing"],
        "isPublished": False
    })
    print_response("Create Draft", resp)
    if resp.status_code != 201:
        return
    blog_id = resp.json()["id"]

    # 5. Publish it, then read it by slug (counts a view)
    print("5. Publishing Draft...")
    resp = requests.put(f"{BASE_URL}/api/blogs/{blog_id}", headers=headers, json={"isPublished": True})
    print_response("Publish", resp)

    resp = requests.get(f"{BASE_URL}/api/blogs/smoke-test-draft")
    print_response("Read By Slug", resp)

    # 6. SEO surfaces
    print("6. Fetching SEO data...")
    resp = requests.get(f"{BASE_URL}/api/blogs/smoke-test-draft/seo")
    print_response("SEO Metadata", resp)
    resp = requests.get(f"{BASE_URL}/sitemap.xml")
    print_response("Sitemap", resp)

    # 7. Media library (needs Cloudinary credentials on the server)
    print("7. Listing Media...")
    resp = requests.get(f"{BASE_URL}/api/upload", headers=headers, params={"limit": 5})
    print_response("Media Library", resp)

    # 8. Clean up
    print("8. Deleting Post...")
    resp = requests.delete(f"{BASE_URL}/api/blogs/{blog_id}", headers=headers)
    print_response("Delete", resp)

if __name__ == "__main__":
    run_verification()
