import httpx
import asyncio
import os
import sys

BASE_URL = os.environ.get("TINYLINK_URL", "http://localhost:4000")

async def run_verification() -> bool:
    print(f"🚀  Starting Verification against {BASE_URL}...\n")
    ok = True

    async with httpx.AsyncClient(base_url=BASE_URL, timeout=10.0) as client:
        # 1. Health Check
        print("1. [Health] Checking /healthz...")
        try:
            resp = await client.get("/healthz")
            if resp.status_code == 200 and resp.json() == {"ok": True, "version": "1.0"}:
                print("   ✅  Health Check Passed")
            else:
                print(f"   ❌  Health Check Failed: {resp.text}")
                return False
        except httpx.HTTPError as e:
            print(f"   ❌  Connection Error: {e}")
            return False

        # 2. Create Link
        print("\n2. [API] Creating Short Link...")
        target_url = "https://www.example.com"
        code = "verify-test"

        # Cleanup first if exists
        await client.delete(f"/api/links/{code}")

        resp = await client.post("/api/links", json={"targetUrl": target_url, "code": code})
        if resp.status_code == 201:
            print(f"   ✅  Created: {BASE_URL}/{resp.json()['code']}")
        else:
            print(f"   ❌  Create Failed: {resp.status_code} {resp.text}")
            return False

        resp = await client.post("/api/links", json={"targetUrl": target_url, "code": code})
        if resp.status_code == 409:
            print("   ✅  Duplicate code rejected")
        else:
            print(f"   ❌  Duplicate code not rejected: {resp.status_code}")
            ok = False

        # 3. Verify Redirect
        print("\n3. [API] Verifying Redirect...")
        resp = await client.get(f"/{code}", follow_redirects=False)
        if resp.status_code == 302 and resp.headers.get("location") == target_url:
            print(f"   ✅  Redirect Location matches: {resp.headers['location']}")
        else:
            print(f"   ❌  Redirect Failed: {resp.status_code} {resp.headers.get('location')}")
            ok = False

        # 4. Verify Stats
        print("\n4. [API] Verifying Stats...")
        resp = await client.get(f"/api/links/{code}")
        if resp.status_code == 200 and resp.json()["totalClicks"] == 1:
            print(f"   ✅  Click recorded at {resp.json()['lastClicked']}")
        else:
            print(f"   ❌  Stats Failed: {resp.status_code} {resp.text}")
            ok = False

        resp = await client.get("/api/links")
        if resp.status_code == 200 and any(link["code"] == code for link in resp.json()):
            print("   ✅  Link listed")
        else:
            print(f"   ❌  Listing Failed: {resp.status_code}")
            ok = False

        # 5. Delete
        print("\n5. [API] Verifying Delete...")
        first = await client.delete(f"/api/links/{code}")
        second = await client.delete(f"/api/links/{code}")
        if first.status_code == 204 and second.status_code == 404:
            print("   ✅  Deleted (204 then 404)")
        else:
            print(f"   ❌  Delete Failed: {first.status_code} / {second.status_code}")
            ok = False

        # 6. Metrics
        print("\n6. [Observability] Verifying Metrics...")
        resp = await client.get("/metrics")
        if resp.status_code == 200 and "http_requests_total" in resp.text:
            print("   ✅  Metrics Endpoint Exposed")
        else:
            print(f"   ❌  Metrics Failed: {resp.status_code}")
            ok = False

    print("\n✨ Verification Complete!" if ok else "\n💥 Verification Failed")
    return ok

if __name__ == "__main__":
    sys.exit(0 if asyncio.run(run_verification()) else 1)
