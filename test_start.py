"""
Test script to verify the start endpoint against a running server
"""
import httpx
import asyncio
import sys

async def test_start(phone: str):
    """Send a start request the way a client app would"""

    url = "http://localhost:8000/api/v1/verifications/start"
    payload = {"phone": phone}

    print(f"Testing start endpoint: {url}")
    print(f"Sending: {payload}\n")

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(url, json=payload, timeout=10.0)

            print(f"Status: {response.status_code}")
            print(f"Request id: {response.headers.get('X-Request-ID')}")
            print(f"Response: {response.text[:200]}")

            if response.status_code == 200:
                print("\nVerification started, check the phone for the code")
            else:
                print(f"\nStart endpoint returned {response.status_code}")

    except httpx.HTTPError as e:
        print(f"Error: {e}")

if __name__ == "__main__":
    asyncio.run(test_start(sys.argv[1] if len(sys.argv) > 1 else "+16502530000"))
