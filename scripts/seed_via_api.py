import argparse
import asyncio
import os
import sys

import httpx
from dotenv import load_dotenv

# --- Configuration ---
# Load environment variables from .env file
load_dotenv()
API_BASE_URL = os.getenv("API_BASE_URL")


async def count_categories(client: httpx.AsyncClient) -> int:
    """Return the number of categories reported by the OData endpoint."""
    response = await client.get("/odata/Categories", params={"$count": "true", "$top": "0"})
    response.raise_for_status()
    return response.json()["@odata.count"]


async def seed_via_api(batches: int) -> int:
    """
    Calls the seed endpoint `batches` times (100 categories each) and reports the row count.
    Returns a process exit code.
    """
    if not API_BASE_URL:
        print("Error: API_BASE_URL environment variable not set.")
        print("Please create or update your .env file with API_BASE_URL=<your-api-url>")
        return 1

    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
        # --- Health Check ---
        try:
            print(f"Checking API health at {API_BASE_URL}/health_check...")
            health_response = await client.get("/health_check")
            health_response.raise_for_status()
            print("API is healthy. Proceeding with seeding.")
        except (httpx.RequestError, httpx.HTTPStatusError) as e:
            print(f"Error: API health check failed: {e}")
            return 1

        try:
            before = await count_categories(client)
            print(f"Categories before seeding: {before}")

            for batch in range(1, batches + 1):
                response = await client.get("/seed-data/categories")
                response.raise_for_status()
                print(f"Batch {batch}/{batches} seeded (HTTP {response.status_code})")

            after = await count_categories(client)
        except (httpx.RequestError, httpx.HTTPStatusError) as e:
            print(f"Error while seeding: {e}")
            return 1

    print(f"\nCategories after seeding: {after} (+{after - before})")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the Catalog OData API with generated categories.")
    parser.add_argument("--batches", type=int, default=1, help="number of 100-category batches to insert")
    args = parser.parse_args()

    sys.exit(asyncio.run(seed_via_api(args.batches)))
