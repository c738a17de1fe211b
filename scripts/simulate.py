"""
Ordering Simulation Script

Sets up a restaurant through the admin API, then fires many concurrent
shoppers at its menu. Each shopper fills a cart, goes through checkout
and collects the WhatsApp order link.

Run from project root (with the API running): python scripts/simulate.py
"""

import argparse
import asyncio
import random
import sys
import time
import uuid
from datetime import datetime
from typing import Any

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_ORDERS = 50

CUSTOMER_NAMES = ["Ana", "Luis", "María", "José", "Sofía", "Carlos", "Lucía", "Diego", "Valeria", "Andrés"]
STREETS = ["Av. Reforma", "Calle 5 de Mayo", "Insurgentes Sur", "Av. Juárez", "Calle Madero"]
CATALOG = {
    "Tacos": [("Taco al pastor", 2.5), ("Taco de suadero", 2.75), ("Gringa", 4.0)],
    "Bebidas": [("Agua de horchata", 1.5), ("Refresco", 1.25)],
    "Postres": [("Flan", 3.0), ("Churros", 2.2)],
}


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# RESTAURANT SETUP
# =============================================================================

async def setup_restaurant(client: httpx.AsyncClient) -> dict[str, Any]:
    """Create an owner account, its company and a small catalog."""
    suffix = uuid.uuid4().hex[:6]
    response = await client.post(
        f"{API_BASE_URL}/api/auth/signup",
        json={"email": f"owner-{suffix}@simulacion.mx", "password": "simulacion123"},
    )
    response.raise_for_status()
    headers = auth_headers(response.json()["access_token"])

    response = await client.post(
        f"{API_BASE_URL}/api/admin/company",
        json={"name": f"Taquería Simulación {suffix}", "whatsapp": "+52 1 555 000 0000"},
        headers=headers,
    )
    response.raise_for_status()
    slug = response.json()["slug"]

    for category_name, products in CATALOG.items():
        response = await client.post(
            f"{API_BASE_URL}/api/admin/categories",
            json={"name": category_name},
            headers=headers,
        )
        response.raise_for_status()
        category_id = next(
            c["id"] for c in response.json()["categories"] if c["name"] == category_name
        )
        for name, price in products:
            response = await client.post(
                f"{API_BASE_URL}/api/admin/products",
                json={"name": name, "price": price, "category_id": category_id},
                headers=headers,
            )
            response.raise_for_status()

    menu = (await client.get(f"{API_BASE_URL}/api/menu/{slug}")).json()
    product_ids = [p["id"] for c in menu["categories"] for p in c["products"]]
    return {"slug": slug, "product_ids": product_ids}


# =============================================================================
# SHOPPER SIMULATION
# =============================================================================

def generate_customer_details() -> dict[str, Any]:
    """Random customer form, half pickup and half delivery."""
    details = {
        "customer_name": random.choice(CUSTOMER_NAMES),
        "order_type": random.choice(["pickup", "delivery"]),
        "payment_method": random.choice(["cash", "transfer"]),
    }
    if details["order_type"] == "delivery":
        details["address"] = f"{random.choice(STREETS)} {random.randint(1, 999)}"
    return details


async def send_shopper_order(slug: str, product_ids: list[str], order_num: int) -> dict[str, Any]:
    """One shopper session: fill the cart, check out, submit."""
    api = f"{API_BASE_URL}/api/menu/{slug}"
    start_time = time.time()

    # Separate client per shopper so each one gets its own session cookie
    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            for product_id in random.sample(product_ids, k=random.randint(1, 3)):
                for _ in range(random.randint(1, 3)):
                    response = await client.post(f"{api}/cart/items", json={"product_id": product_id})
                    response.raise_for_status()

            cart = (await client.get(f"{api}/cart")).json()
            response = await client.post(f"{api}/checkout")
            response.raise_for_status()

            response = await client.post(f"{api}/checkout/submit", json=generate_customer_details())
            elapsed = round(time.time() - start_time, 3)

            if response.status_code == 200:
                data = response.json()
                return {
                    "order_num": order_num,
                    "success": True,
                    "total": cart["total"],
                    "items": cart["count"],
                    "url_length": len(data["whatsapp_url"]),
                    "time": elapsed,
                }
            return {
                "order_num": order_num,
                "success": False,
                "error": response.text[:100],
                "time": elapsed,
            }
        except httpx.HTTPError as e:
            elapsed = round(time.time() - start_time, 3)
            return {
                "order_num": order_num,
                "success": False,
                "error": str(e)[:100],
                "time": elapsed,
            }


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    """
    Run the ordering simulation.

    Args:
        num_orders: Number of concurrent shoppers
    """
    print("=" * 70)
    print("🔥 ORDERING SIMULATION - CONCURRENT SHOPPERS")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    async with httpx.AsyncClient(timeout=30.0) as client:
        restaurant = await setup_restaurant(client)
    print(f"\n🏪 Restaurant ready: {API_BASE_URL}/menu/{restaurant['slug']}")
    print(f"   Products: {len(restaurant['product_ids'])}")

    print("\n🚀 Firing shopper sessions...\n")
    start_time = time.time()
    tasks = [
        send_shopper_order(restaurant["slug"], restaurant["product_ids"], i + 1)
        for i in range(num_orders)
    ]
    results = await asyncio.gather(*tasks)
    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)

    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        total_revenue = sum(r["total"] for r in successful)
        total_items = sum(r["items"] for r in successful)

        print("\n📈 Performance Metrics:")
        print(f"   Average Session: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   🛒 Items Ordered: {total_items}")
        print(f"   💰 Total Value: ${total_revenue:.2f}")

    if failed:
        print("\n⚠️  Failed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


async def preflight() -> bool:
    """Check the API is reachable and healthy before the simulation."""
    print("\n" + "=" * 70)
    print("🧪 PRE-FLIGHT CHECK")
    print("=" * 70)

    async with httpx.AsyncClient(timeout=10.0) as client:
        try:
            response = await client.get(f"{API_BASE_URL}/health")
        except httpx.HTTPError as e:
            print(f"   ❌ API unreachable: {e}")
            return False

    if response.status_code != 200:
        print(f"   ❌ Failed: {response.text}")
        return False

    data = response.json()
    print(f"   ✅ Status: {data.get('status')}")
    print(f"   Database: {data.get('database')}")
    print(f"   KV Store: {data.get('kv_store')}")
    print(f"   Auth: {data.get('auth_service')}")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Ordering Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of shoppers")
    parser.add_argument("--url", default=API_BASE_URL, help="API base URL")
    parser.add_argument("--skip-tests", action="store_true", help="Skip the pre-flight check")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")

    if not args.skip_tests and not asyncio.run(preflight()):
        print("\n❌ Pre-flight check failed. Start the API before running the simulation.")
        sys.exit(1)

    asyncio.run(run_simulation(num_orders=args.orders))
