"""Smoke test against a running server: login, sell from stock, pull from the sheet."""
import os
import sys

import requests

# Configuration
API_URL = os.environ.get("IMS_API_URL", "http://localhost:8000/api/v1")
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"
TENANT_USERNAME = "demo"
TENANT_PASSWORD = "demo"


def login(username, password):
    print(f"Logging in as {username}...")
    response = requests.post(f"{API_URL}/auth/token", data={
        "username": username,
        "password": password
    })
    if response.status_code != 200:
        print(f"Login failed: {response.text}")
        sys.exit(1)
    print("Login successful.")
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def show_sync_status(headers):
    status = requests.get(f"{API_URL}/sync/status", headers=headers).json()
    print(f"Sync state: {status['state']} (configured: {status['configured']})")
    if status.get("lastError"):
        print(f"  Last pull error: {status['lastError']}")
    print(f"  Pushes: {status['pushesDispatched']} sent, {status['pushesFailed']} failed")
    return status


def sell_one(headers):
    inventory = requests.get(f"{API_URL}/inventory", headers=headers).json()
    in_stock = [item for item in inventory if item["quantity"] > 0]
    if not in_stock:
        print("Nothing in stock, run backend/scripts/seed.py first.")
        return None

    item = in_stock[0]
    print(f"Selling 1 x {item['itemName']} ({item['quantity']} on hand)...")
    response = requests.post(f"{API_URL}/sales", headers=headers, json={
        "itemName": item["itemName"],
        "quantity": 1,
        "price": 9.99,
    })
    if response.status_code != 201:
        print(f"Sale failed: {response.text}")
        return None
    sale = response.json()
    print(f"Sale recorded: {sale['id']} total {sale['total']}")
    return sale


def main():
    admin = login(ADMIN_USERNAME, ADMIN_PASSWORD)
    show_sync_status(admin)

    tenant = login(TENANT_USERNAME, TENANT_PASSWORD)
    sell_one(tenant)
    summary = requests.get(f"{API_URL}/reports/summary", headers=tenant).json()
    print(f"Summary: sales {summary['totalSales']}, expenses {summary['totalExpenses']}, net {summary['netProfit']}")

    status = show_sync_status(admin)
    if status["configured"]:
        print("Pulling from the remote sheet...")
        requests.post(f"{API_URL}/sync/pull", headers=admin)
        show_sync_status(admin)


if __name__ == "__main__":
    main()
