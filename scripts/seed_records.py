#!/usr/bin/env python3
"""
Generate and send randomized case drafts to the registry API.

Drafts are valid by construction and scattered around Maputo, so the map
and dashboard have something to show during demos and training.

Usage:
    # Send 10 drafts with 1 second delay
    python scripts/seed_records.py --count 10 --delay 1

    # Against another host
    python scripts/seed_records.py --api-url http://192.168.1.20:8000 --count 25
"""

import argparse
import random
import sys
import time
from datetime import date, timedelta
from pathlib import Path

import requests

sys.path.append(str(Path(__file__).parent.parent / "src"))

from config import get_api_url  # noqa: E402

FIRST_NAMES = ["Ana", "Beto", "Carla", "Dércio", "Elsa", "Fátima", "Gil", "Helena", "Inácio", "Joana"]
SURNAMES = ["Macuácua", "Cossa", "Sitoe", "Mondlane", "Chissano", "Tembe", "Nhantumbo", "Mabunda"]

# Rough district centres, used as jitter anchors
DISTRICT_CENTRES = {
    "KaMpfumo": (-25.9692, 32.5732),
    "Nlhamankulu": (-25.9450, 32.5600),
    "KaMaxaquene": (-25.9350, 32.5900),
    "KaMavota": (-25.9000, 32.6200),
    "KaMubukwana": (-25.8800, 32.5600),
    "KaTembe": (-26.0200, 32.5500),
    "KaNyaka": (-25.9900, 32.9200),
}

DOMAINS = ["vision", "hearing", "mobility", "communication", "learning", "behavior", "selfcare"]


def random_draft(reference: dict) -> dict:
    """Build a random but valid draft payload from the reference catalogue."""
    district = random.choice(reference["districts"])
    centre_lat, centre_lng = DISTRICT_CENTRES.get(district, DISTRICT_CENTRES["KaMpfumo"])
    surname = random.choice(SURNAMES)

    diagnosis = random.choice(reference["diagnoses"])
    custom = "Albinismo" if diagnosis == reference["other_diagnosis"] else ""

    dob = date.today() - timedelta(days=random.randint(365, 17 * 365))

    return {
        "child_name": f"{random.choice(FIRST_NAMES)} {surname}",
        "id_type": random.choice(reference["id_types"]),
        "id_number": str(random.randint(100000, 999999)),
        "caregiver_name": f"{random.choice(FIRST_NAMES)} {surname}",
        "caregiver_relation": random.choice(reference["relations"]),
        "caregiver_phone": f"+25884{random.randint(1000000, 9999999)}",
        "gender": random.choice([g["code"] for g in reference["genders"]]),
        "dob": dob.isoformat(),
        "district": district,
        "diagnosis": diagnosis,
        "custom_diagnosis": custom,
        "is_clinically_confirmed": random.random() < 0.4,
        "scores": {domain: random.choices([1, 2, 3, 4], weights=[5, 3, 2, 1])[0] for domain in DOMAINS},
        "location": {
            "method": "map",
            "latitude": centre_lat + random.uniform(-0.01, 0.01),
            "longitude": centre_lng + random.uniform(-0.01, 0.01),
        },
    }


def send_draft(draft: dict, api_url: str) -> bool:
    """Send a draft to the API."""
    try:
        response = requests.post(f"{api_url}/api/v1/records", json=draft, timeout=10)
    except requests.exceptions.RequestException as e:
        print(f"Request failed: {e}")
        return False

    if response.status_code == 201:
        data = response.json()
        print(f"✓ Registered {data['id']} ({data['district']}, {data['severity']})")
        return True

    print(f"✗ Failed: {response.status_code} - {response.text[:200]}")
    return False


def main():
    parser = argparse.ArgumentParser(description="Seed the registry with random cases")
    parser.add_argument("--count", type=int, default=10, help="Number of drafts to send")
    parser.add_argument("--delay", type=float, default=0.0, help="Seconds between drafts")
    parser.add_argument("--api-url", default=get_api_url(), help="Registry API base URL")
    args = parser.parse_args()

    try:
        reference = requests.get(f"{args.api_url}/api/v1/reference-data", timeout=5).json()
    except requests.exceptions.RequestException as e:
        print(f"Registry API not reachable at {args.api_url}: {e}")
        sys.exit(1)

    sent = 0
    for i in range(args.count):
        if send_draft(random_draft(reference), args.api_url):
            sent += 1
        if args.delay and i < args.count - 1:
            time.sleep(args.delay)

    print(f"\nSent {sent}/{args.count} drafts")
    sys.exit(0 if sent == args.count else 1)


if __name__ == "__main__":
    main()
