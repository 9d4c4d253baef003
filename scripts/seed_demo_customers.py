#!/usr/bin/env python3
"""
Demo Customer Seeding Script

Logs in to the API as an approved tailor and creates Faker-generated
customers, each with a first order spread around today so every reminder
bucket (overdue, today, tomorrow, upcoming) has something in it.

Usage:
    python seed_demo_customers.py --email tailor@example.com --password secret
    python seed_demo_customers.py --email tailor@example.com --customers 50 --gender female
    python seed_demo_customers.py --email tailor@example.com --dry-run
"""

import argparse
import json
import os
import random
from datetime import date, timedelta
from typing import Dict, Optional

import requests
from faker import Faker
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

FEMALE_FIELDS = ['shoulder', 'bust', 'waist', 'hips', 'fullLength', 'sleeveLength']
MALE_FIELDS = ['trouser', 'shirt', 'neck', 'hands', 'waist']
STATUSES = ['pending', 'in_progress', 'completed', 'collected']


class DemoDataGenerator:
    """Builds customer payloads in the shape the customers endpoint accepts."""

    def __init__(self, seed: int = 42, gender: str = 'female'):
        random.seed(seed)
        Faker.seed(seed)
        self.fake = Faker()
        self.gender = gender

    def measurements(self) -> Dict[str, float]:
        fields = FEMALE_FIELDS if self.gender == 'female' else MALE_FIELDS
        return {name: round(random.uniform(10, 45), 1) for name in fields}

    def order(self, today: date) -> Dict:
        order_date = today - timedelta(days=random.randint(0, 30))
        collection_date = today + timedelta(days=random.randint(-5, 14))
        total = random.choice([2500, 4000, 6500, 12000, 18000])
        paid = random.choice([0, total // 4, total // 2, total])
        return {
            'description': self.fake.sentence(nb_words=4),
            'order_date': order_date.isoformat(),
            'collection_date': collection_date.isoformat(),
            'total_amount': str(total),
            'paid_amount': str(paid),
            'status': random.choice(STATUSES),
            'measurements': self.measurements(),
        }

    def customer(self, today: date) -> Dict:
        return {
            'name': self.fake.name(),
            'phone': self.fake.msisdn()[:11],
            'email': self.fake.email(),
            'address': self.fake.address().replace('\n', ', '),
            'order': self.order(today),
        }


class TailorApiClient:
    """Minimal client for the tailor endpoints."""

    def __init__(self, api_base_url: str = "http://localhost:8000"):
        self.api_base_url = api_base_url.rstrip('/')
        self.session = requests.Session()

    def login(self, email: str, password: str) -> None:
        response = self.session.post(
            f"{self.api_base_url}/api/v1/auth/login/",
            json={'email': email, 'password': password},
            timeout=30,
        )
        if response.status_code != 200:
            raise RuntimeError(f"Login failed ({response.status_code}): {response.text}")
        token = response.json()['token']
        self.session.headers['Authorization'] = f"Bearer {token}"
        logger.info(f"Logged in as {email}")

    def create_customer(self, payload: Dict) -> Optional[Dict]:
        response = self.session.post(
            f"{self.api_base_url}/api/v1/tailor/customers/",
            json=payload,
            timeout=30,
        )
        if response.status_code != 201:
            logger.error(f"Failed to create customer {payload['name']}: {response.status_code} {response.text}")
            return None
        return response.json()


def main():
    parser = argparse.ArgumentParser(description='Seed demo customers through the tailor API')
    parser.add_argument('--email', required=True, help='Approved tailor account email')
    parser.add_argument('--password', default=os.environ.get('TAILOR_PASSWORD'),
                        help='Tailor password (default: $TAILOR_PASSWORD)')
    parser.add_argument('--customers', type=int, default=20, help='Number of customers to create')
    parser.add_argument('--gender', choices=['female', 'male'], default='female',
                        help='Measurement field set to generate')
    parser.add_argument('--api-url', default='http://localhost:8000', help='API base URL')
    parser.add_argument('--seed', type=int, default=42, help='Random seed')
    parser.add_argument('--dry-run', action='store_true', help='Print payloads instead of posting them')
    args = parser.parse_args()

    generator = DemoDataGenerator(seed=args.seed, gender=args.gender)
    today = date.today()
    payloads = [generator.customer(today) for _ in range(args.customers)]

    if args.dry_run:
        print(json.dumps(payloads, indent=2))
        return

    if not args.password:
        parser.error('--password or $TAILOR_PASSWORD is required')

    client = TailorApiClient(args.api_url)
    client.login(args.email, args.password)

    created = sum(1 for payload in payloads if client.create_customer(payload) is not None)
    logger.info(f"Created {created}/{len(payloads)} customers")


if __name__ == '__main__':
    main()
