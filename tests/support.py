"""Shared fixtures for the test suite: temporary SQLite databases and a fake object store."""
import os
import shutil
import tempfile
import unittest
from datetime import datetime, timezone
from unittest import mock

from fastapi.testclient import TestClient

from dealership.config import Settings, get_settings
from dealership.database import Database, init_db
from dealership.exceptions import StorageNotConfiguredError
from dealership.main import app
from dealership.storage import ObjectStorage, get_storage

SPACES_SETTINGS = {
    "spaces_endpoint": "https://fra1.digitaloceanspaces.com",
    "spaces_bucket": "dealer-files",
    "spaces_region": "fra1",
    "spaces_access_key_id": "test-key",
    "spaces_secret_access_key": "test-secret",
}


def sqlite_settings(directory, **overrides) -> Settings:
    values = {"use_sqlite": True, "sqlite_path": os.path.join(directory, "test.db")}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def vehicle_data(vin="1FTFW1ET5DFC10312", **overrides):
    data = {
        "vin_number": vin,
        "make": "Ford",
        "model": "F-150",
        "year": 2013,
        "color": "Gray",
        "mileage": 84000,
        "price": 17950.5,
        "status": "available",
    }
    data.update(overrides)
    return data


def customer_data(**overrides):
    data = {
        "first_name": "Grace",
        "last_name": "Hopper",
        "phone_number": "555-0199",
        "email": "grace.hopper@email.com",
        "address": "1 Navy Way, Arlington, USA",
    }
    data.update(overrides)
    return data


def contract_data(vehicle_id, customer_id, number="CT-2024-0001", **overrides):
    data = {
        "contract_number": number,
        "vehicle_id": vehicle_id,
        "customer_id": customer_id,
        "vin_number": "1HGBH41JXMN109186",
        "customer_name": "John Smith",
        "customer_phone": "555-0101",
        "start_date": datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
        "end_date": datetime(2024, 6, 30, 9, 0, tzinfo=timezone.utc),
        "payment_amount": 450.0,
        "tax_amount": 36.0,
        "deposit_amount": 1000.0,
        "status": "active",
        "created_by": "admin",
    }
    data.update(overrides)
    return data


class InMemoryStorage(ObjectStorage):
    """Object store double keeping objects in a dict."""

    def __init__(self, configured=True):
        values = SPACES_SETTINGS if configured else {}
        super().__init__(Settings(_env_file=None, **values))
        self.objects = {}

    def ensure_client(self):
        errors = self.configuration_errors()
        if errors:
            raise StorageNotConfiguredError(errors)

    def put(self, key, body, content_type, acl="public-read", metadata=None):
        self.ensure_client()
        self.objects[key] = {
            "body": body,
            "content_type": content_type,
            "acl": acl,
            "metadata": dict(metadata or {}),
        }

    def delete(self, key):
        self.objects.pop(key, None)


class DatabaseTestCase(unittest.IsolatedAsyncioTestCase):
    """Fresh SQLite database per test with the schema bootstrapped."""

    bootstrap = True

    async def asyncSetUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.settings = sqlite_settings(self.tmpdir)
        self.database = Database()
        self.database.connect(self.settings)
        if self.bootstrap:
            await init_db(self.database)
        self.session = self.database.session()

    async def asyncTearDown(self):
        await self.session.close()
        await self.database.disconnect()
        shutil.rmtree(self.tmpdir, ignore_errors=True)


class ApiTestCase(unittest.TestCase):
    """Runs the application in-process against a temporary SQLite file."""

    seed = True
    env = {}

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self._env = mock.patch.dict(os.environ, {
            "USE_SQLITE": "true",
            "SQLITE_PATH": os.path.join(self.tmpdir, "api.db"),
            "SEED_ON_STARTUP": "true" if self.seed else "false",
            **self.env,
        })
        self._env.start()
        get_settings.cache_clear()
        get_storage.cache_clear()

        self.storage = InMemoryStorage()
        app.dependency_overrides[get_storage] = lambda: self.storage

        self.client = TestClient(app, raise_server_exceptions=False)
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)
        app.dependency_overrides.clear()
        self._env.stop()
        get_settings.cache_clear()
        get_storage.cache_clear()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def create_contract(self, number="CT-2024-0001", vehicle_id=1, customer_id=1, **overrides):
        payload = {
            "contract_number": number,
            "vehicle_id": vehicle_id,
            "customer_id": customer_id,
            "start_date": "2024-01-01T09:00:00",
            "end_date": "2024-06-30T09:00:00",
            "payment_amount": 450.0,
            "tax_amount": 36.0,
            "deposit_amount": 1000.0,
            "created_by": "admin",
        }
        payload.update(overrides)
        response = self.client.post("/api/contracts/new", json=payload)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()
