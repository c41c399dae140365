import unittest
from datetime import datetime, timedelta, timezone
from unittest import mock

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from dealership.exceptions import InvalidReferenceError, StorageError
from dealership.models import ContractImage
from dealership.seed import SAMPLE_VEHICLES, seed_sample_data
from dealership.services import ContractService, CustomerService, VehicleService

from support import DatabaseTestCase, InMemoryStorage, contract_data, customer_data, vehicle_data


class TestVehicleService(DatabaseTestCase):

    async def test_stored_vin_matches_input_exactly(self):
        service = VehicleService(self.session)
        vehicle = await service.create(vehicle_data(vin="1ftfw1et5dFC10312"))
        self.assertEqual(vehicle.vin_number, "1ftfw1et5dFC10312")
        self.assertEqual((await service.get_by_vin("1ftfw1et5dFC10312")).id, vehicle.id)
        self.assertIsNone(await service.get_by_vin("1FTFW1ET5DFC10312"))

    async def test_duplicate_vin_is_rejected_by_the_store(self):
        service = VehicleService(self.session)
        await service.create(vehicle_data())
        with self.assertRaises(IntegrityError):
            await service.create(vehicle_data(make="Chevrolet"))
        await self.session.rollback()
        self.assertEqual(len(await service.get_all()), 1)

    async def test_round_trip_of_created_fields(self):
        data = vehicle_data()
        created = await VehicleService(self.session).create(data)

        async with self.database.session() as other:
            fetched = await VehicleService(other).get_by_id(created.id)

        for field, value in data.items():
            self.assertEqual(getattr(fetched, field), value, field)
        self.assertIsNotNone(fetched.created_at)
        self.assertIsNotNone(fetched.updated_at)

    async def test_seeded_vehicles_listed_newest_first(self):
        await seed_sample_data(self.session)
        service = VehicleService(self.session)

        vehicles = await service.get_all()
        self.assertEqual(
            [v.vin_number for v in vehicles],
            [v["vin_number"] for v in reversed(SAMPLE_VEHICLES)],
        )

        third = await service.get_by_vin(SAMPLE_VEHICLES[2]["vin_number"])
        self.assertTrue(await service.delete(third.id))
        self.assertEqual(len(await service.get_all()), 4)
        self.assertIsNone(await service.get_by_id(third.id))

    async def test_delete_unknown_vehicle(self):
        self.assertFalse(await VehicleService(self.session).delete(999))

    async def test_partial_update_touches_only_given_fields(self):
        service = VehicleService(self.session)
        vehicle = await service.create(vehicle_data())

        updated = await service.update(vehicle.id, {"status": "maintenance", "mileage": 84500})

        self.assertEqual(updated.status, "maintenance")
        self.assertEqual(updated.mileage, 84500)
        self.assertEqual(updated.make, "Ford")
        self.assertEqual(updated.price, 17950.5)

    async def test_update_unknown_vehicle(self):
        self.assertIsNone(await VehicleService(self.session).update(999, {"color": "Red"}))

    async def test_search_make_and_model(self):
        await seed_sample_data(self.session)
        service = VehicleService(self.session)

        self.assertEqual(len(await service.search("toyota")), 2)
        self.assertEqual([v.model for v in await service.search("TOYOTA cam")], ["Camry"])
        self.assertEqual(await service.search("tesla"), [])


class TestCustomerService(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        await seed_sample_data(self.session)
        self.service = CustomerService(self.session)

    async def test_search_is_case_insensitive_substring(self):
        for term in ("sarah", "JOHN", "arah john"):
            names = [f"{c.first_name} {c.last_name}" for c in await self.service.search(term)]
            self.assertIn("Sarah Johnson", names, term)

    async def test_search_binds_values_as_parameters(self):
        results = await self.service.search("'; DROP TABLE ds_customer; --")
        self.assertEqual(results, [])
        self.assertEqual(len(await self.service.get_all()), 5)

    async def test_search_treats_wildcards_literally(self):
        self.assertEqual(await self.service.search("%"), [])
        self.assertEqual(await self.service.search("_"), [])

    async def test_get_by_phone(self):
        customer = await self.service.get_by_phone("555-0103")
        self.assertEqual(customer.first_name, "Michael")
        self.assertIsNone(await self.service.get_by_phone("555-9999"))

    async def test_phone_is_not_unique(self):
        duplicate = await self.service.create(customer_data(phone_number="555-0101"))
        self.assertEqual((await self.service.get_by_phone("555-0101")).id, duplicate.id)

    async def test_empty_update_is_not_found(self):
        customer = await self.service.create(customer_data())
        self.assertIsNone(await self.service.update(customer.id, {}))

        unchanged = await self.service.get_by_id(customer.id)
        self.assertEqual(unchanged.first_name, "Grace")

    async def test_optional_fields(self):
        customer = await self.service.create(customer_data(email=None, address=None))
        self.assertIsNone(customer.email)
        self.assertIsNone(customer.address)


class TestContractService(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        await seed_sample_data(self.session)
        self.service = ContractService(self.session)

    async def test_detail_nests_vehicle_and_customer(self):
        contract = await self.service.create(contract_data(vehicle_id=2, customer_id=3))

        detail = await self.service.get_detail(contract.id)

        self.assertEqual(detail.vehicle.id, 2)
        self.assertEqual(detail.vehicle.model, "Camry")
        self.assertEqual(detail.customer.id, 3)
        self.assertEqual(detail.customer.first_name, "Michael")
        self.assertEqual(detail.images, [])

    async def test_detail_of_unknown_contract(self):
        self.assertIsNone(await self.service.get_detail(404))

    async def test_round_trip_of_created_fields(self):
        data = contract_data(vehicle_id=1, customer_id=1)
        created = await self.service.create(data)

        async with self.database.session() as other:
            fetched = await ContractService(other).get_by_id(created.id)

        for field, value in data.items():
            self.assertEqual(getattr(fetched, field), value, field)

    async def test_offset_dates_keep_their_instant(self):
        plus_two = timezone(timedelta(hours=2))
        created = await self.service.create(contract_data(
            1, 1,
            start_date=datetime(2024, 1, 1, 9, 0, tzinfo=plus_two),
            end_date=datetime(2024, 6, 30, 23, 30, tzinfo=plus_two),
        ))

        async with self.database.session() as other:
            fetched = await ContractService(other).get_by_id(created.id)

        self.assertEqual(fetched.start_date, datetime(2024, 1, 1, 7, 0, tzinfo=timezone.utc))
        self.assertEqual(fetched.start_date.utcoffset(), timedelta(0))
        self.assertEqual(fetched.end_date, datetime(2024, 6, 30, 21, 30, tzinfo=timezone.utc))

    async def test_naive_dates_are_read_as_utc(self):
        created = await self.service.create(contract_data(1, 1, start_date=datetime(2024, 1, 1, 9, 0)))

        async with self.database.session() as other:
            fetched = await ContractService(other).get_by_id(created.id)

        self.assertEqual(fetched.start_date, datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc))
        self.assertEqual(fetched.created_at.utcoffset(), timedelta(0))

    async def test_missing_denormalized_fields_are_copied(self):
        data = contract_data(vehicle_id=4, customer_id=2)
        for field in ("vin_number", "customer_name", "customer_phone"):
            del data[field]

        contract = await self.service.create(data)

        self.assertEqual(contract.vin_number, "4T1B11HK5JU123456")
        self.assertEqual(contract.customer_name, "Sarah Johnson")
        self.assertEqual(contract.customer_phone, "555-0102")

    async def test_supplied_denormalized_fields_are_kept_as_given(self):
        contract = await self.service.create(
            contract_data(vehicle_id=4, customer_id=2, customer_name="S. Johnson")
        )
        self.assertEqual(contract.customer_name, "S. Johnson")
        self.assertEqual(contract.vin_number, "1HGBH41JXMN109186")

    async def test_unknown_reference_when_deriving(self):
        data = contract_data(vehicle_id=99, customer_id=1)
        del data["vin_number"]
        with self.assertRaises(InvalidReferenceError):
            await self.service.create(data)

    async def test_unknown_reference_is_rejected_by_the_store(self):
        with self.assertRaises(IntegrityError):
            await self.service.create(contract_data(vehicle_id=99, customer_id=1))
        await self.session.rollback()

    async def test_snapshot_is_not_resynced(self):
        contract = await self.service.create(contract_data(vehicle_id=1, customer_id=1))
        await CustomerService(self.session).update(1, {"last_name": "Smythe"})

        refreshed = await self.service.get_by_id(contract.id)
        self.assertEqual(refreshed.customer_name, "John Smith")

    async def test_pagination(self):
        for n in range(5):
            await self.service.create(contract_data(1, 1, number=f"CT-{n:04d}"))

        first = await self.service.get_all(skip=0, limit=2)
        second = await self.service.get_all(skip=2, limit=2)
        third = await self.service.get_all(skip=4, limit=2)

        self.assertEqual([len(first), len(second), len(third)], [2, 2, 1])
        numbers = [c.contract_number for c in first + second + third]
        self.assertEqual(numbers, ["CT-0004", "CT-0003", "CT-0002", "CT-0001", "CT-0000"])

    async def test_status_can_move_freely(self):
        contract = await self.service.create(contract_data(1, 1))
        for status in ("completed", "active", "cancelled", "returned"):
            updated = await self.service.update(contract.id, {"status": status})
            self.assertEqual(updated.status, status)

    async def test_empty_update_is_not_found(self):
        contract = await self.service.create(contract_data(1, 1))
        self.assertIsNone(await self.service.update(contract.id, {}))

    async def attach_file(self, contract_id, storage=None):
        key = f"contracts/{contract_id}/files/1_license.png"
        self.session.add(ContractImage(
            contract_id=contract_id,
            file_name="license.png",
            file_url=f"https://cdn.example.com/{key}",
            file_size=2048,
            file_type="image/png",
            uploaded_by="admin",
            image_path=key,
        ))
        await self.session.commit()
        if storage is not None:
            storage.put(key, b"\x89PNG", "image/png")
        return key

    async def test_delete_cascades_to_files(self):
        storage = InMemoryStorage()
        service = ContractService(self.session, storage)
        contract = await service.create(contract_data(1, 1))
        await self.attach_file(contract.id, storage)

        self.assertTrue(await service.delete(contract.id))

        remaining = await self.session.scalar(
            select(func.count()).select_from(ContractImage).where(ContractImage.contract_id == contract.id)
        )
        self.assertEqual(remaining, 0)
        self.assertEqual(storage.objects, {})

    async def test_delete_keeps_contract_when_storage_fails(self):
        storage = InMemoryStorage()
        service = ContractService(self.session, storage)
        contract = await service.create(contract_data(1, 1))
        key = await self.attach_file(contract.id, storage)

        with mock.patch.object(storage, "delete", side_effect=StorageError("unreachable")):
            with self.assertRaises(StorageError):
                await service.delete(contract.id)

        self.assertIsNotNone(await service.get_by_id(contract.id))
        self.assertIn(key, storage.objects)

    async def test_delete_with_files_requires_storage(self):
        contract = await self.service.create(contract_data(1, 1))
        await self.attach_file(contract.id)

        with self.assertRaises(RuntimeError):
            await self.service.delete(contract.id)
        self.assertIsNotNone(await self.service.get_by_id(contract.id))

    async def test_referenced_vehicle_cannot_be_deleted(self):
        await self.service.create(contract_data(1, 1))
        with self.assertRaises(IntegrityError):
            await VehicleService(self.session).delete(1)
        await self.session.rollback()

    async def test_search_filters(self):
        await self.service.create(contract_data(1, 1, number="LEASE-001"))
        await self.service.create(contract_data(
            2, 2, number="RENT-002", vin_number="2T1BURHE0JC123456",
            customer_name="Sarah Johnson", customer_phone="555-0102",
        ))

        self.assertEqual([c.contract_number for c in await self.service.search(q="sarah")], ["RENT-002"])
        self.assertEqual([c.contract_number for c in await self.service.search(q="0101")], ["LEASE-001"])
        self.assertEqual([c.contract_number for c in await self.service.search(contract_number="lease")], ["LEASE-001"])
        self.assertEqual([c.contract_number for c in await self.service.search(vin_number="2t1bur")], ["RENT-002"])
        self.assertEqual(await self.service.search(customer_name="smith", contract_number="rent"), [])
        self.assertEqual(len(await self.service.search()), 2)


if __name__ == "__main__":
    unittest.main()
