"""
Tests for day itinerary, location, photo, expense and budget endpoints.
"""
from datetime import date
from decimal import Decimal

import pytest

from tripplanner.models import DayItinerary, Expense, ExpenseCategory, Location, Photo, Trip


PNG = ("photo.png", b"\x89PNG fake image", "image/png")


@pytest.fixture
def day(trip, make_day):
    return make_day(trip, date(2024, 6, 2))


@pytest.fixture
def stranger_location(db_session, stranger, make_day):
    """A location on a day of a trip owned by another user."""
    other_trip = Trip(
        user_id=stranger.id,
        title="Ski week",
        destination="Aspen",
        start_date=date(2024, 6, 1),
        end_date=date(2024, 6, 3),
    )
    db_session.add(other_trip)
    db_session.commit()
    location = Location(day_itinerary_id=make_day(other_trip, date(2024, 6, 2)).id, name="Chalet", order_index=0)
    db_session.add(location)
    db_session.commit()
    db_session.refresh(location)
    return location


def create_location(client, headers, day_id, name, **fields):
    response = client.post(
        "/api/locations",
        json={"day_itinerary_id": day_id, "name": name, **fields},
        headers=headers
    )
    assert response.status_code == 201
    return response.json()


class TestItineraries:
    def test_create_day_is_idempotent(self, client, trip, auth_headers):
        """Test posting the same date twice returns the same day."""
        payload = {"trip_id": trip.id, "date": "2024-06-02", "notes": "Boat rental"}
        first = client.post("/api/itineraries", json=payload, headers=auth_headers)
        second = client.post("/api/itineraries", json={"trip_id": trip.id, "date": "2024-06-02"}, headers=auth_headers)

        assert first.status_code == second.status_code == 201
        assert first.json()["id"] == second.json()["id"]
        assert second.json()["notes"] == "Boat rental"

    def test_list_days_with_children(self, client, trip, day, auth_headers, make_day, make_expense, schema_mode):
        """Test composite days with locations, photos, expenses and totals."""
        make_day(trip, date(2024, 6, 1))
        make_expense(day, "20.00", ExpenseCategory.FOOD)
        make_expense(day, "15.00", ExpenseCategory.TRANSPORT)
        create_location(client, auth_headers, day.id, "Marina")
        client.post(
            f"/api/photos/trip/{trip.id}",
            data={"day_itinerary_id": str(day.id)},
            files={"file": PNG},
            headers=auth_headers
        )

        response = client.get(f"/api/itineraries/trip/{trip.id}", headers=auth_headers)
        assert response.status_code == 200
        days = response.json()
        assert [d["date"] for d in days] == ["2024-06-01", "2024-06-02"]
        assert Decimal(days[0]["day_total"]) == Decimal("0")
        assert days[0]["expenses"] == []
        assert Decimal(days[1]["day_total"]) == Decimal("35.00")
        assert [l["name"] for l in days[1]["locations"]] == ["Marina"]
        assert days[1]["photos"][0]["url"].startswith("/static/trip-photos/")

    def test_get_and_update_day(self, client, day, auth_headers):
        """Test reading one day and updating its notes."""
        response = client.put(f"/api/itineraries/{day.id}", json={"notes": "Rain plan"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["notes"] == "Rain plan"

        response = client.get(f"/api/itineraries/{day.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["notes"] == "Rain plan"
        assert response.json()["locations"] == []

    def test_missing_day(self, client, auth_headers):
        """Test a day that does not exist."""
        response = client.get("/api/itineraries/9999", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Day itinerary not found"


class TestLocations:
    def test_locations_append_in_order(self, client, day, auth_headers):
        """Test new locations go after the day's last one."""
        first = create_location(client, auth_headers, day.id, "Breakfast")
        second = create_location(client, auth_headers, day.id, "Trailhead", type="activity")
        assert (first["order_index"], second["order_index"]) == (0, 1)

        response = client.get(f"/api/locations/day/{day.id}", headers=auth_headers)
        assert [l["name"] for l in response.json()] == ["Breakfast", "Trailhead"]

    def test_create_location_by_trip_and_date(self, client, trip, auth_headers):
        """Test a location on a date creates the day on first use."""
        response = client.post(
            "/api/locations",
            json={"trip_id": trip.id, "date": "2024-06-03", "name": "Pier", "latitude": 39.1, "longitude": -120.0},
            headers=auth_headers
        )
        assert response.status_code == 201
        day_id = response.json()["day_itinerary_id"]

        days = client.get(f"/api/trips/{trip.id}/days", headers=auth_headers).json()["days"]
        assert days[2]["day_itinerary"]["id"] == day_id

    def test_create_location_needs_a_day(self, client, auth_headers):
        """Test a location without a day or date."""
        response = client.post("/api/locations", json={"name": "Nowhere"}, headers=auth_headers)
        assert response.status_code == 400

    def test_reorder_and_delete_keep_gaps(self, client, day, auth_headers):
        """Test reordering, then deleting without renumbering the rest."""
        a = create_location(client, auth_headers, day.id, "A")
        b = create_location(client, auth_headers, day.id, "B")
        c = create_location(client, auth_headers, day.id, "C")

        response = client.put(
            f"/api/locations/day/{day.id}/order",
            json={"locations": [
                {"id": c["id"], "order_index": 0},
                {"id": a["id"], "order_index": 1},
                {"id": b["id"], "order_index": 2},
            ]},
            headers=auth_headers
        )
        assert response.status_code == 200
        assert [l["name"] for l in response.json()] == ["C", "A", "B"]

        assert client.delete(f"/api/locations/{a['id']}", headers=auth_headers).status_code == 204
        remaining = client.get(f"/api/locations/day/{day.id}", headers=auth_headers).json()
        assert [(l["name"], l["order_index"]) for l in remaining] == [("C", 0), ("B", 2)]

    def test_reorder_rejects_foreign_location(self, client, trip, day, auth_headers, make_day):
        """Test reordering a location that belongs to another day."""
        other_day = make_day(trip, date(2024, 6, 3))
        foreign = create_location(client, auth_headers, other_day.id, "Elsewhere")

        response = client.put(
            f"/api/locations/day/{day.id}/order",
            json={"locations": [{"id": foreign["id"], "order_index": 0}]},
            headers=auth_headers
        )
        assert response.status_code == 400

    def test_update_location(self, client, day, auth_headers):
        """Test updating location fields."""
        location = create_location(client, auth_headers, day.id, "Cafe", estimated_cost="12.00")
        response = client.put(
            f"/api/locations/{location['id']}",
            json={"actual_cost": "14.50", "visit_time": "09:30:00"},
            headers=auth_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["actual_cost"]) == Decimal("14.50")
        assert data["visit_time"] == "09:30:00"
        assert data["name"] == "Cafe"

    def test_location_photo(self, client, day, auth_headers, storage):
        """Test uploading a location photo."""
        location = create_location(client, auth_headers, day.id, "Lookout")
        response = client.put(
            f"/api/locations/{location['id']}/photo",
            files={"file": PNG},
            headers=auth_headers
        )
        assert response.status_code == 200
        url = response.json()["photo_url"]
        assert storage.exists("trip-photos", storage.path_from_url("trip-photos", url))

    def test_other_users_day(self, client, day, stranger_headers):
        """Test locations of someone else's day look missing."""
        assert client.get(f"/api/locations/day/{day.id}", headers=stranger_headers).status_code == 404


class TestPhotos:
    def test_upload_list_delete(self, client, trip, day, auth_headers, storage):
        """Test the photo lifecycle."""
        response = client.post(
            f"/api/photos/trip/{trip.id}",
            data={"date": "2024-06-02", "caption": "Sunset"},
            files={"file": PNG},
            headers=auth_headers
        )
        assert response.status_code == 201
        photo = response.json()
        assert photo["day_itinerary_id"] == day.id
        assert photo["caption"] == "Sunset"
        assert storage.exists("trip-photos", photo["file_path"])

        listed = client.get(f"/api/photos/trip/{trip.id}", headers=auth_headers).json()
        assert [p["id"] for p in listed] == [photo["id"]]
        by_day = client.get(f"/api/photos/trip/{trip.id}", params={"day_id": day.id}, headers=auth_headers).json()
        assert [p["id"] for p in by_day] == [photo["id"]]

        assert client.delete(f"/api/photos/{photo['id']}", headers=auth_headers).status_code == 204
        assert not storage.exists("trip-photos", photo["file_path"])
        assert client.get(f"/api/photos/trip/{trip.id}", headers=auth_headers).json() == []

    def test_rejected_upload_creates_no_day(self, client, db_session, trip, auth_headers):
        """Test a rejected upload by date leaves the trip without a new day."""
        response = client.post(
            f"/api/photos/trip/{trip.id}",
            data={"date": "2024-06-02"},
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers
        )
        assert response.status_code == 400
        assert db_session.query(DayItinerary).count() == 0

    def test_upload_rejects_foreign_location(self, client, db_session, trip, day, auth_headers, stranger_location):
        """Test a photo cannot point at another user's location."""
        response = client.post(
            f"/api/photos/trip/{trip.id}",
            data={"day_itinerary_id": str(day.id), "location_id": str(stranger_location.id)},
            files={"file": PNG},
            headers=auth_headers
        )
        assert response.status_code == 400
        assert db_session.query(Photo).count() == 0

    def test_upload_with_own_location(self, client, trip, day, auth_headers):
        """Test a photo attached to a location of the same day."""
        location = create_location(client, auth_headers, day.id, "Beach")
        response = client.post(
            f"/api/photos/trip/{trip.id}",
            data={"date": "2024-06-02", "location_id": str(location["id"])},
            files={"file": PNG},
            headers=auth_headers
        )
        assert response.status_code == 201
        assert response.json()["location_id"] == location["id"]
        assert response.json()["day_itinerary_id"] == day.id

    def test_upload_rejects_oversized(self, client, trip, auth_headers, monkeypatch):
        """Test uploads over the size limit."""
        from tripplanner.core.config import settings

        monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 4)
        response = client.post(f"/api/photos/trip/{trip.id}", files={"file": PNG}, headers=auth_headers)
        assert response.status_code == 400
        assert "too large" in response.json()["detail"]


class TestExpenses:
    def test_expense_lifecycle(self, client, trip, day, auth_headers, schema_mode):
        """Test create, update and delete answer with recomputed totals."""
        created = client.post(
            "/api/expenses",
            json={"day_itinerary_id": day.id, "description": "Lunch", "amount": "20.00", "category": "food"},
            headers=auth_headers
        )
        assert created.status_code == 201
        data = created.json()
        assert Decimal(data["day_total"]) == Decimal("20.00")
        assert Decimal(data["trip_total"]) == Decimal("20.00")
        expense_id = data["expense"]["id"]

        updated = client.put(f"/api/expenses/{expense_id}", json={"amount": "25.50"}, headers=auth_headers)
        assert updated.status_code == 200
        assert Decimal(updated.json()["day_total"]) == Decimal("25.50")

        listed = client.get(f"/api/expenses/day/{day.id}", headers=auth_headers).json()
        assert [e["id"] for e in listed] == [expense_id]

        deleted = client.delete(f"/api/expenses/{expense_id}", headers=auth_headers)
        assert deleted.status_code == 200
        assert deleted.json()["expense"] is None
        assert Decimal(deleted.json()["day_total"]) == Decimal("0")
        assert deleted.json()["day_expenses"] == []

    def test_create_expense_by_date(self, client, trip, auth_headers):
        """Test an expense on a date without a stored day."""
        response = client.post(
            "/api/expenses",
            json={"trip_id": trip.id, "date": "2024-06-01", "description": "Gas", "amount": "45"},
            headers=auth_headers
        )
        assert response.status_code == 201
        assert Decimal(response.json()["trip_total"]) == Decimal("45.00")

    def test_negative_amount(self, client, day, auth_headers):
        """Test an expense with a negative amount."""
        response = client.post(
            "/api/expenses",
            json={"day_itinerary_id": day.id, "description": "Refund", "amount": "-1"},
            headers=auth_headers
        )
        assert response.status_code == 422

    def test_expense_rejects_foreign_location(self, client, db_session, day, auth_headers, make_expense, stranger_location):
        """Test an expense cannot point at another user's location."""
        response = client.post(
            "/api/expenses",
            json={
                "day_itinerary_id": day.id,
                "location_id": stranger_location.id,
                "description": "Lift pass",
                "amount": "80",
            },
            headers=auth_headers
        )
        assert response.status_code == 400
        assert db_session.query(Expense).count() == 0

        expense = make_expense(day, "3.00")
        response = client.put(
            f"/api/expenses/{expense.id}",
            json={"location_id": stranger_location.id},
            headers=auth_headers
        )
        assert response.status_code == 400

    def test_expense_with_missing_location(self, client, day, auth_headers):
        """Test an expense pointing at a location that does not exist."""
        response = client.post(
            "/api/expenses",
            json={"day_itinerary_id": day.id, "location_id": 9999, "description": "Tea", "amount": "4"},
            headers=auth_headers
        )
        assert response.status_code == 404

    def test_expense_with_location_on_same_day(self, client, day, auth_headers):
        """Test an expense linked to one of the day's own locations."""
        location = create_location(client, auth_headers, day.id, "Diner")
        response = client.post(
            "/api/expenses",
            json={"day_itinerary_id": day.id, "location_id": location["id"], "description": "Pie", "amount": "6"},
            headers=auth_headers
        )
        assert response.status_code == 201
        assert response.json()["expense"]["location_id"] == location["id"]

    def test_amount_over_column_limit(self, client, day, auth_headers):
        """Test an amount too large for the money column."""
        response = client.post(
            "/api/expenses",
            json={"day_itinerary_id": day.id, "description": "Yacht", "amount": "10000000000"},
            headers=auth_headers
        )
        assert response.status_code == 422

    def test_day_totals_and_breakdown(self, client, trip, day, auth_headers, make_day, make_expense, schema_mode):
        """Test per-day totals and the expense breakdown of a trip."""
        first = make_day(trip, date(2024, 6, 1))
        make_expense(day, "20.00")
        make_expense(day, "15.00")

        totals = client.get(f"/api/expenses/trip/{trip.id}/days", headers=auth_headers).json()
        assert [row["day_itinerary_id"] for row in totals["day_totals"]] == [first.id, day.id]
        assert Decimal(totals["total_expenses"]) == Decimal("35.00")

        breakdown = client.get(f"/api/expenses/trip/{trip.id}/breakdown", headers=auth_headers).json()
        assert Decimal(breakdown["day_totals"][str(day.id)]) == Decimal("35.00")
        assert breakdown["expenses_by_day"][str(first.id)] == []

    def test_other_users_expense(self, client, day, make_expense, stranger_headers):
        """Test someone else's expense looks missing."""
        expense = make_expense(day, "3.00")
        response = client.put(f"/api/expenses/{expense.id}", json={"amount": "1"}, headers=stranger_headers)
        assert response.status_code == 404


class TestBudget:
    def test_budget_summary(self, client, trip, day, auth_headers, make_expense):
        """Test budget against spending by category."""
        make_expense(day, "300.00", ExpenseCategory.ACCOMMODATION)
        make_expense(day, "100.00", ExpenseCategory.FOOD)

        response = client.get(f"/api/budget/{trip.id}/summary", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["total_budget"]) == Decimal("500.00")
        assert Decimal(data["actual_cost"]) == Decimal("400.00")
        assert Decimal(data["remaining"]) == Decimal("100.00")
        assert data["percent_used"] == 80.0
        assert data["is_over_budget"] is False
        by_category = {c["category"]: c for c in data["categories"]}
        assert by_category["accommodation"]["percentage_of_total"] == 75.0
        assert by_category["food"]["expense_count"] == 1
        assert Decimal(by_category["shopping"]["amount"]) == Decimal("0")

    def test_over_budget(self, client, trip, day, auth_headers, make_expense):
        """Test a trip that spent more than its budget."""
        make_expense(day, "650.00")
        data = client.get(f"/api/budget/{trip.id}/summary", headers=auth_headers).json()
        assert data["is_over_budget"] is True
        assert Decimal(data["remaining"]) == Decimal("-150.00")
