from decimal import Decimal

import pytest

from test.shared.utils import (
    assert_response_status,
    booking_payload,
    create_customer,
    create_trip,
    login_user,
)
from test.test_constants import (
    BOOKING_BASE,
    BUS_BASE,
    MY_BOOKINGS,
    TEST_ADMIN_USERNAME,
    TRAVEL_DATE,
)


@pytest.fixture
def trip(client):
    login_user(client, TEST_ADMIN_USERNAME)
    created = create_trip(client, category='luxury', base_fare='20.00', fare_multiplier='1.2')
    create_customer(client, 'alice', 'Alice Chen')
    create_customer(client, 'bob', 'Bob Lin')
    return created


@pytest.mark.integration
class TestBookingApi:
    def test_booking_requires_login(self, client, trip):
        client.cookies.clear()

        response = client.post(BOOKING_BASE, json=booking_payload(trip))

        assert_response_status(response, 401)

    def test_create_booking(self, client, trip):
        login_user(client, 'alice')

        response = client.post(BOOKING_BASE, json=booking_payload(trip))

        assert_response_status(response, 201)
        body = response.json()
        assert body['status'] == 'confirmed'
        assert Decimal(body['fare']) == Decimal('36.00')
        assert body['seat_number'] == 2

        mine = client.get(MY_BOOKINGS).json()
        assert [b['id'] for b in mine] == [body['id']]

    def test_seat_taken(self, client, trip):
        login_user(client, 'alice')
        assert_response_status(client.post(BOOKING_BASE, json=booking_payload(trip)), 201)
        login_user(client, 'bob')

        response = client.post(BOOKING_BASE, json=booking_payload(trip))

        assert_response_status(response, 409)
        assert client.get(MY_BOOKINGS).json() == []

    def test_seat_out_of_range(self, client, trip):
        login_user(client, 'alice')

        response = client.post(BOOKING_BASE, json=booking_payload(trip, seat_number=9))

        assert_response_status(response, 400)
        assert response.json()['detail'] == 'Seat 9 is out of range (1-3)'

    def test_travel_date_outside_schedule(self, client, trip):
        login_user(client, 'alice')
        payload = booking_payload(trip)
        payload['travel_date'] = '2024-06-02'

        assert_response_status(client.post(BOOKING_BASE, json=payload), 400)

    def test_only_owner_or_admin_can_view(self, client, trip):
        login_user(client, 'alice')
        booking_id = client.post(BOOKING_BASE, json=booking_payload(trip)).json()['id']

        login_user(client, 'bob')
        assert_response_status(client.get(f'{BOOKING_BASE}/{booking_id}'), 403)

        login_user(client, TEST_ADMIN_USERNAME)
        assert_response_status(client.get(f'{BOOKING_BASE}/{booking_id}'), 200)

    def test_cancel_flow(self, client, trip):
        login_user(client, 'alice')
        booking_id = client.post(BOOKING_BASE, json=booking_payload(trip)).json()['id']

        login_user(client, 'bob')
        assert_response_status(client.patch(f'{BOOKING_BASE}/{booking_id}/cancel'), 403)

        login_user(client, 'alice')
        cancelled = client.patch(f'{BOOKING_BASE}/{booking_id}/cancel')
        assert_response_status(cancelled, 200)
        assert cancelled.json()['status'] == 'cancelled'
        assert_response_status(client.patch(f'{BOOKING_BASE}/{booking_id}/cancel'), 409)

        layout = client.get(
            f'{BUS_BASE}/{trip["bus"]["id"]}/seats', params={'travel_date': TRAVEL_DATE.isoformat()}
        )
        assert layout.json()['available_count'] == 3

    def test_admin_cancels_any_booking(self, client, trip):
        login_user(client, 'alice')
        booking_id = client.post(BOOKING_BASE, json=booking_payload(trip)).json()['id']

        login_user(client, TEST_ADMIN_USERNAME)
        response = client.patch(f'{BOOKING_BASE}/{booking_id}/cancel')

        assert_response_status(response, 200)

    def test_update_passenger(self, client, trip):
        login_user(client, 'alice')
        booking_id = client.post(BOOKING_BASE, json=booking_payload(trip)).json()['id']

        response = client.patch(
            f'{BOOKING_BASE}/{booking_id}/passenger',
            json={'passenger_name': 'Alice Wang', 'passenger_phone': '0911111111'},
        )

        assert_response_status(response, 200)
        assert response.json()['passenger_name'] == 'Alice Wang'

    def test_bus_bookings_and_departure_sweep_are_admin_only(self, client, trip):
        login_user(client, 'alice')
        booking_id = client.post(BOOKING_BASE, json=booking_payload(trip)).json()['id']
        assert_response_status(client.get(f'{BOOKING_BASE}/bus/{trip["bus"]["id"]}'), 403)
        assert_response_status(
            client.post(f'{BOOKING_BASE}/complete_departed', json={'today': '2024-06-02'}), 403
        )

        login_user(client, TEST_ADMIN_USERNAME)
        bus_bookings = client.get(f'{BOOKING_BASE}/bus/{trip["bus"]["id"]}')
        assert [b['id'] for b in bus_bookings.json()] == [booking_id]

        swept = client.post(f'{BOOKING_BASE}/complete_departed', json={'today': '2024-06-02'})
        assert_response_status(swept, 200)
        assert [b['status'] for b in swept.json()] == ['completed']

    def test_admin_lists_every_booking_most_recent_first(self, client, trip):
        login_user(client, 'alice')
        first = client.post(BOOKING_BASE, json=booking_payload(trip)).json()['id']
        login_user(client, 'bob')
        second = client.post(BOOKING_BASE, json=booking_payload(trip, seat_number=3)).json()['id']
        assert_response_status(client.get(BOOKING_BASE), 403)

        login_user(client, TEST_ADMIN_USERNAME)
        response = client.get(BOOKING_BASE)

        assert_response_status(response, 200)
        assert [b['id'] for b in response.json()] == [second, first]

    def test_unknown_booking(self, client, trip):
        login_user(client, 'alice')

        response = client.get(f'{BOOKING_BASE}/01936d8f-5e73-7c4e-a9c5-123456789abc')

        assert_response_status(response, 404)
