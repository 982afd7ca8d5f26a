from typing import Any

from fastapi.testclient import TestClient

from test.test_constants import (
    AUTH_COOKIE,
    BUS_BASE,
    DEFAULT_PASSWORD,
    ROUTE_BASE,
    SCHEDULE_BASE,
    TRAVEL_DATE,
    USER_BASE,
    USER_LOGIN,
)


def login_user(client: TestClient, username: str, password: str = DEFAULT_PASSWORD) -> Any:
    """Helper function to login a user and set cookies."""
    client.cookies.clear()
    login_response = client.post(USER_LOGIN, json={'username': username, 'password': password})
    assert login_response.status_code == 200, f'Login failed: {login_response.text}'
    if AUTH_COOKIE in login_response.cookies:
        client.cookies.set(AUTH_COOKIE, login_response.cookies[AUTH_COOKIE])
    return login_response


def assert_response_status(response, expected_status: int, message: str | None = None):
    response_text = getattr(response, 'text', getattr(response, 'content', 'N/A'))
    assert response.status_code == expected_status, (
        message or f'Expected {expected_status}, got {response.status_code}: {response_text}'
    )


def create_customer(client: TestClient, username: str, full_name: str) -> dict[str, Any]:
    response = client.post(
        USER_BASE,
        json={
            'username': username,
            'email': f'{username}@example.com',
            'password': DEFAULT_PASSWORD,
            'full_name': full_name,
            'phone_number': '0912345678',
        },
    )
    assert_response_status(response, 201)
    return response.json()


def create_trip(
    client: TestClient,
    *,
    bus_number: str = 'KA-01-0001',
    category: str = 'standard',
    total_seats: int = 3,
    base_fare: str = '10.00',
    fare_multiplier: str = '1.0',
) -> dict[str, Any]:
    """Create bus, route and a one-off schedule on TRAVEL_DATE; caller must be logged in as admin"""
    bus = client.post(
        BUS_BASE,
        json={
            'bus_number': bus_number,
            'name': 'Test Coach',
            'category': category,
            'total_seats': total_seats,
            'base_fare': base_fare,
        },
    )
    assert_response_status(bus, 201)
    route = client.post(
        ROUTE_BASE,
        json={
            'source': 'Bangalore',
            'destination': 'Mysore',
            'distance_km': '145',
            'duration_minutes': 180,
            'fare_multiplier': fare_multiplier,
        },
    )
    assert_response_status(route, 201)
    schedule = client.post(
        SCHEDULE_BASE,
        json={
            'bus_id': bus.json()['id'],
            'route_id': route.json()['id'],
            'departure_time': '08:00:00',
            'arrival_time': '11:00:00',
            'service_date': TRAVEL_DATE.isoformat(),
        },
    )
    assert_response_status(schedule, 201)
    return {'bus': bus.json(), 'route': route.json(), 'schedule': schedule.json()}


def booking_payload(trip: dict[str, Any], *, seat_number: int = 2) -> dict[str, Any]:
    return {
        'bus_id': trip['bus']['id'],
        'schedule_id': trip['schedule']['id'],
        'seat_number': seat_number,
        'passenger_name': 'Alice Chen',
        'passenger_phone': '0912345678',
        'travel_date': TRAVEL_DATE.isoformat(),
    }
