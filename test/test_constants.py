from datetime import date


DEFAULT_PASSWORD = 'P@ssw0rd'

TEST_ADMIN_USERNAME = 'admin'
TEST_ADMIN_EMAIL = 'admin@example.com'

TEST_CUSTOMER_USERNAME = 'alice'
ANOTHER_CUSTOMER_USERNAME = 'bob'

TRAVEL_DATE = date(2024, 6, 1)

# API routes
USER_BASE = '/api/user'
USER_LOGIN = '/api/user/login'
BUS_BASE = '/api/bus'
ROUTE_BASE = '/api/route'
SCHEDULE_BASE = '/api/schedule'
BOOKING_BASE = '/api/booking'
MY_BOOKINGS = '/api/booking/my_booking'
AUTH_COOKIE = 'bus_reservation_auth'
