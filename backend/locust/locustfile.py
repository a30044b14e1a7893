"""
Locust Load Test Suite

Tokens are minted locally with the service's SECRET_KEY, so run this with
the same environment as the API.

Run scenarios:
  TICKET_ID=1 locust -f locustfile.py --tags concurrency  # Seat race
  locust -f locustfile.py --tags throughput               # Listing cache
  locust -f locustfile.py --tags edge                     # Bad input
"""

import os
import random

from locust import HttpUser, task, between, tag

from ticketbari.core.security import create_access_token

TICKET_ID = int(os.environ.get("TICKET_ID", "1"))
SEAT_POOL = [str(n) for n in range(1, 11)]


def random_email():
    return f"load_{random.randint(10000, 99999)}@ticketbari.com"


def auth_headers(email: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'email': email})}"}


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Seat race - many customers, 10 seats

    Run: TICKET_ID=<approved ticket> locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify every seat is claimed at most once:
      SELECT seat_number, COUNT(*) FROM booking_seats WHERE ticket_id = X GROUP BY 1 HAVING COUNT(*) > 1;
    Should return no rows.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.email = random_email()
        self.client.post("/users", json={"email": self.email})
        self.headers = auth_headers(self.email)

    @tag("concurrency")
    @task
    def book_contested_seat(self):
        seats = random.sample(SEAT_POOL, k=random.randint(1, 2))
        with self.client.post("/bookings",
            json={"ticketId": TICKET_ID, "seatNumbers": seats},
            headers=self.headers,
            name="/bookings [contested]",
            catch_response=True
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409: seat taken or sold out
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - listing cache effectiveness

    Run once with REDIS_ENABLED=true and once with it off, then compare
    requests/sec and P95 latency.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_tickets_cached(self):
        page = random.randint(1, 5)
        self.client.get(f"/tickets?page={page}&pageSize=20", name="/tickets [cached]")

    @tag("throughput", "read")
    @task(3)
    def advertised(self):
        self.client.get("/tickets/advertised")

    @tag("throughput", "read")
    @task(3)
    def seat_map(self):
        self.client.get(f"/tickets/taken-seats/{TICKET_ID}", name="/tickets/taken-seats/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - bad input must produce 4xx, never 5xx
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = auth_headers(random_email())

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_ticket(self):
        with self.client.post("/bookings",
            json={"ticketId": 999999, "seatNumbers": ["1"]},
            headers=self.headers,
            catch_response=True
        ) as resp:
            self._expect(resp, (404,))

    @tag("edge")
    @task
    def empty_seats(self):
        with self.client.post("/bookings",
            json={"ticketId": TICKET_ID, "seatNumbers": []},
            headers=self.headers,
            catch_response=True
        ) as resp:
            self._expect(resp, (400, 422))

    @tag("edge")
    @task
    def duplicate_seats(self):
        with self.client.post("/bookings",
            json={"ticketId": TICKET_ID, "seatNumbers": ["3", "3"]},
            headers=self.headers,
            catch_response=True
        ) as resp:
            self._expect(resp, (400,))

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/bookings",
            data="not json at all",
            headers=self.headers,
            catch_response=True
        ) as resp:
            self._expect(resp, (400, 422))

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/bookings",
            json={"ticketId": TICKET_ID, "seatNumbers": ["1"]},
            catch_response=True
        ) as resp:
            self._expect(resp, (401,))
